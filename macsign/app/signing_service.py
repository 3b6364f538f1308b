"""Signing orchestration over the external ``codesign`` tool."""

from __future__ import annotations

import logging
from pathlib import Path

from macsign.app.ports import ProcessLaunchError, ProcessResult, ProcessRunnerPort
from macsign.targets import (
    UNSUPPORTED_FILE_TYPE_REASON,
    ExternalToolFailureError,
    ExternalToolLaunchFailureError,
    FileCategory,
    FileTarget,
    SignFailure,
    SignOutcome,
    SignSuccess,
    UnsupportedFileTypeError,
)

logger = logging.getLogger(__name__)


def build_codesign_arguments(target: FileTarget, identity: str) -> list[str]:
    """Return ``codesign`` arguments for signing ``target`` with ``identity``.

    Bundles are force re-signed deeply so nested code is covered; packages
    and disk images are signed as a single unit.

    Raises:
        UnsupportedFileTypeError: If the target category cannot be signed
    """

    arguments = ["-s", identity]
    if target.category is FileCategory.APPLICATION:
        arguments.extend(["-f", "--deep", str(target.path)])
    elif target.category is FileCategory.PACKAGE_OR_IMAGE:
        arguments.append(str(target.path))
    else:
        raise UnsupportedFileTypeError(target.path)
    return arguments


def _failure_reason(result: ProcessResult) -> str:
    try:
        text = result.output.decode("utf-8").rstrip()
    except UnicodeDecodeError:
        text = ""
    return text or f"Unknown error (exit code: {result.exit_code})"


class SigningService:
    """Sign a file target with a keychain identity via ``codesign``.

    Every call produces exactly one outcome; failures are returned, not
    raised, and are never retried.
    """

    def __init__(
        self,
        runner: ProcessRunnerPort,
        *,
        codesign_path: Path = Path("/usr/bin/codesign"),
    ) -> None:
        self.runner = runner
        self.codesign_path = codesign_path

    def sign(self, target: FileTarget, identity: str) -> SignOutcome:
        """Sign ``target`` with ``identity`` and classify the result.

        Args:
            target: File to sign
            identity: Label of the keychain identity passed to ``codesign -s``

        Returns:
            SignSuccess on exit status 0, otherwise SignFailure

        Raises:
            ValueError: If ``identity`` is empty
        """
        if not identity:
            raise ValueError("A signing identity is required")

        if not target.is_supported:
            logger.info("Refusing to sign %s: unsupported file type", target.path)
            return SignFailure(
                reason=UNSUPPORTED_FILE_TYPE_REASON,
                error=UnsupportedFileTypeError(target.path),
            )

        arguments = build_codesign_arguments(target, identity)
        try:
            result = self.runner.run(self.codesign_path, arguments)
        except ProcessLaunchError as exc:
            logger.info("Could not launch %s: %s", self.codesign_path, exc)
            error = ExternalToolLaunchFailureError(exc)
            return SignFailure(reason=str(error), error=error)

        if result.exit_code != 0:
            reason = _failure_reason(result)
            logger.info("Signing %s failed (exit %d): %s", target.path, result.exit_code, reason)
            return SignFailure(
                reason=reason,
                error=ExternalToolFailureError(reason, exit_code=result.exit_code),
            )

        logger.info("Signed %s with %s", target.path, identity)
        return SignSuccess(target=target)
