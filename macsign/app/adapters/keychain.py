"""Keychain identity store backed by ``security find-identity``."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from macsign.app.ports.identity_store import (
    IdentityRecord,
    IdentityStoreError,
    IdentityStorePort,
)
from macsign.app.ports.process import ProcessLaunchError, ProcessRunnerPort

logger = logging.getLogger(__name__)

# `  1) 0123...CDEF "Developer ID Application: Example (TEAMID)" (CSSMERR_TP_CERT_EXPIRED)`
_IDENTITY_LINE = re.compile(
    r'^\s*\d+\)\s+(?P<reference>[0-9A-Fa-f]{40})(?:\s+"(?P<label>.*)")?(?:\s+\([^)]*\))?\s*$'
)
_SECTION_HEADERS = {
    "matching identities": "matching",
    "valid identities only": "valid",
}


def parse_find_identity_output(text: str, *, valid_only: bool = True) -> list[IdentityRecord]:
    """Parse ``security find-identity`` output into identity records.

    Without ``-v`` the tool prints a "Matching identities" section followed by
    a "Valid identities only" section that repeats the valid entries, so only
    the section matching ``valid_only`` is kept.
    """

    sections: dict[str | None, list[IdentityRecord]] = {}
    current: str | None = None

    for line in text.splitlines():
        header = _SECTION_HEADERS.get(line.strip().lower())
        if header is not None:
            current = header
            continue

        match = _IDENTITY_LINE.match(line)
        if match is None:
            continue

        label = match.group("label")
        sections.setdefault(current, []).append(
            IdentityRecord(reference=match.group("reference").upper(), label=label or None)
        )

    wanted = "valid" if valid_only else "matching"
    if wanted in sections:
        return sections[wanted]
    return [record for records in sections.values() for record in records]


class SecurityIdentityStore(IdentityStorePort):
    """Query code-signing identities with the ``security`` command-line tool."""

    def __init__(
        self,
        runner: ProcessRunnerPort,
        *,
        security_path: Path = Path("/usr/bin/security"),
        keychain: Path | None = None,
        valid_only: bool = True,
    ) -> None:
        self._runner = runner
        self._security_path = security_path
        self._keychain = keychain
        self._valid_only = valid_only

    def _arguments(self) -> list[str]:
        args = ["find-identity"]
        if self._valid_only:
            args.append("-v")
        args.extend(["-p", "codesigning"])
        if self._keychain is not None:
            args.append(str(self._keychain))
        return args

    def list_signing_identities(self) -> list[IdentityRecord]:
        try:
            result = self._runner.run(self._security_path, self._arguments())
        except ProcessLaunchError as exc:
            raise IdentityStoreError(f"Cannot query keychain: {exc}") from exc

        text = result.output.decode("utf-8", errors="replace")
        if result.exit_code != 0:
            raise IdentityStoreError(
                f"security find-identity exited with {result.exit_code}: {text.strip()}"
            )

        records = parse_find_identity_output(text, valid_only=self._valid_only)
        logger.debug("Keychain reported %d signing identities", len(records))
        return records
