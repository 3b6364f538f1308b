"""Signing targets, requests, outcomes and error kinds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

UNSUPPORTED_FILE_TYPE_REASON = "unsupported file type"


class FileCategory(str, Enum):
    """How a file is handed to ``codesign``, derived from its extension."""

    APPLICATION = "application"
    PACKAGE_OR_IMAGE = "package_or_image"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_path(cls, path: Path) -> FileCategory:
        suffix = path.suffix.lower()
        if suffix == ".app":
            return cls.APPLICATION
        if suffix in {".pkg", ".dmg"}:
            return cls.PACKAGE_OR_IMAGE
        return cls.UNSUPPORTED


@dataclass(frozen=True, slots=True)
class FileTarget:
    """A filesystem path paired with its signing category."""

    path: Path
    category: FileCategory

    @classmethod
    def from_path(cls, path: str | Path) -> FileTarget:
        resolved = Path(path)
        return cls(path=resolved, category=FileCategory.from_path(resolved))

    @property
    def is_supported(self) -> bool:
        return self.category is not FileCategory.UNSUPPORTED

    @property
    def display_name(self) -> str:
        return self.path.name


@dataclass(frozen=True, slots=True)
class SignRequest:
    """A file target paired with the identity label chosen to sign it."""

    target: FileTarget | None
    identity: str | None

    @property
    def is_complete(self) -> bool:
        """True when both a target and a non-empty identity are present."""

        return self.target is not None and bool(self.identity)

    @property
    def is_valid(self) -> bool:
        """True when the request is complete and the target type is signable."""

        return self.is_complete and self.target is not None and self.target.is_supported


class SigningError(Exception):
    """Base class for errors that end a signing attempt."""

    @property
    def description(self) -> str:
        return str(self)


class UnsupportedFileTypeError(SigningError):
    """Target extension is not one ``codesign`` is driven for."""

    def __init__(self, path: Path | None = None) -> None:
        super().__init__(UNSUPPORTED_FILE_TYPE_REASON)
        self.path = path

    @property
    def description(self) -> str:
        return "Unsupported file type. Please select a .pkg, .dmg, or .app file."


class ExternalToolFailureError(SigningError):
    """Signing tool exited non-zero."""

    def __init__(self, diagnostic: str, *, exit_code: int) -> None:
        super().__init__(diagnostic)
        self.diagnostic = diagnostic
        self.exit_code = exit_code

    @property
    def description(self) -> str:
        return f"Signing failed: {self.diagnostic}"


class ExternalToolLaunchFailureError(SigningError):
    """Signing tool could not be started at all."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause

    @property
    def description(self) -> str:
        return f"Could not launch signing tool: {self.cause}"


@dataclass(frozen=True, slots=True)
class SignSuccess:
    """The signing tool accepted the request."""

    target: FileTarget

    @property
    def succeeded(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class SignFailure:
    """The signing attempt ended in ``error``; ``reason`` is its diagnostic text."""

    reason: str
    error: SigningError

    @property
    def succeeded(self) -> bool:
        return False


SignOutcome = SignSuccess | SignFailure
