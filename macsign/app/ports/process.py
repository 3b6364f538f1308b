"""Process runner port interface for external tools."""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel


class ProcessResult(BaseModel):
    """Exit status and combined stdout/stderr of a finished child process."""

    exit_code: int
    output: bytes = b""


class ProcessLaunchError(RuntimeError):
    """Raised when a child process cannot be spawned.

    ``cause`` is the ``OSError`` from the spawn, or the ``ValueError`` raised
    for arguments the OS cannot accept (such as an embedded NUL byte).
    """

    def __init__(self, executable: Path | str, cause: OSError | ValueError) -> None:
        detail = getattr(cause, "strerror", None) or str(cause)
        super().__init__(f"{executable}: {detail}")
        self.executable = Path(executable)
        self.cause = cause


class ProcessRunnerPort(Protocol):
    """Port interface for running an executable to completion.

    Side effects: spawns a child process and blocks until it exits.
    """

    def run(self, executable: Path, args: Sequence[str]) -> ProcessResult:
        """Run ``executable`` with ``args`` and wait for it to exit.

        Args:
            executable: Absolute path to the program
            args: Arguments, not including the program itself

        Returns:
            ProcessResult with the exit code and merged output bytes

        Raises:
            ProcessLaunchError: If the program cannot be started
        """
        ...
