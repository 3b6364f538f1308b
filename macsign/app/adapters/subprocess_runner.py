"""Child-process adapter with merged stdout/stderr capture."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from macsign.app.ports.process import ProcessLaunchError, ProcessResult, ProcessRunnerPort

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunnerPort):
    """Run executables with :mod:`subprocess`, blocking until they exit."""

    def run(self, executable: Path, args: Sequence[str]) -> ProcessResult:
        command = [str(executable), *args]
        logger.debug("Running %s", command)
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                check=False,
            )
        except (OSError, ValueError) as exc:
            raise ProcessLaunchError(executable, exc) from exc

        logger.debug("%s exited with %d", executable, completed.returncode)
        return ProcessResult(exit_code=completed.returncode, output=completed.stdout or b"")
