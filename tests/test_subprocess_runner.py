"""Subprocess adapter against real child processes."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from macsign.app.adapters import SubprocessRunner
from macsign.app.ports import ProcessLaunchError
from macsign.app.signing_service import SigningService
from macsign.targets import ExternalToolLaunchFailureError, FileTarget, SignFailure


def test_stdout_and_stderr_are_merged() -> None:
    script = (
        "import sys; sys.stdout.write('to-out'); sys.stdout.flush(); "
        "sys.stderr.write('to-err'); sys.exit(3)"
    )

    result = SubprocessRunner().run(Path(sys.executable), ["-c", script])

    assert result.exit_code == 3
    assert b"to-out" in result.output
    assert b"to-err" in result.output


def test_zero_exit_with_no_output() -> None:
    result = SubprocessRunner().run(Path(sys.executable), ["-c", "pass"])

    assert result.exit_code == 0
    assert result.output == b""


def test_missing_executable_raises_launch_error(temp_dir: Path) -> None:
    missing = temp_dir / "no-such-tool"

    with pytest.raises(ProcessLaunchError) as excinfo:
        SubprocessRunner().run(missing, ["--help"])

    assert excinfo.value.executable == missing
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_argument_with_nul_byte_raises_launch_error() -> None:
    with pytest.raises(ProcessLaunchError) as excinfo:
        SubprocessRunner().run(Path(sys.executable), ["-c", "pass\0"])

    assert isinstance(excinfo.value.cause, ValueError)
    assert "null byte" in str(excinfo.value)


def test_unlaunchable_codesign_comes_back_as_failure() -> None:
    service = SigningService(SubprocessRunner(), codesign_path=Path(sys.executable))

    outcome = service.sign(FileTarget.from_path("Example.app"), "Developer ID\0Application")

    assert isinstance(outcome, SignFailure)
    assert isinstance(outcome.error, ExternalToolLaunchFailureError)
    assert "null byte" in outcome.reason
