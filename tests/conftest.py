"""Pytest configuration and fixtures."""

from __future__ import annotations

import shutil
import tempfile
import threading
from collections.abc import Generator, Sequence
from pathlib import Path

import pytest

from macsign.app.ports import (
    IdentityRecord,
    IdentityStoreError,
    ProcessLaunchError,
    ProcessResult,
)
from macsign.config import Settings


class FakeProcessRunner:
    """Process runner that records launches and replays a scripted result."""

    def __init__(
        self,
        result: ProcessResult | None = None,
        *,
        launch_error: OSError | None = None,
    ) -> None:
        self.result = result or ProcessResult(exit_code=0, output=b"")
        self.launch_error = launch_error
        self.calls: list[tuple[Path, list[str]]] = []
        self.gate: threading.Event | None = None

    @property
    def launch_count(self) -> int:
        return len(self.calls)

    def run(self, executable: Path, args: Sequence[str]) -> ProcessResult:
        if self.launch_error is not None:
            raise ProcessLaunchError(executable, self.launch_error)
        self.calls.append((executable, list(args)))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        return self.result


class FakeIdentityStore:
    """In-memory credential store."""

    def __init__(self, records: Sequence[IdentityRecord] = (), *, fail: bool = False) -> None:
        self.records = list(records)
        self.fail = fail
        self.queries = 0

    def list_signing_identities(self) -> list[IdentityRecord]:
        self.queries += 1
        if self.fail:
            raise IdentityStoreError("keychain unavailable")
        return list(self.records)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_targets(temp_dir: Path) -> dict[str, Path]:
    """Create one file of each kind the signer is pointed at."""

    app_bundle = temp_dir / "Example.app"
    (app_bundle / "Contents" / "MacOS").mkdir(parents=True)
    (app_bundle / "Contents" / "MacOS" / "Example").write_bytes(b"\xcf\xfa\xed\xfe")

    package = temp_dir / "Installer.pkg"
    package.write_bytes(b"xar!")

    image = temp_dir / "Disk.dmg"
    image.write_bytes(b"koly")

    text = temp_dir / "notes.txt"
    text.write_text("not signable")

    return {"app": app_bundle, "pkg": package, "dmg": image, "txt": text}


@pytest.fixture
def make_runner() -> type[FakeProcessRunner]:
    """Factory for process runners with a scripted result or launch error."""

    return FakeProcessRunner


@pytest.fixture
def make_store() -> type[FakeIdentityStore]:
    """Factory for in-memory credential stores."""

    return FakeIdentityStore


@pytest.fixture
def process_runner(make_runner: type[FakeProcessRunner]) -> FakeProcessRunner:
    """Process runner whose child always exits 0."""

    return make_runner()


@pytest.fixture
def identity_store(make_store: type[FakeIdentityStore]) -> FakeIdentityStore:
    """Credential store holding two labelled identities."""

    return make_store(
        [
            IdentityRecord(reference="B" * 40, label="Developer ID Application: ZCorp (ZZZ111)"),
            IdentityRecord(reference="A" * 40, label="Developer ID Application: Acme (AAA111)"),
        ]
    )


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated macsign settings scoped to tests."""

    import macsign.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(
        codesign_path=temp_dir / "bin" / "codesign",
        security_path=temp_dir / "bin" / "security",
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings
