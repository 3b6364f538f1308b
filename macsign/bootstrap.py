"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from macsign.app import IdentityLister, SigningService, SigningSession
from macsign.app.adapters import SecurityIdentityStore, SubprocessRunner
from macsign.app.ports import IdentityStorePort, ProcessRunnerPort
from macsign.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    process_runner: ProcessRunnerPort
    identity_store: IdentityStorePort
    identity_lister: IdentityLister
    signing_service: SigningService

    def create_session(self) -> SigningSession:
        """Return a fresh signing session over the wired services."""

        return SigningSession(self.identity_lister, self.signing_service)


def bootstrap_application(
    settings: Settings | None = None,
    *,
    process_runner: ProcessRunnerPort | None = None,
    identity_store: IdentityStorePort | None = None,
) -> ApplicationContainer:
    """Create the application container with default adapters.

    ``process_runner`` and ``identity_store`` replace the host adapters,
    which is how tests run without a keychain or ``codesign``.
    """

    active_settings = settings or get_settings()
    runner = process_runner or SubprocessRunner()
    store = identity_store or SecurityIdentityStore(
        runner,
        security_path=active_settings.security_path,
        keychain=active_settings.keychain,
        valid_only=active_settings.valid_identities_only,
    )

    return ApplicationContainer(
        settings=active_settings,
        process_runner=runner,
        identity_store=store,
        identity_lister=IdentityLister(store),
        signing_service=SigningService(runner, codesign_path=active_settings.codesign_path),
    )
