"""Port interfaces for the macsign application layer.

These protocol interfaces define contracts for adapters.
Services depend on these ports, never on concrete implementations.
"""

__all__ = [
    "IdentityRecord",
    "IdentityStoreError",
    "IdentityStorePort",
    "ProcessLaunchError",
    "ProcessResult",
    "ProcessRunnerPort",
]

from macsign.app.ports.identity_store import (
    IdentityRecord,
    IdentityStoreError,
    IdentityStorePort,
)
from macsign.app.ports.process import ProcessLaunchError, ProcessResult, ProcessRunnerPort
