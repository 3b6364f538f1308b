"""Concrete adapters wiring application ports to the host system."""

from __future__ import annotations

from .keychain import SecurityIdentityStore, parse_find_identity_output
from .subprocess_runner import SubprocessRunner

__all__ = [
    "SecurityIdentityStore",
    "SubprocessRunner",
    "parse_find_identity_output",
]
