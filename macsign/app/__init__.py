"""Application layer for macsign.

This layer orchestrates signing without touching the keychain or spawning
processes directly. All side effects are delegated to adapters via port
interfaces.
"""

__all__ = [
    "IdentityLister",
    "SigningService",
    "SigningSession",
    "SessionState",
]

from macsign.app.identity_service import IdentityLister
from macsign.app.session import SessionState, SigningSession
from macsign.app.signing_service import SigningService
