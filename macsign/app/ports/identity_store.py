"""Identity store port interface for keychain lookups."""

from collections.abc import Sequence
from typing import Protocol

from pydantic import BaseModel


class IdentityRecord(BaseModel):
    """One signing identity as reported by the credential store.

    ``label`` is ``None`` when the store could not derive a certificate
    subject for the identity.
    """

    reference: str
    label: str | None = None


class IdentityStoreError(RuntimeError):
    """Raised when the credential store cannot be queried."""


class IdentityStorePort(Protocol):
    """Port interface for querying signing-capable identities.

    Adapters: ``security find-identity`` (keychain), in-memory fakes.

    Side effects: read-only access to the credential store.
    """

    def list_signing_identities(self) -> Sequence[IdentityRecord]:
        """Return every identity tagged as usable for code signing.

        Returns:
            Records in store order, including ones with no derivable label

        Raises:
            IdentityStoreError: If the store is unavailable or the query fails
        """
        ...
