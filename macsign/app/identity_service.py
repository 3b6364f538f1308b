"""Signing identity listing service."""

from __future__ import annotations

import logging

from macsign.app.ports import IdentityStoreError, IdentityStorePort

logger = logging.getLogger(__name__)


class IdentityLister:
    """Turn credential-store records into a sorted list of identity labels.

    Identities whose label cannot be derived are dropped rather than failing
    the whole listing, and a store that cannot be queried yields an empty
    list. Nothing is cached: every call queries the store afresh.
    """

    def __init__(self, store: IdentityStorePort) -> None:
        self.store = store

    def list_signing_identities(self) -> list[str]:
        """Return signing identity labels sorted ascending (empty on failure)."""

        try:
            records = list(self.store.list_signing_identities())
        except IdentityStoreError as exc:
            logger.warning("No signing identities available: %s", exc)
            return []

        labels = [record.label for record in records if record.label]
        skipped = len(records) - len(labels)
        if skipped:
            logger.debug("Skipped %d identities without a certificate label", skipped)

        return sorted(labels)
