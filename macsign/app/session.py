"""Signing session state machine with background dispatch.

A session holds what a presentation layer renders: the identities on offer,
the current selection, whether a signing run is in flight, and the outcome
of the last run. Signing runs on a single background worker so the caller's
thread never blocks on ``codesign``.

States::

    IDLE -> SIGNING -> SUCCEEDED | FAILED

``SUCCEEDED`` and ``FAILED`` hold until the next request (or :meth:`reset`).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from pathlib import Path

from macsign.app.identity_service import IdentityLister
from macsign.app.signing_service import SigningService
from macsign.targets import FileTarget, SignOutcome, SignRequest, SignSuccess

logger = logging.getLogger(__name__)

SIGNING_STATUS_MESSAGE = "Signing..."


class SessionState(str, Enum):
    """Lifecycle of a single signing session."""

    IDLE = "idle"
    SIGNING = "signing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SessionError(RuntimeError):
    """Raised when a session cannot accept a request."""


class SessionBusyError(SessionError):
    """Raised when a sign request arrives while another is in flight."""


class InvalidSignRequestError(SessionError, ValueError):
    """Raised when a sign request lacks a file or an identity."""


class SessionClosedError(SessionError):
    """Raised when a closed session is asked to sign."""


class SigningSession:
    """Observable signing session driving one ``codesign`` run at a time."""

    def __init__(
        self,
        lister: IdentityLister,
        signer: SigningService,
        *,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self.lister = lister
        self.signer = signer
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="macsign-sign"
        )
        self._lock = threading.Lock()
        self._state = SessionState.IDLE
        self._status_message: str | None = None
        self._last_outcome: SignOutcome | None = None
        self._available_identities: list[str] = []
        self._selected_file: FileTarget | None = None
        self._selected_identity: str | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_signing(self) -> bool:
        return self._state is SessionState.SIGNING

    @property
    def last_status_message(self) -> str | None:
        return self._status_message

    @property
    def last_outcome(self) -> SignOutcome | None:
        return self._last_outcome

    @property
    def signing_successful(self) -> bool:
        return self._state is SessionState.SUCCEEDED

    @property
    def available_identities(self) -> list[str]:
        return list(self._available_identities)

    @property
    def selected_file(self) -> FileTarget | None:
        return self._selected_file

    @property
    def selected_identity(self) -> str | None:
        return self._selected_identity

    @property
    def can_sign(self) -> bool:
        """True when a file and identity are selected and nothing is in flight."""

        return (
            self._selected_file is not None
            and bool(self._selected_identity)
            and not self.is_signing
        )

    def load_identities(self) -> list[str]:
        """Refresh the identities on offer from the credential store."""

        labels = self.lister.list_signing_identities()
        with self._lock:
            self._available_identities = labels
        logger.debug("Found identities: %s", labels)
        return list(labels)

    def select_file(self, path: str | Path) -> FileTarget:
        """Select the file to sign, clearing any stale status message."""

        target = FileTarget.from_path(path)
        with self._lock:
            self._selected_file = target
            self._status_message = None
        return target

    def select_identity(self, identity: str | None) -> None:
        with self._lock:
            self._selected_identity = identity or None

    def reset(self) -> None:
        """Return a finished session to ``IDLE``."""

        with self._lock:
            if self._state is SessionState.SIGNING:
                raise SessionBusyError("Cannot reset while signing is in progress")
            self._state = SessionState.IDLE
            self._status_message = None
            self._last_outcome = None

    def sign(
        self,
        request: SignRequest | None = None,
        *,
        on_complete: Callable[[Future[SignOutcome]], None] | None = None,
    ) -> Future[SignOutcome]:
        """Start signing in the background and return a future for the outcome.

        Uses the current selection when ``request`` is omitted. Session state
        is updated before the future resolves, so ``on_complete`` and any
        waiter observe the final state.

        Raises:
            SessionBusyError: If a signing run is already in flight
            InvalidSignRequestError: If the file or identity is missing
            SessionClosedError: If the session has been closed
        """
        with self._lock:
            if self._state is SessionState.SIGNING:
                raise SessionBusyError("A signing operation is already in progress")

            if request is None:
                request = SignRequest(target=self._selected_file, identity=self._selected_identity)
            target, identity = request.target, request.identity
            if target is None or not identity:
                raise InvalidSignRequestError("Select a file and a signing identity first")

            previous = (self._state, self._status_message, self._last_outcome)
            self._state = SessionState.SIGNING
            self._status_message = SIGNING_STATUS_MESSAGE
            self._last_outcome = None
            try:
                future = self._executor.submit(self._run, target, identity)
            except RuntimeError as exc:
                self._state, self._status_message, self._last_outcome = previous
                raise SessionClosedError("Signing session is closed") from exc

        if on_complete is not None:
            future.add_done_callback(on_complete)
        return future

    def _run(self, target: FileTarget, identity: str) -> SignOutcome:
        try:
            outcome = self.signer.sign(target, identity)
        except Exception as exc:
            with self._lock:
                self._state = SessionState.FAILED
                self._status_message = f"Signing failed: {exc}"
            raise

        with self._lock:
            self._last_outcome = outcome
            if isinstance(outcome, SignSuccess):
                self._state = SessionState.SUCCEEDED
                self._status_message = f"Successfully signed: {outcome.target.display_name}"
            else:
                self._state = SessionState.FAILED
                self._status_message = outcome.error.description
        return outcome

    def close(self, *, wait: bool = True) -> None:
        """Shut down the background worker if this session created it."""

        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> SigningSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
