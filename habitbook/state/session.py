"""Authenticated session lifecycle."""

import logging
from typing import Callable, Optional

from habitbook.remote.base import BaseRemote, Session, SessionListener

logger = logging.getLogger(__name__)


class SessionManager:
    """Tracks the process-wide session of a remote store.

    The listener hears about the initial session once on start, and then
    about every change of signed-in user. Token refreshes for the same
    user are not reported.
    """

    def __init__(self, remote: BaseRemote):
        self._remote = remote
        self._session: Optional[Session] = None
        self._listener: Optional[SessionListener] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def user_id(self) -> Optional[str]:
        return self._session.user_id if self._session else None

    def start(self, listener: SessionListener) -> None:
        """Query the current session and start listening for changes."""
        self._listener = listener
        self._session = self._remote.get_current_session()
        self._unsubscribe = self._remote.on_session_change(self._handle_change)
        listener(self._session)

    def stop(self) -> None:
        """Stop listening for session changes."""
        if self._unsubscribe is not None:
            try:
                self._unsubscribe()
            except Exception as e:
                logger.warning("Failed to unsubscribe from session changes: %s", e)
            self._unsubscribe = None
        self._listener = None

    def _handle_change(self, session: Optional[Session]) -> None:
        previous = self.user_id
        self._session = session
        if self.user_id == previous:
            return
        logger.info("Session changed: %s", self.user_id or "signed out")
        if self._listener is not None:
            self._listener(session)

    def sign_in_with_code(self, email: str, code: str) -> bool:
        """Complete sign-in with an emailed one-time code.

        Returns:
            True if signed in. On failure the reason is available from
            the remote's ``get_last_error``.
        """
        if not self._remote.verify_code(email, code):
            return False
        self._handle_change(self._remote.get_current_session())
        return True

    def sign_out(self) -> bool:
        """Sign out and report the change."""
        ok = self._remote.sign_out()
        self._handle_change(None)
        return ok
