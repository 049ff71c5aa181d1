"""Authentication gate in front of the chat session.

Login is simulated: any non-blank email and password are accepted. The
engine itself only ever sees the resulting boolean.
"""

import logging
from collections.abc import Callable

from companion_ai.engine.errors import AuthenticationRejected, SessionNotAuthenticated
from companion_ai.engine.session import SessionController

logger = logging.getLogger(__name__)


class SessionGate:
    """Holds the authenticated flag and the session it unlocks.

    Logging out discards the session; logging in again starts a new one.
    """

    def __init__(self, session_factory: Callable[[], SessionController] = SessionController) -> None:
        self._session_factory = session_factory
        self._session: SessionController | None = None

    @property
    def authenticated(self) -> bool:
        return self._session is not None

    @property
    def controller(self) -> SessionController:
        """The current session.

        Raises:
            SessionNotAuthenticated: If nobody is logged in.
        """
        if self._session is None:
            raise SessionNotAuthenticated()
        return self._session

    def login(self, email: str, password: str) -> SessionController:
        if not email.strip() or not password.strip():
            raise AuthenticationRejected("Email and password are required")
        logger.info("Login accepted")
        return self.restore()

    def restore(self) -> SessionController:
        """Start a session for an already-authenticated user if none exists."""
        if self._session is None:
            self._session = self._session_factory()
            logger.info("Session started")
        return self._session

    def logout(self) -> None:
        if self._session is not None:
            logger.info("Session ended")
        self._session = None


# Module-level singleton instance
_session_gate: SessionGate | None = None


def get_session_gate() -> SessionGate:
    """Get or create the process-wide session gate."""
    global _session_gate
    if _session_gate is None:
        _session_gate = SessionGate()
    return _session_gate


def reset_session_gate(gate: SessionGate | None = None) -> None:
    """Replace the process-wide gate (tests install one with a stub responder)."""
    global _session_gate
    _session_gate = gate
