"""Cross-cutting session state."""

from dataclasses import dataclass


@dataclass
class SessionState:
    """Scalar state owned by the session controller.

    ``pending_response`` is True from the moment a turn is handed to the
    scheduler until its reply is appended or the attempt fails.
    """

    pending_response: bool = False
