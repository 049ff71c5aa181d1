"""Session engine configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_GREETING = (
    "Hello! I'm Companion AI, your intelligent assistant for appliance "
    "troubleshooting and maintenance. You can also upload PDF manuals or "
    "documents for me to analyze. How can I help you today?"
)


class EngineConfig(BaseModel):
    """Configuration for a chat session.

    Attributes:
        responder: Which response generator to use ("scripted" or "agent").
        response_timeout_seconds: Upper bound on a single generator call.
        scripted_delay_seconds: Simulated thinking time of the scripted responder.
        greeting: Assistant message a new session opens with ("" disables it).
    """

    responder: str = Field(
        default_factory=lambda: os.getenv("COMPANION_RESPONDER", "scripted"),
        description="Response generator backend",
    )
    response_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("COMPANION_RESPONSE_TIMEOUT", "30")),
        gt=0.0,
        description="Seconds before a pending response is abandoned",
    )
    scripted_delay_seconds: float = Field(
        default_factory=lambda: float(os.getenv("COMPANION_SCRIPTED_DELAY", "1.0")),
        ge=0.0,
        description="Delay of the scripted responder",
    )
    greeting: str = Field(
        default_factory=lambda: os.getenv("COMPANION_GREETING", DEFAULT_GREETING),
        description="Opening assistant message",
    )

    @field_validator("responder")
    @classmethod
    def validate_responder(cls, v: str) -> str:
        """Normalize and check the responder name."""
        v = v.strip().lower()
        if v not in ("scripted", "agent"):
            raise ValueError("responder must be 'scripted' or 'agent'")
        return v


def get_engine_config() -> EngineConfig:
    """Create engine configuration from environment."""
    return EngineConfig()
