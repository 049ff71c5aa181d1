"""Settings for the LLM-backed responder.

Read from the environment (and ``.env``) when the agent responder is
selected. Any OpenAI-compatible endpoint works through ``LLM_BASE_URL``.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


class AgentConfig(BaseModel):
    """Model connection and prompt budget for AgentResponder.

    Attributes:
        api_key: Credential for the model provider.
        base_url: Alternative endpoint, or None for api.openai.com.
        model_name: Chat model identifier.
        temperature: Sampling temperature passed to the model.
        max_tokens: Reply length cap.
        history_messages: Earlier timeline messages rendered into each prompt.
        max_document_chars: Characters of each document rendered into each prompt.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="Provider credential",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="OpenAI-compatible endpoint",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Chat model",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, ge=1, le=128000)
    history_messages: int = Field(
        default=20,
        ge=0,
        description="Conversation context, roughly ten exchanges",
    )
    max_document_chars: int = Field(
        default=8000,
        ge=0,
        description="Per-document character budget in the prompt",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Build agent settings from the environment.

    Raises:
        pydantic.ValidationError: If no API key is set.
    """
    return AgentConfig()
