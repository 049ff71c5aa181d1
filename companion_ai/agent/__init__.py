"""Response generation for the chat session.

Responsibilities:
    - The ResponseGenerator protocol the session scheduler depends on
    - A scripted responder with canned, delayed replies
    - An Agno agent responder backed by OpenAI-compatible models
"""

from companion_ai.agent.config import AgentConfig, get_agent_config
from companion_ai.agent.responders import (
    UPLOAD_ACKNOWLEDGEMENT,
    ResponseGenerator,
    ScriptedResponder,
)

__all__ = [
    "UPLOAD_ACKNOWLEDGEMENT",
    "AgentConfig",
    "ResponseGenerator",
    "ScriptedResponder",
    "get_agent_config",
]
