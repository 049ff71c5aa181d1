"""Agno-backed response generator.

Wraps an Agno ``Agent`` behind the ``ResponseGenerator`` protocol so the
session scheduler can use a real model exactly like the scripted stub.

The agent keeps no storage of its own: the session timeline is the only
conversation history, and it is rendered into each prompt together with
the text of the documents that were available when the turn was submitted.
"""

import logging

from agno.agent import Agent
from agno.models.openai import OpenAIChat

from companion_ai.agent.config import AgentConfig, get_agent_config
from companion_ai.models.schemas import GenerationRequest, Sender

logger = logging.getLogger(__name__)

class AgentResponder:
    """LLM responder for appliance troubleshooting conversations."""

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the responder.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            description=(
                "Companion AI, an assistant for appliance troubleshooting and maintenance."
            ),
            instructions=[
                "Help the user diagnose appliance issues and guide them through repairs.",
                "Mention safety precautions when a repair involves electricity, gas or water.",
                "When documents are provided, ground your answer in them and cite the document name.",
                "Be concise yet thorough.",
            ],
            markdown=True,
        )

    def build_prompt(self, request: GenerationRequest) -> str:
        """Render history, documents and the latest user text into one prompt."""
        sections: list[str] = []

        # The latest user turn is the last history entry; it is sent separately.
        budget = self._config.history_messages
        earlier = request.history[:-1][-budget:] if budget else ()
        if earlier:
            lines = [
                f"{'User' if m.sender == Sender.USER else 'Assistant'}: {m.content}"
                for m in earlier
            ]
            sections.append("Conversation so far:\n" + "\n".join(lines))

        limit = self._config.max_document_chars
        for doc in request.documents:
            excerpt = doc.content[:limit]
            if len(doc.content) > limit:
                excerpt += "\n[...truncated]"
            sections.append(f'Document "{doc.name}" ({doc.media_type}):\n{excerpt}')

        sections.append(f"User: {request.content}")
        return "\n\n".join(sections)

    async def generate(self, request: GenerationRequest) -> str:
        response = await self._agent.arun(self.build_prompt(request))
        content = response.content or ""
        logger.info(f"Agent replied with {len(content)} characters")
        return content
