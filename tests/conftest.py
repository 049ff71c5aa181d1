"""Pytest fixtures and shared test configuration.

Fixtures:
    - engine_config: Engine settings without greeting and with a short timeout
    - responder: Response generator used by sessions (scripted, no delay)
    - session: Fresh SessionController
    - gate: Process-wide SessionGate installed for the API
    - async_client: HTTPX client for API testing
    - blank_pdf: Minimal single-page PDF built with pypdf
"""

import io
from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

from companion_ai.agent import ScriptedResponder
from companion_ai.api import app
from companion_ai.engine import EngineConfig, SessionController, SessionGate, reset_session_gate


@pytest.fixture
def engine_config() -> EngineConfig:
    """Engine config with no greeting so timelines start empty."""
    return EngineConfig(
        responder="scripted",
        response_timeout_seconds=2.0,
        scripted_delay_seconds=0.0,
        greeting="",
    )


@pytest.fixture
def responder() -> ScriptedResponder:
    return ScriptedResponder(delay_seconds=0)


@pytest.fixture
def session(responder, engine_config: EngineConfig) -> SessionController:
    """Fresh session using the ``responder`` fixture."""
    return SessionController(generator=responder, config=engine_config)


@pytest.fixture
def gate(responder, engine_config: EngineConfig) -> Generator[SessionGate, None, None]:
    """Install a gate whose sessions use the ``responder`` fixture."""
    session_gate = SessionGate(
        lambda: SessionController(generator=responder, config=engine_config)
    )
    reset_session_gate(session_gate)
    yield session_gate
    reset_session_gate()


@pytest.fixture
async def async_client(gate: SessionGate) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def logged_in_client(async_client: AsyncClient) -> AsyncClient:
    """Client with a session already started."""
    response = await async_client.post(
        "/auth/login", json={"email": "demo@example.com", "password": "secret"}
    )
    assert response.status_code == 200
    return async_client


@pytest.fixture
def blank_pdf() -> bytes:
    """Single blank page PDF with a title."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.add_metadata({"/Title": "Fridge Manual"})
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
