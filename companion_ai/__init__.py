"""Companion AI - conversational assistant for appliance troubleshooting.

Combines a session engine for the chat timeline and uploaded documents,
Agno for LLM replies, FastAPI for the HTTP surface, NiceGUI for the web
interface, and Pydantic for data validation.

Components:
    - engine: timeline, attachment registry and reply scheduling
    - agent: scripted and LLM response generators
    - parsing: document decoding (pypdf, text)
    - api: HTTP endpoints
    - ui: web interface for chat interactions
    - models: engine models and request/response schemas
"""

__version__ = "0.1.0"
