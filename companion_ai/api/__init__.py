"""HTTP surface over the chat session.

Endpoints:
    - GET /health: Service health status
    - POST /auth/login, POST /auth/logout: Simulated authentication gate
    - GET /session: Timeline, documents and pending flag
    - POST /chat: Text turn, answered when the reply is ready
    - POST /upload: Document upload as its own turn
    - POST /attachments: Stage a document for the next text turn
    - DELETE /attachments/{name}: Detach a document
"""

from companion_ai.api.app import app, create_app

__all__ = ["app", "create_app"]
