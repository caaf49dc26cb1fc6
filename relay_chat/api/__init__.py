"""FastAPI endpoints for the chat relay.

HTTP and streaming routes with async request handling. Chat replies are
streamed as plain text while the assistant webhook is still producing them.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Relay a chat message and stream the reply
    - POST /api/files: Forward a multipart file upload
    - POST /api/login: PIN login
"""

from relay_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
