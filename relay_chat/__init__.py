"""Relay Chat - streaming chat relay between a browser and an assistant webhook.

Combines FastAPI for HTTP streaming, httpx for upstream and client traffic,
NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints (chat stream, file upload, login)
    - relay: forwarding of webhook responses without buffering
    - chat: frame decoding, chat turns and the session message log
    - ui: Web interface for chat interactions
    - models: Request/response schemas
"""

__version__ = "0.1.0"
