"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatSubmission: Inbound chat message with the submitting user
    - UserRecord: Minimal identity returned by login
    - LoginRequest / LoginResponse: PIN login payloads
    - UploadResponse: Result of a forwarded file upload
    - StreamFrame: One structured item of the assistant's stream
"""

from relay_chat.models.schemas import (
    ChatSubmission,
    LoginRequest,
    LoginResponse,
    StreamFrame,
    UploadResponse,
    UserRecord,
)

__all__ = [
    "ChatSubmission",
    "LoginRequest",
    "LoginResponse",
    "StreamFrame",
    "UploadResponse",
    "UserRecord",
]
