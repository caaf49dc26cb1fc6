from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserRecord(BaseModel):
    """Minimal identity of an authenticated user.

    Attributes:
        id: Opaque user identifier.
        name: Display name shown to the assistant.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class ChatSubmission(BaseModel):
    """Request payload for the chat relay endpoint.

    Field names follow the browser's camelCase wire format; the same three
    fields are forwarded to the chat webhook.

    Attributes:
        user_id: Identifier of the submitting user.
        user_name: Display name of the submitting user.
        message: The user's message text.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    user_name: str = Field(..., alias="userName")
    message: str = Field(..., min_length=1)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_webhook_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class StreamFrame(BaseModel):
    """A structured item emitted by the assistant webhook.

    Only frames with ``type == "item"`` carry display text.
    """

    type: Literal["item"] = "item"
    content: str


class LoginRequest(BaseModel):
    """Credentials submitted by the login form."""

    pin: str
    email: str | None = None


class LoginResponse(BaseModel):
    """Successful login result."""

    success: bool
    user: UserRecord | None = None


class UploadResponse(BaseModel):
    """Response after forwarding a file upload.

    Attributes:
        success: Whether the files webhook accepted the upload.
        error: Error message if the upload failed.
        details: Body text returned by the webhook on failure.
    """

    success: bool
    error: str | None = None
    details: str | None = None
