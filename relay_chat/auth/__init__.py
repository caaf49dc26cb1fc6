"""PIN login against an injected user directory."""

from relay_chat.auth.directory import UserDirectory

__all__ = ["UserDirectory"]
