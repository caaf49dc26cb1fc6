"""Credential lookup for the login endpoint.

The directory is built once from configuration and handed to the login
route; there is no process-wide user table.
"""

import hmac
import logging

from relay_chat.models.schemas import UserRecord
from relay_chat.relay.config import UserCredential

logger = logging.getLogger(__name__)


class UserDirectory:
    """Maps PIN (and optional email) credentials to user identities."""

    def __init__(self, credentials: list[UserCredential]) -> None:
        self._credentials = list(credentials)

    def __len__(self) -> int:
        return len(self._credentials)

    def authenticate(self, pin: str, email: str | None = None) -> UserRecord | None:
        """Resolve credentials to a user.

        Users configured with an email only match when the same email
        (case-insensitive) is supplied alongside the PIN.

        Args:
            pin: The submitted PIN.
            email: The submitted email, if the login form asked for one.

        Returns:
            The matching user, or None if the credentials are invalid.
        """
        submitted_email = email.strip().lower() if email else None
        for credential in self._credentials:
            pin_matches = hmac.compare_digest(credential.pin.encode(), pin.encode())
            if not pin_matches:
                continue
            if credential.email and credential.email.lower() != submitted_email:
                continue
            return UserRecord(id=credential.id, name=credential.name)

        logger.info("Rejected login attempt")
        return None
