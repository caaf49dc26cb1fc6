"""Unit tests for the login user directory."""

import pytest

from relay_chat.auth.directory import UserDirectory
from relay_chat.models.schemas import UserRecord
from relay_chat.relay.config import UserCredential


@pytest.fixture
def directory() -> UserDirectory:
    return UserDirectory(
        [
            UserCredential(id="user1", name="Gerard", pin="1234"),
            UserCredential(id="user2", name="Jordi", pin="1111", email="Jordi@Example.com"),
        ]
    )


class TestAuthenticate:
    """Tests for credential lookup."""

    def test_valid_pin(self, directory: UserDirectory) -> None:
        """A known PIN resolves to its user."""
        assert directory.authenticate("1234") == UserRecord(id="user1", name="Gerard")

    def test_unknown_pin(self, directory: UserDirectory) -> None:
        """An unknown PIN resolves to nobody."""
        assert directory.authenticate("9999") is None

    def test_email_required_when_configured(self, directory: UserDirectory) -> None:
        """A user with an email cannot log in with the PIN alone."""
        assert directory.authenticate("1111") is None

    def test_email_matches_case_insensitively(self, directory: UserDirectory) -> None:
        """Email comparison ignores case and surrounding spaces."""
        user = directory.authenticate("1111", " jordi@example.COM ")

        assert user == UserRecord(id="user2", name="Jordi")

    def test_wrong_email(self, directory: UserDirectory) -> None:
        """A correct PIN with the wrong email is rejected."""
        assert directory.authenticate("1111", "someone@example.com") is None

    def test_empty_directory(self) -> None:
        """With no users configured every login fails."""
        directory = UserDirectory([])

        assert len(directory) == 0
        assert directory.authenticate("1234") is None
