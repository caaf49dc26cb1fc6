"""Files picked in the UI that have not been sent yet."""

import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class PendingFile:
    name: str
    content: bytes
    content_type: str = "application/octet-stream"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def size(self) -> int:
        return len(self.content)


class PendingFiles:
    """Ordered selection of files waiting to be sent.

    Files can be added as the user picks them and removed individually
    until the selection is sent, after which it is cleared.
    """

    def __init__(self) -> None:
        self._files: list[PendingFile] = []

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[PendingFile]:
        return iter(list(self._files))

    def add(self, name: str, content: bytes, content_type: str | None = None) -> PendingFile:
        pending = PendingFile(
            name=name,
            content=content,
            content_type=content_type or "application/octet-stream",
        )
        self._files.append(pending)
        return pending

    def remove(self, file_id: str) -> bool:
        """Drop one file from the selection.

        Returns:
            True if the file was pending, False if the id is unknown.
        """
        for index, pending in enumerate(self._files):
            if pending.id == file_id:
                del self._files[index]
                return True
        return False

    def clear(self) -> None:
        self._files.clear()

    def as_multipart(self) -> list[tuple[str, tuple[str, bytes, str]]]:
        """Return the selection in httpx's ``files=`` form, one ``files`` field each."""
        return [("files", (f.name, f.content, f.content_type)) for f in self._files]
