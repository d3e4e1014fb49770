"""Port for the raw wordbook document."""

from typing import Protocol


class WordStore(Protocol):
    """Reads and writes the serialized wordbook document."""

    def read(self) -> bytes:
        """Return the document bytes. Raises LoadError if unreadable."""
        ...

    def write(self, content: str) -> None:
        """Replace the document. Raises PersistError on failure."""
        ...
