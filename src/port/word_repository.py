"""Port for word corpus access."""

from typing import Protocol

from domain.model.word import WordFilter, WordRecord


class WordRepository(Protocol):
    """Protocol for the cached word corpus (snapshot reads + review updates)."""

    def load(self, word_filter: WordFilter | None = None) -> list[WordRecord]:
        """Return a snapshot of the corpus, optionally filtered.

        Raises LoadError / CodecError when the backing store cannot be read.
        """
        ...

    def get_by_id(self, word_id: str) -> WordRecord | None:
        """Get a single word by exact ID."""
        ...

    def search(self, query: str, limit: int = 50) -> list[WordRecord]:
        """Case-insensitive search; exact headword matches first, then by headword."""
        ...

    def update_progress(self, word_id: str, progress: int, is_correct: bool) -> None:
        """Record a review outcome and persist. Unknown IDs are a no-op."""
        ...

    def reset_all_progress(self) -> None:
        """Return every word to its initial learning state, persisting once."""
        ...

    def invalidate(self) -> None:
        """Drop the cached snapshot so the next load re-reads the store."""
        ...
