"""Cached wordbook implementation of WordRepository.

The whole corpus lives in one snapshot list guarded by a single lock. The lock
is held only while the snapshot slot is read or swapped; reading the store,
parsing and writing happen outside it. Two concurrent cold loads may therefore
both parse the document; the first one to finish fills the slot and the
other adopts it, so a cold load never overwrites a newer snapshot.
"""

import copy
from logging import getLogger
from threading import Lock

from adapter.xml import codec
from domain.model.errors import CodecError, LoadError
from domain.model.word import WordFilter, WordRecord
from port.word_store import WordStore

logger = getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 50


class XmlWordRepository:
    def __init__(self, store: WordStore):
        self.store = store
        self._cache: list[WordRecord] | None = None
        self._lock = Lock()
        # Serializes writes so the document on disk never goes back in time
        self._write_lock = Lock()

    # ── snapshot ──────────────────────────────────────────────

    def _read_store(self) -> list[WordRecord]:
        content = self.store.read()
        try:
            return codec.parse(content)
        except CodecError as e:
            raise LoadError(f"Cannot decode wordbook ({e.kind}): {e}") from e

    def _snapshot(self) -> list[WordRecord]:
        """Return the cached snapshot, loading it first on a cold cache.

        The returned list is shared; callers must not mutate it.
        """
        with self._lock:
            words = self._cache
        if words is not None:
            return words

        logger.info("Word cache is cold, loading from store")
        words = self._read_store()
        with self._lock:
            if self._cache is None:
                self._cache = words
            words = self._cache
        logger.info("Word cache loaded", extra={"word_count": len(words)})
        return words

    def _persist(self, fallback: list[WordRecord]) -> None:
        """Write the current snapshot (or ``fallback`` if the cache was dropped meanwhile)."""
        with self._write_lock:
            with self._lock:
                words = self._cache if self._cache is not None else fallback
            self.store.write(codec.serialize(words))

    # ── reads ─────────────────────────────────────────────────

    def load(self, word_filter: WordFilter | None = None) -> list[WordRecord]:
        words = self._snapshot()
        if word_filter is not None:
            words = word_filter.apply(words)
        return copy.deepcopy(words)

    def get_by_id(self, word_id: str) -> WordRecord | None:
        for word in self._snapshot():
            if word.id == word_id:
                return copy.deepcopy(word)
        return None

    def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[WordRecord]:
        if not query or limit <= 0:
            return []
        needle = query.lower()

        def matches(word: WordRecord) -> bool:
            if needle in word.headword.lower() or needle in word.translation.lower():
                return True
            return any(
                needle in ex.source.lower() or needle in ex.translation.lower()
                for ex in word.examples
            )

        results = [w for w in self._snapshot() if matches(w)]
        # Exact headword matches first, then lexicographic by headword
        results.sort(key=lambda w: (w.headword.lower() != needle, w.headword))
        return copy.deepcopy(results[:limit])

    # ── writes ────────────────────────────────────────────────

    def update_progress(self, word_id: str, progress: int, is_correct: bool) -> None:
        """Apply a review outcome, swap the snapshot, then persist it.

        The new snapshot is installed before writing, so on PersistError the
        cache still reflects the attempted update until the next reload.
        Unknown IDs are ignored.
        """
        loaded = self._snapshot()
        with self._lock:
            words = self._cache if self._cache is not None else loaded
            index = next((i for i, w in enumerate(words) if w.id == word_id), None)
            if index is not None:
                updated = copy.deepcopy(words[index])
                updated.update_progress(progress, is_correct)
                new_words = list(words)
                new_words[index] = updated
                self._cache = new_words

        if index is None:
            logger.debug("Progress update for unknown word ignored", extra={"word_id": word_id})
            return

        self._persist(new_words)
        logger.info("Word progress updated", extra={
            "word_id": word_id,
            "progress": updated.progress,
            "mastery_level": updated.mastery_level,
            "is_correct": is_correct,
        })

    def reset_all_progress(self) -> None:
        loaded = self._snapshot()
        with self._lock:
            new_words = copy.deepcopy(self._cache if self._cache is not None else loaded)
            for word in new_words:
                word.reset_progress()
            self._cache = new_words

        self._persist(new_words)
        logger.info("All word progress reset", extra={"word_count": len(new_words)})

    def invalidate(self) -> None:
        with self._lock:
            self._cache = None
        logger.info("Word cache cleared")
