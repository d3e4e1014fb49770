"""In-memory implementation of WordRepository for testing."""

import copy

from domain.model.word import WordFilter, WordRecord


class FakeWordRepository:
    def __init__(self, words: list[WordRecord] | None = None):
        self.words: list[WordRecord] = list(words or [])
        self.invalidated = 0

    def load(self, word_filter: WordFilter | None = None) -> list[WordRecord]:
        words = word_filter.apply(self.words) if word_filter else self.words
        return copy.deepcopy(words)

    def get_by_id(self, word_id: str) -> WordRecord | None:
        for w in self.words:
            if w.id == word_id:
                return copy.deepcopy(w)
        return None

    def search(self, query: str, limit: int = 50) -> list[WordRecord]:
        if not query:
            return []
        q = query.lower()
        results = [
            w for w in self.words
            if q in w.headword.lower()
            or q in w.translation.lower()
            or any(q in ex.source.lower() or q in ex.translation.lower() for ex in w.examples)
        ]
        results.sort(key=lambda w: (w.headword.lower() != q, w.headword))
        return copy.deepcopy(results[:limit])

    def update_progress(self, word_id: str, progress: int, is_correct: bool) -> None:
        for w in self.words:
            if w.id == word_id:
                # dataclass — direct mutation
                w.update_progress(progress, is_correct)
                return

    def reset_all_progress(self) -> None:
        for w in self.words:
            w.reset_progress()

    def invalidate(self) -> None:
        self.invalidated += 1
