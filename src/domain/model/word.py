"""Word domain models and the review state model."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

# ── Review interval bands ────────────────────────────────────

MASTERY_MIN = 0
MASTERY_MAX = 100
PROGRESS_MAX = 255
DEFAULT_PROGRESS = 1
DEFAULT_DIFFICULTY = 5

MASTERY_STEP_CORRECT = 10
MASTERY_STEP_INCORRECT = 5

# (upper mastery bound inclusive, interval in hours)
REVIEW_INTERVAL_BANDS: tuple[tuple[int, int], ...] = (
    (20, 1),
    (40, 4),
    (60, 12),
    (80, 24),
    (MASTERY_MAX, 72),
)


def review_interval(mastery_level: int) -> timedelta:
    """Return how long a word at ``mastery_level`` rests before it is due again."""
    for upper, hours in REVIEW_INTERVAL_BANDS:
        if mastery_level <= upper:
            return timedelta(hours=hours)
    return timedelta(hours=REVIEW_INTERVAL_BANDS[-1][1])


def whole_hours_between(start: datetime, end: datetime) -> int:
    """Elapsed whole hours from ``start`` to ``end`` (truncated toward zero)."""
    return int((end - start).total_seconds() / 3600)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Example:
    """An example sentence and its translation."""
    source: str = ""
    translation: str = ""


@dataclass
class WordRecord:
    """A single vocabulary entry with its learning state."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    headword: str = ""
    translation: str = ""
    phonetic: str = ""
    note: str = ""
    examples: list[Example] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    difficulty: int = DEFAULT_DIFFICULTY
    progress: int = DEFAULT_PROGRESS
    mastery_level: int = MASTERY_MIN
    review_count: int = 0
    last_review: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self):
        self.mastery_level = _clamp(self.mastery_level, MASTERY_MIN, MASTERY_MAX)
        self.progress = _clamp(self.progress, 0, PROGRESS_MAX)
        self.review_count = max(0, self.review_count)
        if self.updated_at is None or self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @staticmethod
    def create(
        headword: str,
        translation: str,
        phonetic: str = "",
        note: str = "",
        examples: list[Example] | None = None,
        tags: list[str] | None = None,
        difficulty: int = DEFAULT_DIFFICULTY,
    ) -> 'WordRecord':
        """Factory for a brand-new, never reviewed entry."""
        now = _utcnow()
        return WordRecord(
            id=str(uuid.uuid4()),
            headword=headword,
            translation=translation,
            phonetic=phonetic,
            note=note,
            examples=list(examples or []),
            tags=list(tags or []),
            difficulty=difficulty,
            created_at=now,
            updated_at=now,
        )

    # ── review state ──────────────────────────────────────────

    def update_progress(self, progress: int, is_correct: bool, now: datetime | None = None) -> None:
        """Record one review outcome.

        Mastery moves +10 on a correct answer and -5 otherwise, always
        staying inside [0, 100].
        """
        now = now or _utcnow()
        self.progress = _clamp(progress, 0, PROGRESS_MAX)
        self.last_review = now
        self.review_count += 1
        if is_correct:
            self.mastery_level = min(self.mastery_level + MASTERY_STEP_CORRECT, MASTERY_MAX)
        else:
            self.mastery_level = max(self.mastery_level - MASTERY_STEP_INCORRECT, MASTERY_MIN)
        self.updated_at = max(now, self.created_at)

    def reset_progress(self, now: datetime | None = None) -> None:
        """Return the learning state to that of a never reviewed word.

        The only mutation that lowers ``review_count``.
        """
        now = now or _utcnow()
        self.progress = DEFAULT_PROGRESS
        self.mastery_level = MASTERY_MIN
        self.review_count = 0
        self.last_review = None
        self.updated_at = max(now, self.created_at)

    def hours_since_review(self, now: datetime | None = None) -> int | None:
        if self.last_review is None:
            return None
        return whole_hours_between(self.last_review, now or _utcnow())

    def is_due_for_review(self, now: datetime | None = None) -> bool:
        hours = self.hours_since_review(now)
        if hours is None:
            return True
        interval_hours = int(review_interval(self.mastery_level).total_seconds() // 3600)
        return hours >= interval_hours

    def next_review_time(self) -> datetime | None:
        if self.last_review is None:
            return None
        return self.last_review + review_interval(self.mastery_level)


@dataclass(frozen=True)
class WordFilter:
    """Predicate over word records. Unset bounds do not constrain."""
    tags: tuple[str, ...] | None = None
    difficulty_min: int | None = None
    difficulty_max: int | None = None
    mastery_min: int | None = None
    mastery_max: int | None = None
    progress_min: int | None = None
    progress_max: int | None = None
    search_text: str | None = None

    def matches(self, word: WordRecord) -> bool:
        if self.tags is not None and not any(tag in word.tags for tag in self.tags):
            return False

        for value, low, high in (
            (word.difficulty, self.difficulty_min, self.difficulty_max),
            (word.mastery_level, self.mastery_min, self.mastery_max),
            (word.progress, self.progress_min, self.progress_max),
        ):
            if low is not None and value < low:
                return False
            if high is not None and value > high:
                return False

        if self.search_text:
            needle = self.search_text.lower()
            if needle not in word.headword.lower() and needle not in word.translation.lower():
                return False

        return True

    def apply(self, words: list[WordRecord]) -> list[WordRecord]:
        return [w for w in words if self.matches(w)]
