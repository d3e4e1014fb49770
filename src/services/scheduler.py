"""Adaptive review scheduler — decides which word to present next.

Stateless: every call works on a snapshot of word records, and all review
history lives in each record's own fields.

Smart mode ranks words by a priority score (higher first):

    score = mastery_weight * (100 - mastery_level)
          + due_bonus                                  if due for review
          + review_count_weight * (review_cap - min(review_count, review_cap))
          + recency_weight * min(hours_since_review, recency_cap_hours)
            (or never_reviewed_bonus when never reviewed)

and multiplies the raw score by a difficulty factor favouring medium words.
"""

import random
from dataclasses import dataclass
from datetime import datetime, timezone

from domain.model.settings import DifficultyPreference, LearningSettings, ReviewMode
from domain.model.word import WordRecord


@dataclass(frozen=True)
class ScoringWeights:
    """Tunable constants of the smart-mode priority score."""
    mastery_weight: float = 0.4
    due_bonus: float = 50.0
    review_count_weight: float = 0.2
    review_cap: int = 10
    recency_weight: float = 0.1
    recency_cap_hours: float = 168.0  # one week
    never_reviewed_bonus: float = 50.0
    # (min difficulty, max difficulty, factor), inclusive
    difficulty_factors: tuple[tuple[int, int, float], ...] = (
        (1, 3, 0.8),
        (4, 6, 1.0),
        (7, 10, 0.9),
    )
    default_difficulty_factor: float = 1.0

    def difficulty_factor(self, difficulty: int) -> float:
        for low, high, factor in self.difficulty_factors:
            if low <= difficulty <= high:
                return factor
        return self.default_difficulty_factor


DEFAULT_WEIGHTS = ScoringWeights()

# Inclusive difficulty bounds kept by each preference
DIFFICULTY_RANGES: dict[DifficultyPreference, tuple[int, int]] = {
    DifficultyPreference.EASY: (0, 3),
    DifficultyPreference.MEDIUM: (3, 7),
    DifficultyPreference.HARD: (7, 255),
}


def score_word(
    word: WordRecord,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    now: datetime | None = None,
) -> float:
    """Priority score of a single word; higher means present sooner."""
    now = now or datetime.now(timezone.utc)
    score = (100 - word.mastery_level) * weights.mastery_weight

    if word.is_due_for_review(now):
        score += weights.due_bonus

    score += (weights.review_cap - min(word.review_count, weights.review_cap)) * weights.review_count_weight

    hours = word.hours_since_review(now)
    if hours is None:
        score += weights.never_reviewed_bonus
    else:
        score += min(float(hours), weights.recency_cap_hours) * weights.recency_weight

    return score * weights.difficulty_factor(word.difficulty)


def rank_words(
    words: list[WordRecord],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    now: datetime | None = None,
) -> list[WordRecord]:
    """Sort by descending score; ties keep corpus order."""
    now = now or datetime.now(timezone.utc)
    scored = [(word, score_word(word, weights, now)) for word in words]
    scored.sort(key=lambda candidate: candidate[1], reverse=True)
    return [word for word, _ in scored]


def filter_by_difficulty(
    words: list[WordRecord],
    preference: DifficultyPreference,
) -> list[WordRecord]:
    bounds = DIFFICULTY_RANGES.get(preference)
    if bounds is None:
        return list(words)
    low, high = bounds
    return [w for w in words if low <= w.difficulty <= high]


def recommend(
    words: list[WordRecord],
    mode: ReviewMode = ReviewMode.SMART,
    difficulty_preference: DifficultyPreference = DifficultyPreference.MIXED,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[WordRecord]:
    """Build the recommendation list for ``mode``, then apply the difficulty post-filter.

    Args:
        words: Corpus snapshot, in corpus order.
        mode: smart (ranked), sequential (corpus order) or random (shuffled).
        difficulty_preference: easy ≤3, medium 3–7, hard ≥7, mixed keeps all.
        weights: Scoring constants for smart mode.
        now: Reference time for due/recency computations.
        rng: Random source for random mode (module RNG when omitted).
    """
    if mode == ReviewMode.SEQUENTIAL:
        ordered = list(words)
    elif mode == ReviewMode.RANDOM:
        ordered = list(words)
        (rng or random).shuffle(ordered)
    else:
        ordered = rank_words(words, weights, now)

    return filter_by_difficulty(ordered, difficulty_preference)


def recommend_for(
    words: list[WordRecord],
    settings: LearningSettings,
    **kwargs,
) -> list[WordRecord]:
    return recommend(words, settings.review_mode, settings.difficulty_preference, **kwargs)


# ── navigation ───────────────────────────────────────────────


def _index_of(words: list[WordRecord], word_id: str | None) -> int | None:
    if word_id is None:
        return None
    return next((i for i, w in enumerate(words) if w.id == word_id), None)


def next_in(recommended: list[WordRecord], current_id: str | None) -> WordRecord | None:
    """Word after ``current_id``, wrapping to the first; first word if unknown."""
    if not recommended:
        return None
    index = _index_of(recommended, current_id)
    if index is None:
        return recommended[0]
    return recommended[(index + 1) % len(recommended)]


def previous_in(recommended: list[WordRecord], current_id: str | None) -> WordRecord | None:
    """Word before ``current_id``, wrapping to the last; last word if unknown."""
    if not recommended:
        return None
    index = _index_of(recommended, current_id)
    if index is None:
        return recommended[-1]
    return recommended[index - 1]


def next_word(
    words: list[WordRecord],
    current_id: str | None,
    settings: LearningSettings,
    **kwargs,
) -> WordRecord | None:
    return next_in(recommend_for(words, settings, **kwargs), current_id)


def previous_word(
    words: list[WordRecord],
    current_id: str | None,
    settings: LearningSettings,
    **kwargs,
) -> WordRecord | None:
    return previous_in(recommend_for(words, settings, **kwargs), current_id)


def daily_batch(
    words: list[WordRecord],
    settings: LearningSettings,
    goal_size: int | None = None,
    **kwargs,
) -> list[WordRecord]:
    """First ``goal_size`` recommended words (defaults to the daily goal)."""
    size = settings.daily_goal if goal_size is None else goal_size
    if size <= 0:
        return []
    return recommend_for(words, settings, **kwargs)[:size]


def due_for_review(words: list[WordRecord], now: datetime | None = None) -> list[WordRecord]:
    """Words due for review, in corpus order (not ranked)."""
    now = now or datetime.now(timezone.utc)
    return [w for w in words if w.is_due_for_review(now)]
