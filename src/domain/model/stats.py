"""Learning statistics derived from word review state."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LearningStats:
    """Aggregate view over the whole corpus.

    Computed on demand from each word's review fields; nothing here is
    persisted separately.
    """
    total_words: int
    learned_words: int
    mastered_words: int
    total_reviews: int
    correct_rate: float
    average_mastery: float
    daily_goal: int
    daily_progress: int
    streak_days: int
    total_time_spent: int
