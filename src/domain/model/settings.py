"""Learning settings read by the scheduler."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_DAILY_GOAL = 20
MIN_DAILY_GOAL = 1
MAX_DAILY_GOAL = 1000


class ReviewMode(str, Enum):
    """How the recommendation list is ordered."""
    SMART = 'smart'
    SEQUENTIAL = 'sequential'
    RANDOM = 'random'


class DifficultyPreference(str, Enum):
    """Post-filter applied to the recommendation list."""
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'
    MIXED = 'mixed'


@dataclass(frozen=True)
class LearningSettings:
    review_mode: ReviewMode = ReviewMode.SMART
    difficulty_preference: DifficultyPreference = DifficultyPreference.MIXED
    daily_goal: int = DEFAULT_DAILY_GOAL

    def to_dict(self) -> dict:
        return {
            'review_mode': self.review_mode.value,
            'difficulty_preference': self.difficulty_preference.value,
            'daily_goal': self.daily_goal,
        }
