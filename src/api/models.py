"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from domain.model.settings import (
    DEFAULT_DAILY_GOAL,
    MAX_DAILY_GOAL,
    MIN_DAILY_GOAL,
    DifficultyPreference,
    LearningSettings,
    ReviewMode,
)
from domain.model.stats import LearningStats
from domain.model.word import WordRecord


class ExampleResponse(BaseModel):
    """Example sentence with its translation."""
    source: str
    translation: str


class WordResponse(BaseModel):
    """Response model for a word record."""
    id: str = Field(..., description="Word ID")
    headword: str
    translation: str
    phonetic: str = ""
    note: str = ""
    examples: list[ExampleResponse] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    difficulty: int = Field(..., description="Difficulty 1-10")
    progress: int = Field(..., ge=0, le=255, description="Learning stage")
    mastery_level: int = Field(..., ge=0, le=100, description="Mastery percentage")
    review_count: int = Field(..., ge=0)
    last_review: Optional[datetime] = Field(None, description="Time of the last review")
    next_review: Optional[datetime] = Field(None, description="When the word becomes due again")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, word: WordRecord) -> 'WordResponse':
        return cls(
            id=word.id,
            headword=word.headword,
            translation=word.translation,
            phonetic=word.phonetic,
            note=word.note,
            examples=[ExampleResponse(source=e.source, translation=e.translation) for e in word.examples],
            tags=word.tags,
            difficulty=word.difficulty,
            progress=word.progress,
            mastery_level=word.mastery_level,
            review_count=word.review_count,
            last_review=word.last_review,
            next_review=word.next_review_time(),
            created_at=word.created_at,
            updated_at=word.updated_at,
        )


class ProgressRequest(BaseModel):
    """Request model for recording a review outcome."""
    progress: int = Field(..., ge=0, le=255, description="New learning stage")
    is_correct: bool = Field(..., description="Whether the learner answered correctly")


class StatusResponse(BaseModel):
    """Generic acknowledgement."""
    success: bool = True
    message: str


class SettingsBody(BaseModel):
    """Learning settings, used for both request and response."""
    review_mode: ReviewMode = ReviewMode.SMART
    difficulty_preference: DifficultyPreference = DifficultyPreference.MIXED
    daily_goal: int = Field(DEFAULT_DAILY_GOAL, ge=MIN_DAILY_GOAL, le=MAX_DAILY_GOAL)

    @classmethod
    def from_domain(cls, settings: LearningSettings) -> 'SettingsBody':
        return cls(
            review_mode=settings.review_mode,
            difficulty_preference=settings.difficulty_preference,
            daily_goal=settings.daily_goal,
        )

    def to_domain(self) -> LearningSettings:
        return LearningSettings(
            review_mode=self.review_mode,
            difficulty_preference=self.difficulty_preference,
            daily_goal=self.daily_goal,
        )


class DailyGoalRequest(BaseModel):
    """Request model for PUT /learning/daily-goal."""
    daily_goal: int = Field(..., description="Words per day")


class StatsResponse(BaseModel):
    """Aggregate learning statistics."""
    total_words: int
    learned_words: int
    mastered_words: int
    total_reviews: int
    correct_rate: float = Field(..., description="Percentage of reviews on words above 50 mastery")
    average_mastery: float
    daily_goal: int
    daily_progress: int
    streak_days: int
    total_time_spent: int = Field(..., description="Estimated seconds spent reviewing")

    @classmethod
    def from_domain(cls, stats: LearningStats) -> 'StatsResponse':
        return cls(
            total_words=stats.total_words,
            learned_words=stats.learned_words,
            mastered_words=stats.mastered_words,
            total_reviews=stats.total_reviews,
            correct_rate=stats.correct_rate,
            average_mastery=stats.average_mastery,
            daily_goal=stats.daily_goal,
            daily_progress=stats.daily_progress,
            streak_days=stats.streak_days,
            total_time_spent=stats.total_time_spent,
        )


class ErrorResponse(BaseModel):
    """Error body; ``kind`` names the failing layer."""
    detail: str
    kind: str
