"""Learning service - study-session operations over the word repository.

Thin orchestration: loads a snapshot from the WordRepository, reads the
learning settings, and delegates ordering to the scheduler. Review outcomes
flow back through ``WordRepository.update_progress``.
"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from logging import getLogger

from domain.model.errors import ValidationError
from domain.model.settings import MAX_DAILY_GOAL, MIN_DAILY_GOAL, LearningSettings
from domain.model.stats import LearningStats
from domain.model.word import WordRecord
from port.settings_repository import SettingsRepository
from port.word_repository import WordRepository
from services import scheduler

logger = getLogger(__name__)

KNOWN_PROGRESS = 5
UNKNOWN_PROGRESS = 1
MASTERED_THRESHOLD = 80
CORRECT_MASTERY_THRESHOLD = 50
SECONDS_PER_REVIEW = 30
STREAK_LOOKBACK_DAYS = 365


# ── navigation ───────────────────────────────────────────────


def get_next_word(
    repo: WordRepository,
    settings_repo: SettingsRepository,
    current_id: str | None = None,
) -> WordRecord | None:
    return scheduler.next_word(repo.load(), current_id, settings_repo.get())


def get_previous_word(
    repo: WordRepository,
    settings_repo: SettingsRepository,
    current_id: str | None = None,
) -> WordRecord | None:
    return scheduler.previous_word(repo.load(), current_id, settings_repo.get())


def get_daily_words(repo: WordRepository, settings_repo: SettingsRepository) -> list[WordRecord]:
    return scheduler.daily_batch(repo.load(), settings_repo.get())


def get_review_words(repo: WordRepository) -> list[WordRecord]:
    return scheduler.due_for_review(repo.load())


# ── review outcomes ──────────────────────────────────────────


def mark_known(repo: WordRepository, word_id: str) -> None:
    repo.update_progress(word_id, KNOWN_PROGRESS, True)


def mark_unknown(repo: WordRepository, word_id: str) -> None:
    repo.update_progress(word_id, UNKNOWN_PROGRESS, False)


def reset_all_progress(repo: WordRepository) -> None:
    repo.reset_all_progress()


# ── settings ─────────────────────────────────────────────────


def update_daily_goal(settings_repo: SettingsRepository, goal: int) -> LearningSettings:
    """Persist a new daily goal. Raises ValidationError outside [1, 1000]."""
    if goal < MIN_DAILY_GOAL or goal > MAX_DAILY_GOAL:
        raise ValidationError(f"Daily goal must be between {MIN_DAILY_GOAL} and {MAX_DAILY_GOAL}")
    current = settings_repo.get()
    updated = LearningSettings(
        review_mode=current.review_mode,
        difficulty_preference=current.difficulty_preference,
        daily_goal=goal,
    )
    settings_repo.save(updated)
    logger.info("Daily goal updated", extra={"daily_goal": goal})
    return updated


# ── statistics ───────────────────────────────────────────────


def _calendar_date(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of ``moment`` in ``tz``, or in the local timezone when None."""
    return moment.astimezone(tz).date()


def calculate_streak_days(words: list[WordRecord], today: date, tz: tzinfo | None = None) -> int:
    """Consecutive days ending ``today`` on which at least one word was reviewed.

    Review timestamps are bucketed by their calendar date in ``tz`` (local
    time by default). Zero when nothing was reviewed today.
    """
    review_days = {_calendar_date(w.last_review, tz) for w in words if w.last_review is not None}
    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        if today - timedelta(days=offset) not in review_days:
            break
        streak += 1
    return streak


def calculate_learning_stats(
    repo: WordRepository,
    settings_repo: SettingsRepository,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> LearningStats:
    """Aggregate statistics over the corpus.

    ``correct_rate`` approximates accuracy as the share of reviews that
    belong to words with mastery above 50, since individual answers are not
    stored. "Today" is the calendar date in ``tz``, the local timezone unless
    given.
    """
    now = now or datetime.now(timezone.utc)
    words = repo.load()
    settings = settings_repo.get()

    total_reviews = sum(w.review_count for w in words)
    correct_reviews = sum(w.review_count for w in words if w.mastery_level > CORRECT_MASTERY_THRESHOLD)
    correct_rate = correct_reviews / total_reviews * 100.0 if total_reviews else 0.0
    average_mastery = sum(w.mastery_level for w in words) / len(words) if words else 0.0

    today = _calendar_date(now, tz)
    daily = scheduler.daily_batch(words, settings, now=now)
    daily_progress = sum(
        1 for w in daily
        if w.last_review is not None and _calendar_date(w.last_review, tz) == today
    )

    return LearningStats(
        total_words=len(words),
        learned_words=sum(1 for w in words if w.review_count > 0),
        mastered_words=sum(1 for w in words if w.mastery_level >= MASTERED_THRESHOLD),
        total_reviews=total_reviews,
        correct_rate=correct_rate,
        average_mastery=average_mastery,
        daily_goal=settings.daily_goal,
        daily_progress=daily_progress,
        streak_days=calculate_streak_days(words, today, tz),
        total_time_spent=total_reviews * SECONDS_PER_REVIEW,
    )
