"""Tests for learning_service — review outcomes, settings updates and statistics."""

import unittest
from datetime import date, datetime, timedelta, timezone

from adapter.fake.settings_repository import FakeSettingsRepository
from adapter.fake.word_repository import FakeWordRepository
from domain.model.errors import ValidationError
from domain.model.settings import LearningSettings, ReviewMode
from domain.model.word import WordRecord
from services import learning_service

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_word(word_id: str, **overrides) -> WordRecord:
    defaults = dict(id=word_id, headword=word_id, created_at=NOW - timedelta(days=60))
    defaults.update(overrides)
    return WordRecord(**defaults)


class TestReviewOutcomes(unittest.TestCase):

    def setUp(self):
        self.repo = FakeWordRepository([make_word('a', mastery_level=30), make_word('b', mastery_level=30)])

    def test_mark_known(self):
        learning_service.mark_known(self.repo, 'a')
        word = self.repo.get_by_id('a')
        self.assertEqual(word.progress, 5)
        self.assertEqual(word.mastery_level, 40)
        self.assertEqual(word.review_count, 1)

    def test_mark_unknown(self):
        learning_service.mark_unknown(self.repo, 'b')
        word = self.repo.get_by_id('b')
        self.assertEqual(word.progress, 1)
        self.assertEqual(word.mastery_level, 25)

    def test_reset_all_progress(self):
        learning_service.mark_known(self.repo, 'a')
        learning_service.reset_all_progress(self.repo)
        self.assertEqual([w.progress for w in self.repo.load()], [1, 1])
        word = self.repo.get_by_id('a')
        self.assertEqual((word.review_count, word.mastery_level), (0, 0))
        self.assertIsNone(word.last_review)


class TestNavigation(unittest.TestCase):

    def setUp(self):
        self.repo = FakeWordRepository([make_word('a'), make_word('b'), make_word('c')])
        self.settings_repo = FakeSettingsRepository(LearningSettings(review_mode=ReviewMode.SEQUENTIAL, daily_goal=2))

    def test_next_and_previous(self):
        self.assertEqual(learning_service.get_next_word(self.repo, self.settings_repo, 'b').id, 'c')
        self.assertEqual(learning_service.get_previous_word(self.repo, self.settings_repo, 'a').id, 'c')

    def test_daily_words_use_goal(self):
        daily = learning_service.get_daily_words(self.repo, self.settings_repo)
        self.assertEqual([w.id for w in daily], ['a', 'b'])

    def test_review_words(self):
        self.assertEqual(len(learning_service.get_review_words(self.repo)), 3)


class TestUpdateDailyGoal(unittest.TestCase):

    def setUp(self):
        self.settings_repo = FakeSettingsRepository(LearningSettings(review_mode=ReviewMode.RANDOM))

    def test_saves_new_goal_and_keeps_other_settings(self):
        updated = learning_service.update_daily_goal(self.settings_repo, 40)
        self.assertEqual(updated.daily_goal, 40)
        self.assertEqual(updated.review_mode, ReviewMode.RANDOM)
        self.assertEqual(self.settings_repo.get(), updated)
        self.assertEqual(self.settings_repo.save_count, 1)

    def test_rejects_out_of_range_goal(self):
        for goal in (0, -5, 1001):
            with self.assertRaises(ValidationError):
                learning_service.update_daily_goal(self.settings_repo, goal)
        self.assertEqual(self.settings_repo.save_count, 0)


class TestLearningStats(unittest.TestCase):

    def test_empty_corpus(self):
        stats = learning_service.calculate_learning_stats(
            FakeWordRepository(), FakeSettingsRepository(), now=NOW, tz=timezone.utc,
        )
        self.assertEqual(stats.total_words, 0)
        self.assertEqual(stats.correct_rate, 0.0)
        self.assertEqual(stats.average_mastery, 0.0)
        self.assertEqual(stats.streak_days, 0)
        self.assertEqual(stats.daily_goal, 20)

    def test_aggregates(self):
        words = [
            make_word('mastered', mastery_level=90, review_count=6, last_review=NOW - timedelta(hours=1)),
            make_word('learning', mastery_level=40, review_count=4, last_review=NOW - timedelta(days=1)),
            make_word('new', mastery_level=0),
        ]
        settings_repo = FakeSettingsRepository(LearningSettings(review_mode=ReviewMode.SEQUENTIAL, daily_goal=2))
        stats = learning_service.calculate_learning_stats(
            FakeWordRepository(words), settings_repo, now=NOW, tz=timezone.utc,
        )

        self.assertEqual(stats.total_words, 3)
        self.assertEqual(stats.learned_words, 2)
        self.assertEqual(stats.mastered_words, 1)
        self.assertEqual(stats.total_reviews, 10)
        self.assertAlmostEqual(stats.correct_rate, 60.0)
        self.assertAlmostEqual(stats.average_mastery, 130 / 3)
        self.assertEqual(stats.daily_goal, 2)
        # daily batch is ['mastered', 'learning']; only 'mastered' was reviewed today
        self.assertEqual(stats.daily_progress, 1)
        self.assertEqual(stats.streak_days, 2)
        self.assertEqual(stats.total_time_spent, 300)


class TestStreak(unittest.TestCase):

    def _reviewed(self, *days_ago):
        return [make_word(str(d), last_review=NOW - timedelta(days=d)) for d in days_ago]

    def _streak(self, words, today=NOW.date()):
        return learning_service.calculate_streak_days(words, today, timezone.utc)

    def test_consecutive_days(self):
        self.assertEqual(self._streak(self._reviewed(0, 1, 2, 4)), 3)

    def test_no_review_today_breaks_streak(self):
        self.assertEqual(self._streak(self._reviewed(1, 2)), 0)

    def test_streak_is_capped(self):
        self.assertEqual(self._streak(self._reviewed(*range(400))), 365)

    def test_unreviewed_words_are_ignored(self):
        self.assertEqual(self._streak([make_word('x')], date(2024, 6, 1)), 0)


class TestLocalCalendarDays(unittest.TestCase):
    """Days are counted on the learner's calendar, not the UTC one."""

    EASTERN = timezone(timedelta(hours=-5))

    def test_evening_review_counts_on_local_day(self):
        # 2024-06-01 22:30 at UTC-5 is already 2024-06-02 in UTC
        evening = datetime(2024, 6, 1, 22, 30, tzinfo=self.EASTERN)
        later = evening + timedelta(minutes=30)
        words = [make_word('a', mastery_level=10, review_count=1, last_review=evening)]
        settings_repo = FakeSettingsRepository(LearningSettings(daily_goal=5))

        local = learning_service.calculate_learning_stats(
            FakeWordRepository(words), settings_repo, now=later, tz=self.EASTERN,
        )
        self.assertEqual(local.daily_progress, 1)
        self.assertEqual(local.streak_days, 1)

    def test_review_before_local_midnight_is_yesterday(self):
        # 2024-06-02 03:00 UTC is 2024-06-01 22:00 at UTC-5
        reviewed = datetime(2024, 6, 2, 3, 0, tzinfo=timezone.utc)
        now = datetime(2024, 6, 2, 6, 0, tzinfo=timezone.utc)
        words = [make_word('a', mastery_level=10, review_count=1, last_review=reviewed)]

        in_utc = learning_service.calculate_learning_stats(
            FakeWordRepository(words), FakeSettingsRepository(), now=now, tz=timezone.utc,
        )
        in_eastern = learning_service.calculate_learning_stats(
            FakeWordRepository(words), FakeSettingsRepository(), now=now, tz=self.EASTERN,
        )
        self.assertEqual((in_utc.daily_progress, in_utc.streak_days), (1, 1))
        self.assertEqual((in_eastern.daily_progress, in_eastern.streak_days), (0, 0))

    def test_streak_days_follow_timezone(self):
        reviews = [datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc),
                   datetime(2024, 6, 2, 1, 0, tzinfo=timezone.utc)]
        words = [make_word(str(i), last_review=r) for i, r in enumerate(reviews)]
        # both reviews land on 2024-06-01 at UTC-5, on two days in UTC
        self.assertEqual(learning_service.calculate_streak_days(words, date(2024, 6, 2), timezone.utc), 2)
        self.assertEqual(learning_service.calculate_streak_days(words, date(2024, 6, 1), self.EASTERN), 1)


if __name__ == '__main__':
    unittest.main()
