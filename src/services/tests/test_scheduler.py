"""Tests for the review scheduler.

Tests cover:
1. score_word: mastery, due bonus, review count, recency and difficulty factor terms
2. recommend: smart ranking, sequential order, seeded random shuffle, difficulty post-filter
3. Navigation: next/previous wrap-around and unknown IDs
4. daily_batch and due_for_review
"""

import random
import unittest
from datetime import datetime, timedelta, timezone

from domain.model.settings import DifficultyPreference, LearningSettings, ReviewMode
from domain.model.word import WordRecord
from services.scheduler import (
    DEFAULT_WEIGHTS,
    ScoringWeights,
    daily_batch,
    due_for_review,
    filter_by_difficulty,
    next_word,
    previous_word,
    rank_words,
    recommend,
    score_word,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_word(word_id: str, **overrides) -> WordRecord:
    defaults = dict(id=word_id, headword=word_id, created_at=NOW - timedelta(days=60))
    defaults.update(overrides)
    return WordRecord(**defaults)


class TestScoreWord(unittest.TestCase):

    def test_never_reviewed_medium_word(self):
        """40 (mastery) + 50 (due) + 2 (review count) + 50 (never reviewed), factor 1.0."""
        word = make_word('w', mastery_level=0, difficulty=5)
        self.assertAlmostEqual(score_word(word, now=NOW), 142.0)

    def test_reviewed_word_not_due(self):
        """mastery 90, reviewed 24h ago: 4 + 0 + 1.0 + 2.4, factor 0.9 for difficulty 8."""
        word = make_word('w', mastery_level=90, difficulty=8, review_count=5,
                         last_review=NOW - timedelta(hours=24))
        self.assertAlmostEqual(score_word(word, now=NOW), (4 + 1.0 + 2.4) * 0.9)

    def test_recency_is_capped_at_one_week(self):
        old = make_word('w', mastery_level=50, review_count=10, last_review=NOW - timedelta(days=30))
        week = make_word('w', mastery_level=50, review_count=10, last_review=NOW - timedelta(days=7))
        self.assertAlmostEqual(score_word(old, now=NOW), score_word(week, now=NOW))

    def test_easy_words_are_damped(self):
        easy = make_word('e', difficulty=2)
        medium = make_word('m', difficulty=5)
        self.assertAlmostEqual(score_word(easy, now=NOW), score_word(medium, now=NOW) * 0.8)

    def test_difficulty_outside_bands_uses_default_factor(self):
        self.assertEqual(DEFAULT_WEIGHTS.difficulty_factor(0), 1.0)
        self.assertEqual(DEFAULT_WEIGHTS.difficulty_factor(7), 0.9)

    def test_custom_weights(self):
        weights = ScoringWeights(mastery_weight=1.0, due_bonus=0, review_count_weight=0,
                                 never_reviewed_bonus=0)
        word = make_word('w', mastery_level=30)
        self.assertAlmostEqual(score_word(word, weights, NOW), 70.0)


class TestRecommend(unittest.TestCase):

    def setUp(self):
        self.words = [
            make_word('mastered', mastery_level=100, review_count=10, difficulty=5,
                      last_review=NOW - timedelta(hours=1)),
            make_word('fresh', mastery_level=0, difficulty=5),
            make_word('easy', mastery_level=0, difficulty=2),
            make_word('hard', mastery_level=40, review_count=2, difficulty=9,
                      last_review=NOW - timedelta(hours=10)),
        ]

    def test_smart_mode_ranks_by_score(self):
        ranked = recommend(self.words, ReviewMode.SMART, now=NOW)
        self.assertEqual([w.id for w in ranked], ['fresh', 'easy', 'hard', 'mastered'])

    def test_rank_is_stable_for_ties(self):
        twins = [make_word('first'), make_word('second'), make_word('third')]
        self.assertEqual([w.id for w in rank_words(twins, now=NOW)], ['first', 'second', 'third'])

    def test_lower_mastery_ranks_first_when_otherwise_identical(self):
        weak = make_word('weak', mastery_level=10, difficulty=5)
        strong = make_word('strong', mastery_level=90, difficulty=5)
        self.assertEqual([w.id for w in rank_words([strong, weak], now=NOW)], ['weak', 'strong'])
        self.assertGreater(score_word(weak, now=NOW), score_word(strong, now=NOW))

    def test_sequential_mode_keeps_corpus_order(self):
        ordered = recommend(self.words, ReviewMode.SEQUENTIAL, now=NOW)
        self.assertEqual([w.id for w in ordered], ['mastered', 'fresh', 'easy', 'hard'])

    def test_random_mode_is_a_permutation(self):
        shuffled = recommend(self.words, ReviewMode.RANDOM, rng=random.Random(7))
        self.assertCountEqual([w.id for w in shuffled], [w.id for w in self.words])

    def test_random_mode_is_reproducible_with_seed(self):
        first = recommend(self.words, ReviewMode.RANDOM, rng=random.Random(42))
        second = recommend(self.words, ReviewMode.RANDOM, rng=random.Random(42))
        self.assertEqual([w.id for w in first], [w.id for w in second])

    def test_difficulty_preference_filters_after_ordering(self):
        easy = recommend(self.words, ReviewMode.SEQUENTIAL, DifficultyPreference.EASY, now=NOW)
        self.assertEqual([w.id for w in easy], ['easy'])
        hard = recommend(self.words, ReviewMode.SMART, DifficultyPreference.HARD, now=NOW)
        self.assertEqual([w.id for w in hard], ['hard'])
        medium = recommend(self.words, ReviewMode.SMART, DifficultyPreference.MEDIUM, now=NOW)
        self.assertEqual([w.id for w in medium], ['fresh', 'mastered'])

    def test_difficulty_bounds_are_inclusive(self):
        words = [make_word('three', difficulty=3), make_word('seven', difficulty=7)]
        self.assertEqual([w.id for w in filter_by_difficulty(words, DifficultyPreference.EASY)], ['three'])
        self.assertEqual(len(filter_by_difficulty(words, DifficultyPreference.MEDIUM)), 2)
        self.assertEqual([w.id for w in filter_by_difficulty(words, DifficultyPreference.HARD)], ['seven'])
        self.assertEqual(len(filter_by_difficulty(words, DifficultyPreference.MIXED)), 2)

    def test_empty_corpus(self):
        self.assertEqual(recommend([], now=NOW), [])


class TestNavigation(unittest.TestCase):

    def setUp(self):
        self.words = [make_word('a'), make_word('b'), make_word('c')]
        self.settings = LearningSettings(review_mode=ReviewMode.SEQUENTIAL)

    def test_next_wraps_around(self):
        self.assertEqual(next_word(self.words, 'a', self.settings).id, 'b')
        self.assertEqual(next_word(self.words, 'c', self.settings).id, 'a')

    def test_previous_wraps_around(self):
        self.assertEqual(previous_word(self.words, 'b', self.settings).id, 'a')
        self.assertEqual(previous_word(self.words, 'a', self.settings).id, 'c')

    def test_unknown_or_absent_id(self):
        self.assertEqual(next_word(self.words, None, self.settings).id, 'a')
        self.assertEqual(next_word(self.words, 'missing', self.settings).id, 'a')
        self.assertEqual(previous_word(self.words, None, self.settings).id, 'c')

    def test_empty_list_returns_none(self):
        self.assertIsNone(next_word([], 'a', self.settings))
        self.assertIsNone(previous_word([], 'a', self.settings))

    def test_current_word_filtered_out_restarts_at_first(self):
        words = [make_word('a', difficulty=9), make_word('b', difficulty=2), make_word('c', difficulty=1)]
        settings = LearningSettings(ReviewMode.SEQUENTIAL, DifficultyPreference.EASY)
        self.assertEqual(next_word(words, 'a', settings).id, 'b')


class TestBatches(unittest.TestCase):

    def test_daily_batch_truncates_to_goal(self):
        words = [make_word(str(i)) for i in range(30)]
        settings = LearningSettings(review_mode=ReviewMode.SEQUENTIAL, daily_goal=20)
        batch = daily_batch(words, settings)
        self.assertEqual([w.id for w in batch], [str(i) for i in range(20)])
        self.assertEqual(len(daily_batch(words, settings, goal_size=5)), 5)
        self.assertEqual(daily_batch(words, settings, goal_size=0), [])

    def test_daily_batch_smaller_corpus(self):
        words = [make_word('a'), make_word('b')]
        self.assertEqual(len(daily_batch(words, LearningSettings(daily_goal=20))), 2)

    def test_due_for_review_keeps_corpus_order(self):
        words = [
            make_word('due-old', mastery_level=90, last_review=NOW - timedelta(days=4)),
            make_word('not-due', mastery_level=90, last_review=NOW - timedelta(days=1)),
            make_word('never'),
            make_word('due-low', mastery_level=10, last_review=NOW - timedelta(hours=2)),
        ]
        self.assertEqual([w.id for w in due_for_review(words, NOW)], ['due-old', 'never', 'due-low'])


if __name__ == '__main__':
    unittest.main()
