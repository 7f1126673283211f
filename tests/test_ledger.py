"""Tests for per-item mastery updates and review scheduling."""

from datetime import timedelta

import pytest

from japanese_progress.models.progress import (
    CharacterProgress,
    ItemClass,
    UserProgress,
    VocabularyProgress,
)
from japanese_progress.tracking.ledger import (
    apply_answer,
    calculate_next_review,
    due_keys,
    find_record,
    get_or_create_record,
    mastery_of,
    review_interval_days,
)

from conftest import START


class TestApplyAnswer:
    def test_correct_adds_ten(self):
        record = CharacterProgress(character="あ", mastery=30)
        apply_answer(record, True, START)
        assert record.mastery == 40
        assert record.times_correct == 1
        assert record.times_incorrect == 0

    def test_incorrect_subtracts_five(self):
        record = CharacterProgress(character="あ", mastery=30)
        apply_answer(record, False, START)
        assert record.mastery == 25
        assert record.times_incorrect == 1

    def test_clamps_at_100(self):
        record = CharacterProgress(character="あ", mastery=95)
        apply_answer(record, True, START)
        assert record.mastery == 100
        apply_answer(record, True, START)
        assert record.mastery == 100
        assert record.times_correct == 2

    def test_clamps_at_0(self):
        record = CharacterProgress(character="あ", mastery=3)
        apply_answer(record, False, START)
        assert record.mastery == 0
        apply_answer(record, False, START)
        assert record.mastery == 0

    def test_mastery_stays_in_range_over_mixed_sequence(self):
        record = VocabularyProgress(word="ねこ")
        answers = [True] * 13 + [False] * 30 + [True, False] * 10
        for correct in answers:
            apply_answer(record, correct, START)
            assert 0 <= record.mastery <= 100

    def test_sets_last_reviewed(self):
        record = CharacterProgress(character="あ")
        apply_answer(record, True, START)
        assert record.last_reviewed == START


class TestScheduling:
    @pytest.mark.parametrize(
        "before, after, days",
        [
            (75, 85, 7),
            (55, 65, 3),
            (35, 45, 2),
            (0, 10, 1),
        ],
    )
    def test_next_review_from_post_update_mastery(self, before, after, days):
        record = CharacterProgress(character="き", mastery=before)
        apply_answer(record, True, START)
        assert record.mastery == after
        assert record.next_review == START + timedelta(days=days)

    @pytest.mark.parametrize(
        "mastery, days",
        [(100, 7), (80, 7), (79, 3), (60, 3), (59, 2), (40, 2), (39, 1), (0, 1)],
    )
    def test_interval_boundaries(self, mastery, days):
        assert review_interval_days(mastery) == days

    def test_incorrect_answer_uses_lowered_mastery(self):
        record = CharacterProgress(character="き", mastery=80)
        apply_answer(record, False, START)
        assert record.mastery == 75
        assert record.next_review == START + timedelta(days=3)

    def test_calculate_next_review(self):
        assert calculate_next_review(50, START) == START + timedelta(days=2)


class TestLedgerLookup:
    def test_get_or_create_appends_once(self):
        progress = UserProgress()
        first = get_or_create_record(progress, ItemClass.KANJI, "日", START)
        again = get_or_create_record(progress, ItemClass.KANJI, "日", START)
        assert first is again
        assert len(progress.kanji) == 1
        assert first.mastery == 0
        assert first.times_correct == 0

    def test_creates_vocabulary_record(self):
        progress = UserProgress()
        record = get_or_create_record(progress, ItemClass.VOCABULARY, "みず", START)
        assert isinstance(record, VocabularyProgress)
        assert progress.vocabulary[0].word == "みず"

    def test_classes_are_separate(self):
        progress = UserProgress()
        get_or_create_record(progress, ItemClass.HIRAGANA, "か", START)
        assert find_record(progress, ItemClass.KATAKANA, "か") is None

    def test_mastery_of_unseen_key_does_not_create(self):
        progress = UserProgress()
        assert mastery_of(progress, ItemClass.HIRAGANA, "ん") == 0
        assert progress.hiragana == []

    def test_due_keys_in_ledger_order(self):
        progress = UserProgress(hiragana=[
            CharacterProgress(character="う", next_review=START - timedelta(hours=1)),
            CharacterProgress(character="あ", next_review=START + timedelta(days=1)),
            CharacterProgress(character="い", next_review=START),
        ])
        assert due_keys(progress, ItemClass.HIRAGANA, START) == ["う", "い"]
