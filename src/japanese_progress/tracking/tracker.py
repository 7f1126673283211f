"""ProgressTracker: the operation set the presentation layer calls."""

from collections.abc import Callable
from datetime import datetime

import structlog

from japanese_progress.models.progress import (
    CHARACTER_CLASSES,
    Achievement,
    ItemClass,
    LevelProgress,
    QuizProgress,
    UserProgress,
)
from japanese_progress.storage.progress_store import ProgressStore
from japanese_progress.tracking import ledger
from japanese_progress.tracking.achievements import evaluate_achievements
from japanese_progress.tracking.quiz import record_quiz
from japanese_progress.tracking.stats import get_level_progress, recompute_stats

logger = structlog.get_logger()


class InvalidProgressInput(ValueError):
    """Raised before any state change when an operation gets bad arguments."""


def _character_class(item_class: str | ItemClass) -> ItemClass:
    try:
        parsed = ItemClass(item_class)
    except ValueError:
        parsed = None
    if parsed not in CHARACTER_CLASSES:
        allowed = ", ".join(c.value for c in CHARACTER_CLASSES)
        raise InvalidProgressInput(
            f"Unknown character class {item_class!r} (expected one of: {allowed})"
        )
    return parsed


def _is_whole_number(value) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


def _require_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidProgressInput("Item key must be a non-empty string")


class ProgressTracker:
    """Mastery, quiz and achievement tracking over a single progress record.

    Every mutating call runs lookup, update, recompute and persist before it
    returns. Read calls return copies or plain values and never create
    ledger records.

    Args:
        store: Owner of the aggregate and its persistence.
        clock: Source of the current time. Defaults to the store's clock.
    """

    def __init__(self, store: ProgressStore, clock: Callable[[], datetime] | None = None):
        self.store = store
        self._clock = clock or store.clock

    def get_progress(self) -> UserProgress:
        return self.store.snapshot()

    def reset_progress(self) -> None:
        self.store.reset()

    # -------------------------------------------------------------------------
    # Item ledger
    # -------------------------------------------------------------------------

    def update_character_progress(
        self, item_class: str | ItemClass, key: str, correct: bool
    ) -> None:
        """Record an answer for a hiragana, katakana or kanji character."""
        self._record_answer(_character_class(item_class), key, correct)

    def update_vocabulary_progress(self, key: str, correct: bool) -> None:
        self._record_answer(ItemClass.VOCABULARY, key, correct)

    def _record_answer(self, item_class: ItemClass, key: str, correct: bool) -> None:
        _require_key(key)
        now = self._clock()
        progress = self.store.progress
        record = ledger.get_or_create_record(progress, item_class, key, now)
        ledger.apply_answer(record, bool(correct), now)
        recompute_stats(progress, now)
        self.store.save()
        logger.debug(
            "answer_recorded",
            item_class=item_class.value,
            key=key,
            correct=correct,
            mastery=record.mastery,
        )

    def get_mastery_level(self, item_class: str | ItemClass, key: str) -> int:
        return ledger.mastery_of(self.store.progress, _character_class(item_class), key)

    def get_characters_for_review(self, item_class: str | ItemClass) -> list[str]:
        """Characters due for review now, in first-seen order."""
        return ledger.due_keys(self.store.progress, _character_class(item_class), self._clock())

    def get_vocabulary_mastery(self, word: str) -> int:
        return ledger.mastery_of(self.store.progress, ItemClass.VOCABULARY, word)

    def get_vocabulary_for_review(self) -> list[str]:
        return ledger.due_keys(self.store.progress, ItemClass.VOCABULARY, self._clock())

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    def record_quiz_result(
        self, quiz_type: str, score: int, total_questions: int, time_spent: int
    ) -> None:
        """Append a finished quiz, grant XP and check achievements.

        Args:
            quiz_type: Free-form quiz category (e.g. "hiragana").
            score: Percentage score, 0-100.
            total_questions: Number of questions asked, at least 1.
            time_spent: Seconds spent on the quiz.
        """
        if not _is_whole_number(score) or not 0 <= score <= 100:
            raise InvalidProgressInput(f"Quiz score must be an integer 0-100, got {score!r}")
        if not _is_whole_number(total_questions) or total_questions <= 0:
            raise InvalidProgressInput(
                f"total_questions must be a positive integer, got {total_questions!r}"
            )
        if not _is_whole_number(time_spent) or time_spent < 0:
            raise InvalidProgressInput(
                f"time_spent must be a non-negative integer, got {time_spent!r}"
            )
        score, total_questions, time_spent = int(score), int(total_questions), int(time_spent)

        now = self._clock()
        progress = self.store.progress
        quiz = record_quiz(progress, quiz_type, score, total_questions, time_spent, now)
        evaluate_achievements(progress, now)
        self.store.save()
        logger.info(
            "quiz_recorded",
            quiz_type=quiz_type,
            score=quiz.score,
            correct_answers=quiz.correct_answers,
            xp=progress.stats.xp,
        )

    def get_recent_quizzes(self, limit: int = 5) -> list[QuizProgress]:
        """Most recent quizzes first."""
        return list(reversed(self.store.progress.quizzes[-limit:])) if limit > 0 else []

    def get_recent_achievements(self, limit: int = 3) -> list[Achievement]:
        if limit <= 0:
            return []
        return [a.model_copy() for a in self.store.progress.achievements[-limit:]]

    def get_level_progress(self) -> LevelProgress:
        return get_level_progress(self.store.progress.stats.xp)
