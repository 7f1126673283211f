"""Folding completed quizzes into history, statistics and XP."""

import math
from datetime import datetime

from japanese_progress.models.progress import QuizProgress, UserProgress


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def correct_answers_for(score: int, total_questions: int) -> int:
    return round_half_up(score * total_questions / 100)


def record_quiz(
    progress: UserProgress,
    quiz_type: str,
    score: int,
    total_questions: int,
    time_spent: int,
    now: datetime,
) -> QuizProgress:
    """Append a quiz and update the accumulated quiz statistics.

    XP grows by the rounded percentage score only, so a perfect quiz is
    always worth 100 XP whatever its length. The average covers the whole
    history.
    """
    quiz = QuizProgress(
        quiz_type=quiz_type,
        score=score,
        total_questions=total_questions,
        correct_answers=correct_answers_for(score, total_questions),
        completed_at=now,
        time_spent=time_spent,
    )
    progress.quizzes.append(quiz)

    stats = progress.stats
    stats.total_quizzes += 1
    stats.xp += round_half_up(score)
    stats.average_score = sum(q.score for q in progress.quizzes) / len(progress.quizzes)
    progress.last_studied = now
    return quiz
