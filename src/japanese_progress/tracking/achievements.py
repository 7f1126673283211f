"""One-shot achievement rules."""

from collections.abc import Callable
from datetime import datetime

import structlog
from pydantic import BaseModel, ConfigDict

from japanese_progress.models.progress import (
    Achievement,
    AchievementCategory,
    UserProgress,
)

logger = structlog.get_logger()


class AchievementRule(BaseModel):
    """Unlocks one achievement when its condition holds."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    category: AchievementCategory
    condition: Callable[[UserProgress], bool]

    def unlock(self, now: datetime) -> Achievement:
        return Achievement(
            id=self.id,
            name=self.name,
            description=self.description,
            icon=self.icon,
            unlocked_at=now,
            category=self.category,
        )


def _perfect_quiz_count(progress: UserProgress) -> int:
    return sum(1 for q in progress.quizzes if q.score == 100)


ACHIEVEMENT_RULES: list[AchievementRule] = [
    AchievementRule(
        id="first_quiz",
        name="First Steps",
        description="Complete your first quiz",
        icon="🌟",
        category=AchievementCategory.QUIZ,
        condition=lambda p: p.stats.total_quizzes == 1,
    ),
    AchievementRule(
        id="perfect_score",
        name="Perfect!",
        description="Get a perfect score on a quiz",
        icon="💯",
        category=AchievementCategory.QUIZ,
        # Exactly one perfect quiz on record, not "at least one".
        condition=lambda p: _perfect_quiz_count(p) == 1,
    ),
]


def evaluate_achievements(
    progress: UserProgress,
    now: datetime,
    rules: list[AchievementRule] | None = None,
) -> list[Achievement]:
    """Append every newly satisfied achievement and return the new ones.

    A rule whose id is already unlocked is skipped, so repeated evaluation
    of the same state adds nothing.
    """
    unlocked = []
    for rule in ACHIEVEMENT_RULES if rules is None else rules:
        if progress.has_achievement(rule.id) or not rule.condition(progress):
            continue
        achievement = rule.unlock(now)
        progress.achievements.append(achievement)
        unlocked.append(achievement)
        logger.info("achievement_unlocked", achievement_id=rule.id, user_id=progress.user_id)
    return unlocked
