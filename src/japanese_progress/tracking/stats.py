"""Statistics derived from the ledgers, plus XP level bands."""

from datetime import datetime

from japanese_progress.models.progress import (
    CHARACTER_CLASSES,
    ItemProgress,
    LevelProgress,
    StudyLevel,
    UserProgress,
)

LEARNED_MASTERY = 70
INTERMEDIATE_THRESHOLD = 100
ADVANCED_THRESHOLD = 200

XP_LEVELS: list[int] = [0, 100, 300, 600, 1000, 1500, 2100, 2800, 3600, 4500, 5500]


def count_learned(records: list[ItemProgress]) -> int:
    return sum(1 for r in records if r.mastery >= LEARNED_MASTERY)


def level_for(total_learned: int) -> StudyLevel:
    """Level tier from the combined character + vocabulary learned count."""
    if total_learned >= ADVANCED_THRESHOLD:
        return StudyLevel.ADVANCED
    elif total_learned >= INTERMEDIATE_THRESHOLD:
        return StudyLevel.INTERMEDIATE
    return StudyLevel.BEGINNER


def recompute_stats(progress: UserProgress, now: datetime) -> None:
    """Re-derive every derived statistic from the ledgers.

    ``xp``, ``total_quizzes``, ``average_score`` and ``total_study_time`` are
    left alone: they are accumulated by quiz recording, not derived here.
    """
    stats = progress.stats
    stats.characters_learned = sum(
        count_learned(getattr(progress, c.value)) for c in CHARACTER_CLASSES
    )
    stats.vocabulary_learned = count_learned(progress.vocabulary)
    stats.grammar_points_learned = count_learned(progress.grammar)
    stats.level = level_for(stats.characters_learned + stats.vocabulary_learned)
    progress.last_studied = now


def get_level_progress(xp: int) -> LevelProgress:
    """Locate ``xp`` within the XP bands.

    Levels are 1-based. Past the last band the level is ``len(XP_LEVELS)``
    and progress is pinned to 100.
    """
    if xp >= XP_LEVELS[-1]:
        return LevelProgress(
            current_level=len(XP_LEVELS),
            current_level_xp=XP_LEVELS[-1],
            next_level_xp=XP_LEVELS[-1],
            progress_percent=100.0,
        )
    current_level = 1
    for i in range(len(XP_LEVELS) - 1):
        if XP_LEVELS[i] <= xp < XP_LEVELS[i + 1]:
            current_level = i + 1
            break
    floor = XP_LEVELS[current_level - 1]
    ceiling = XP_LEVELS[current_level]
    return LevelProgress(
        current_level=current_level,
        current_level_xp=floor,
        next_level_xp=ceiling,
        progress_percent=(max(xp, 0) - floor) / (ceiling - floor) * 100,
    )
