"""Progress data models for the Japanese study tracker.

Attribute names are snake_case; the persisted JSON uses the camelCase names the
browser app wrote to localStorage (``timesCorrect``, ``nextReview``, ...).
"""

from datetime import datetime, timezone
from enum import StrEnum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemClass(StrEnum):
    """Ledger classes that accept answers."""

    HIRAGANA = "hiragana"
    KATAKANA = "katakana"
    KANJI = "kanji"
    VOCABULARY = "vocabulary"


CHARACTER_CLASSES: tuple[ItemClass, ...] = (
    ItemClass.HIRAGANA,
    ItemClass.KATAKANA,
    ItemClass.KANJI,
)


class StudyLevel(StrEnum):
    """Level tier derived from learned item counts."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class AchievementCategory(StrEnum):
    LEARNING = "learning"
    STREAK = "streak"
    QUIZ = "quiz"
    SPECIAL = "special"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemProgress(_CamelModel):
    """Mastery counters shared by every ledger record."""

    mastery: int = Field(default=0, ge=0, le=100)
    last_reviewed: AwareDatetime = Field(default_factory=utcnow)
    times_correct: int = 0
    times_incorrect: int = 0
    next_review: AwareDatetime = Field(default_factory=utcnow)


class CharacterProgress(ItemProgress):
    character: str


class VocabularyProgress(ItemProgress):
    word: str


class GrammarProgress(ItemProgress):
    pattern: str


class QuizProgress(_CamelModel):
    """A completed quiz. Never modified after it is appended."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    quiz_type: str
    score: int
    total_questions: int
    correct_answers: int
    completed_at: AwareDatetime = Field(default_factory=utcnow)
    time_spent: int = 0  # seconds


class UserStats(_CamelModel):
    total_study_time: int = 0  # minutes
    total_quizzes: int = 0
    average_score: float = 0.0
    characters_learned: int = 0
    vocabulary_learned: int = 0
    grammar_points_learned: int = 0
    level: StudyLevel = StudyLevel.BEGINNER
    xp: int = 0


class Achievement(_CamelModel):
    id: str
    name: str
    description: str
    icon: str
    unlocked_at: AwareDatetime = Field(default_factory=utcnow)
    category: AchievementCategory


class UserProgress(_CamelModel):
    """Root aggregate holding every ledger, the quiz history and stats."""

    user_id: str = "default_user"
    hiragana: list[CharacterProgress] = Field(default_factory=list)
    katakana: list[CharacterProgress] = Field(default_factory=list)
    kanji: list[CharacterProgress] = Field(default_factory=list)
    vocabulary: list[VocabularyProgress] = Field(default_factory=list)
    grammar: list[GrammarProgress] = Field(default_factory=list)
    quizzes: list[QuizProgress] = Field(default_factory=list)
    stats: UserStats = Field(default_factory=UserStats)
    achievements: list[Achievement] = Field(default_factory=list)
    last_studied: AwareDatetime = Field(default_factory=utcnow)
    study_streak: int = 0

    @model_validator(mode="after")
    def _unique_keys(self) -> "UserProgress":
        ledgers = {
            "hiragana": [r.character for r in self.hiragana],
            "katakana": [r.character for r in self.katakana],
            "kanji": [r.character for r in self.kanji],
            "vocabulary": [r.word for r in self.vocabulary],
            "grammar": [r.pattern for r in self.grammar],
            "achievements": [a.id for a in self.achievements],
        }
        for name, keys in ledgers.items():
            seen = set()
            for key in keys:
                if key in seen:
                    raise ValueError(f"duplicate {name} entry {key!r}")
                seen.add(key)
        return self

    def has_achievement(self, achievement_id: str) -> bool:
        return any(a.id == achievement_id for a in self.achievements)


class LevelProgress(_CamelModel):
    """XP band position shown on the profile page."""

    current_level: int
    current_level_xp: int
    next_level_xp: int
    progress_percent: float
