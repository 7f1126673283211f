"""REST API routes exposing progress tracking to the presentation layer."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from japanese_progress.tracking.tracker import InvalidProgressInput, ProgressTracker

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


class AnswerRequest(BaseModel):
    key: str = Field(min_length=1)
    correct: bool


class QuizResultRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    quiz_type: str
    score: int
    total_questions: int
    time_spent: int = 0


def get_tracker(request: Request) -> ProgressTracker:
    return request.app.state.tracker


def _bad_request(e: InvalidProgressInput) -> HTTPException:
    logger.warning("invalid_progress_input", error=str(e))
    return HTTPException(status_code=400, detail=str(e))


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/progress")
async def get_progress(tracker: ProgressTracker = Depends(get_tracker)) -> dict:
    return tracker.get_progress().model_dump(mode="json", by_alias=True)


@router.delete("/progress")
async def reset_progress(tracker: ProgressTracker = Depends(get_tracker)) -> dict:
    tracker.reset_progress()
    return {"status": "reset"}


@router.get("/progress/summary")
async def get_summary(tracker: ProgressTracker = Depends(get_tracker)) -> dict:
    """Level, XP band and recent activity for dashboards."""
    progress = tracker.get_progress()
    return {
        "level": progress.stats.level,
        "xp": progress.stats.xp,
        "levelProgress": tracker.get_level_progress().model_dump(by_alias=True),
        "recentQuizzes": [
            q.model_dump(mode="json", by_alias=True) for q in tracker.get_recent_quizzes()
        ],
        "recentAchievements": [
            a.model_dump(mode="json", by_alias=True) for a in tracker.get_recent_achievements()
        ],
    }


@router.post("/progress/characters/{item_class}")
async def answer_character(
    item_class: str,
    answer: AnswerRequest,
    tracker: ProgressTracker = Depends(get_tracker),
) -> dict:
    try:
        tracker.update_character_progress(item_class, answer.key, answer.correct)
        mastery = tracker.get_mastery_level(item_class, answer.key)
    except InvalidProgressInput as e:
        raise _bad_request(e)
    return {"key": answer.key, "mastery": mastery}


@router.post("/progress/vocabulary")
async def answer_vocabulary(
    answer: AnswerRequest, tracker: ProgressTracker = Depends(get_tracker)
) -> dict:
    try:
        tracker.update_vocabulary_progress(answer.key, answer.correct)
    except InvalidProgressInput as e:
        raise _bad_request(e)
    return {"key": answer.key, "mastery": tracker.get_vocabulary_mastery(answer.key)}


@router.get("/progress/vocabulary/{word}/mastery")
async def vocabulary_mastery(word: str, tracker: ProgressTracker = Depends(get_tracker)) -> dict:
    return {"key": word, "mastery": tracker.get_vocabulary_mastery(word)}


@router.post("/progress/quizzes")
async def record_quiz(
    result: QuizResultRequest, tracker: ProgressTracker = Depends(get_tracker)
) -> dict:
    try:
        tracker.record_quiz_result(
            result.quiz_type, result.score, result.total_questions, result.time_spent
        )
    except InvalidProgressInput as e:
        raise _bad_request(e)
    stats = tracker.get_progress().stats
    return stats.model_dump(mode="json", by_alias=True)


@router.get("/progress/mastery/{item_class}/{key}")
async def mastery_level(
    item_class: str, key: str, tracker: ProgressTracker = Depends(get_tracker)
) -> dict:
    try:
        mastery = tracker.get_mastery_level(item_class, key)
    except InvalidProgressInput as e:
        raise _bad_request(e)
    return {"key": key, "mastery": mastery}


@router.get("/progress/review/{item_class}")
async def characters_for_review(
    item_class: str, tracker: ProgressTracker = Depends(get_tracker)
) -> list[str]:
    try:
        return tracker.get_characters_for_review(item_class)
    except InvalidProgressInput as e:
        raise _bad_request(e)


@router.get("/progress/review-vocabulary")
async def vocabulary_for_review(tracker: ProgressTracker = Depends(get_tracker)) -> list[str]:
    return tracker.get_vocabulary_for_review()
