"""Per-item mastery updates and spaced-repetition scheduling."""

from datetime import datetime, timedelta

from japanese_progress.models.progress import (
    CharacterProgress,
    ItemClass,
    ItemProgress,
    UserProgress,
    VocabularyProgress,
)

CORRECT_GAIN = 10
INCORRECT_PENALTY = 5
MAX_MASTERY = 100

# (minimum post-update mastery, days until next review), highest first
REVIEW_INTERVALS: list[tuple[int, int]] = [
    (80, 7),
    (60, 3),
    (40, 2),
]
BASE_INTERVAL_DAYS = 1


def review_interval_days(mastery: int) -> int:
    """Days until an item with this mastery is due again."""
    for threshold, days in REVIEW_INTERVALS:
        if mastery >= threshold:
            return days
    return BASE_INTERVAL_DAYS


def calculate_next_review(mastery: int, now: datetime) -> datetime:
    return now + timedelta(days=review_interval_days(mastery))


def apply_answer(record: ItemProgress, correct: bool, now: datetime) -> None:
    """Fold one answer into a ledger record."""
    if correct:
        record.times_correct += 1
        record.mastery = min(MAX_MASTERY, record.mastery + CORRECT_GAIN)
    else:
        record.times_incorrect += 1
        record.mastery = max(0, record.mastery - INCORRECT_PENALTY)
    record.last_reviewed = now
    record.next_review = calculate_next_review(record.mastery, now)


def _key_of(record: ItemProgress) -> str:
    if isinstance(record, CharacterProgress):
        return record.character
    if isinstance(record, VocabularyProgress):
        return record.word
    return record.pattern


def ledger_for(progress: UserProgress, item_class: ItemClass) -> list:
    return getattr(progress, item_class.value)


def find_record(
    progress: UserProgress, item_class: ItemClass, key: str
) -> ItemProgress | None:
    for record in ledger_for(progress, item_class):
        if _key_of(record) == key:
            return record
    return None


def get_or_create_record(
    progress: UserProgress, item_class: ItemClass, key: str, now: datetime
) -> ItemProgress:
    """Return the record for ``key``, appending a fresh one if it is unseen."""
    record = find_record(progress, item_class, key)
    if record is not None:
        return record
    if item_class == ItemClass.VOCABULARY:
        record = VocabularyProgress(word=key, last_reviewed=now, next_review=now)
    else:
        record = CharacterProgress(character=key, last_reviewed=now, next_review=now)
    ledger_for(progress, item_class).append(record)
    return record


def mastery_of(progress: UserProgress, item_class: ItemClass, key: str) -> int:
    record = find_record(progress, item_class, key)
    return record.mastery if record is not None else 0


def due_keys(progress: UserProgress, item_class: ItemClass, now: datetime) -> list[str]:
    """Keys whose next review is at or before ``now``, in ledger order."""
    return [
        _key_of(record)
        for record in ledger_for(progress, item_class)
        if record.next_review <= now
    ]
