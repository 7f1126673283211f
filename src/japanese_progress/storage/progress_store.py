"""Progress store: owns the single UserProgress aggregate and its persistence."""

from collections.abc import Callable
from datetime import datetime

import structlog
from pydantic import ValidationError

from japanese_progress.models.progress import UserProgress, utcnow
from japanese_progress.storage.backends import InMemoryStorage, ProgressStorage

logger = structlog.get_logger()

DEFAULT_STORAGE_KEY = "japanese_learning_progress"
CORRUPT_SUFFIX = ".corrupt"


class ProgressStore:
    """Loads, persists and resets the progress record.

    Storage errors never reach the caller: on the first ``OSError`` the store
    switches to an in-memory backend for the rest of the session.

    Args:
        storage: Durable backend, or None to run in memory only.
        key: Fixed key the record is stored under.
        user_id: Identifier written into freshly created records.
        clock: Source of the current time.
    """

    def __init__(
        self,
        storage: ProgressStorage | None = None,
        key: str = DEFAULT_STORAGE_KEY,
        user_id: str = "default_user",
        clock: Callable[[], datetime] = utcnow,
    ):
        if storage is None:
            logger.warning("storage_unavailable", reason="no_backend", key=key)
            storage = InMemoryStorage()
        self._storage = storage
        self.key = key
        self.user_id = user_id
        self.clock = clock
        self._progress: UserProgress | None = None

    @property
    def in_memory(self) -> bool:
        return isinstance(self._storage, InMemoryStorage)

    @property
    def progress(self) -> UserProgress:
        """The live aggregate. Only tracking code may mutate it."""
        if self._progress is None:
            self._progress = self._load()
        return self._progress

    def snapshot(self) -> UserProgress:
        """Deep copy of the aggregate for callers outside the engine."""
        return self.progress.model_copy(deep=True)

    def save(self) -> None:
        """Persist the full aggregate."""
        text = self.progress.model_dump_json(by_alias=True)
        try:
            self._storage.write(self.key, text)
        except OSError as e:
            self._fall_back_to_memory("write", e)
            self._storage.write(self.key, text)

    def reset(self) -> UserProgress:
        """Discard the persisted record and start over with defaults."""
        try:
            self._storage.remove(self.key)
        except OSError as e:
            self._fall_back_to_memory("remove", e)
        self._progress = self._initialize()
        logger.info("progress_reset", user_id=self.user_id)
        return self._progress

    def _initialize(self) -> UserProgress:
        self._progress = UserProgress(user_id=self.user_id, last_studied=self.clock())
        self.save()
        return self._progress

    def _load(self) -> UserProgress:
        try:
            raw = self._storage.read(self.key)
        except OSError as e:
            self._fall_back_to_memory("read", e)
            raw = None

        if raw is None:
            logger.info("progress_initialized", user_id=self.user_id)
            return self._initialize()

        # ValidationError covers bad JSON and schema mismatches; other ValueErrors
        # come from text that is not valid UTF-8.
        try:
            raw.encode("utf-8")
            progress = UserProgress.model_validate_json(raw)
        except ValueError as e:
            logger.error(
                "progress_record_malformed",
                key=self.key,
                backup_key=self.key + CORRUPT_SUFFIX,
                error_count=e.error_count() if isinstance(e, ValidationError) else 1,
            )
            self._keep_corrupt_copy(raw)
            return self._initialize()

        logger.info(
            "progress_loaded",
            user_id=progress.user_id,
            quizzes=len(progress.quizzes),
        )
        return progress

    def _keep_corrupt_copy(self, raw: str) -> None:
        try:
            self._storage.write(self.key + CORRUPT_SUFFIX, raw)
        except OSError as e:
            self._fall_back_to_memory("write", e)

    def _fall_back_to_memory(self, operation: str, error: OSError) -> None:
        logger.warning(
            "storage_unavailable",
            operation=operation,
            key=self.key,
            error=str(error),
        )
        self._storage = InMemoryStorage()
