"""Out-of-band submission of finished questionnaires.

The wizard enqueues and moves on; this worker persists records in the
background. Failures never reach the wizard: they are logged and parked in a
bounded notifications channel for the UI to poll.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

from app.onboarding.models import WorkoutPreferences

logger = logging.getLogger(__name__)

SubmitFn = Callable[[uuid.UUID, WorkoutPreferences], Awaitable[None]]


@dataclass
class Submission:
    record: WorkoutPreferences
    user_id: uuid.UUID | None


@dataclass
class SubmissionFailure:
    message: str
    user_id: uuid.UUID | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    failed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "user_id": str(self.user_id) if self.user_id else None,
            "failed_at": self.failed_at.isoformat(),
        }


class SubmissionWorker:
    def __init__(self, submit: SubmitFn, notifications_limit: int = 50):
        self._submit = submit
        self._queue: asyncio.Queue[Submission | None] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self.notifications: deque[SubmissionFailure] = deque(maxlen=notifications_limit)
        self.submitted = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Submission worker started")

    async def stop(self) -> None:
        """Finish pending submissions, then stop the loop."""
        if self._task is None:
            return
        await self._queue.put(None)
        await self._task
        self._task = None
        logger.info("Submission worker stopped")

    def enqueue(self, record: WorkoutPreferences, user_id: uuid.UUID | None) -> None:
        self._queue.put_nowait(Submission(record=record, user_id=user_id))

    async def join(self) -> None:
        await self._queue.join()

    def clear_notifications(self) -> None:
        self.notifications.clear()

    def _fail(self, message: str, user_id: uuid.UUID | None) -> None:
        self.notifications.append(SubmissionFailure(message=message, user_id=user_id))

    async def _process(self, item: Submission) -> None:
        if item.user_id is None:
            logger.warning("Dropping questionnaire submission: no signed-in user")
            self._fail("Failed to save workout preferences: not signed in", None)
            return
        try:
            await self._submit(item.user_id, item.record)
        except Exception as e:
            logger.exception("Saving workout preferences failed for %s", item.user_id)
            self._fail(f"Failed to save workout preferences: {e}", item.user_id)
            return
        self.submitted += 1
        logger.info("Workout preferences saved for %s", item.user_id)

    async def _loop(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is None:
                    return
                await self._process(item)
            finally:
                self._queue.task_done()
