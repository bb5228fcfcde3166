# progress/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from coursetrack.exceptions import AuthError, ValidationError, storage_errors
from learners.models import Learner

from .models import Draft, TaskProgress

logger = logging.getLogger(__name__)


def task_count() -> int:
    return settings.COURSE_TASK_COUNT


def validate_task_id(task_id: int) -> int:
    """Task ids are 1..N where N is settings.COURSE_TASK_COUNT."""
    n = task_count()
    if isinstance(task_id, bool) or not isinstance(task_id, int) or not 1 <= task_id <= n:
        raise ValidationError(f"taskId must be an integer between 1 and {n}.")
    return task_id


@dataclass(frozen=True)
class ProgressSnapshot:
    username: str
    last_task: int
    entries: List[Dict] = field(default_factory=list)

    def as_response(self) -> dict:
        return {
            "username": self.username,
            "lastTask": self.last_task,
            "progress": list(self.entries),
        }


class ProgressStore:
    """
    Per-learner course state: last task pointer, drafts, completion flags.

    Every operation takes the learner id resolved from a validated credential
    and only touches that learner's rows. Database failures surface as
    StorageError; nothing is retried here.

    Two writers on the same (learner, task) key are serialized by the unique
    constraint; the later write wins. Concurrent saves from two open tabs can
    therefore overwrite each other silently.
    """

    def _learner(self, learner_id) -> Learner:
        try:
            learner = Learner.objects.filter(pk=learner_id).first()
        except DjangoValidationError:
            learner = None
        if learner is None:
            raise AuthError("Unknown learner.")
        return learner

    def _upsert(self, model, learner: Learner, task_id: int, values: dict) -> None:
        # update_or_create re-reads the row when a concurrent insert wins the
        # unique constraint; any other IntegrityError propagates.
        with transaction.atomic():
            model.objects.update_or_create(learner=learner, task_id=task_id, defaults=values)

    @storage_errors
    def get_progress(self, learner_id) -> ProgressSnapshot:
        learner = self._learner(learner_id)
        entries = [
            {"task_id": task_id, "completed": completed}
            for task_id, completed in TaskProgress.objects.filter(learner=learner)
            .order_by("task_id")
            .values_list("task_id", "completed")
        ]
        return ProgressSnapshot(
            username=learner.username,
            last_task=learner.last_task or 1,
            entries=entries,
        )

    @storage_errors
    def set_last_task(self, learner_id, task_id: int) -> None:
        validate_task_id(task_id)
        learner = self._learner(learner_id)
        Learner.objects.filter(pk=learner.pk).update(last_task=task_id)

    @storage_errors
    def save_draft(self, learner_id, task_id: int, content: str) -> None:
        validate_task_id(task_id)
        learner = self._learner(learner_id)
        self._upsert(Draft, learner, task_id, {"content": content, "updated_at": timezone.now()})
        logger.debug("draft saved learner=%s task=%s chars=%d", learner.pk, task_id, len(content))

    @storage_errors
    def load_draft(self, learner_id, task_id: int) -> str:
        validate_task_id(task_id)
        learner = self._learner(learner_id)
        content = (
            Draft.objects.filter(learner=learner, task_id=task_id)
            .values_list("content", flat=True)
            .first()
        )
        return content or ""

    @storage_errors
    def complete_task(self, learner_id, task_id: int) -> None:
        validate_task_id(task_id)
        learner = self._learner(learner_id)
        self._upsert(
            TaskProgress,
            learner,
            task_id,
            {"completed": True, "completed_at": timezone.now()},
        )
        logger.info("task completed learner=%s task=%s", learner.pk, task_id)
