"""
NavigationController - which task is active and how completion moves on.

Reads drafts and progress through CourseApi, routes editor content into the
SaveScheduler, and remembers the last visited task on the server.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Set

from .api import CourseApi, ProgressState
from .errors import CourseError, ValidationError
from .scheduler import SaveScheduler
from .words import word_count

logger = logging.getLogger(__name__)

DEFAULT_TASK_COUNT = 19
ADVANCE_DELAY_SECONDS = 2.0


class NavigationController:

    def __init__(
        self,
        api: CourseApi,
        scheduler: SaveScheduler,
        *,
        task_count: int = DEFAULT_TASK_COUNT,
        advance_delay: float = ADVANCE_DELAY_SECONDS,
        on_change: Optional[Callable[["NavigationController"], None]] = None,
    ):
        self.api = api
        self.scheduler = scheduler
        self.task_count = task_count
        self.advance_delay = advance_delay
        self.on_change = on_change

        self.active_task = 1
        self.content = ""
        self.progress: Optional[ProgressState] = None
        self._advance: Optional[asyncio.TimerHandle] = None
        self._background: Set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def completion_ratio(self) -> float:
        if self.progress is None:
            return 0.0
        return self.progress.completed_count / self.task_count

    @property
    def word_count(self) -> int:
        """Words in the editor content, recomputed on every edit."""
        return word_count(self.content)

    def is_completed(self, task_id: int) -> bool:
        return self.progress is not None and self.progress.is_completed(task_id)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def start(self) -> str:
        """Load progress and open the task the learner was last on."""
        await self.refresh_progress()
        last = self.progress.last_task
        if not 1 <= last <= self.task_count:
            last = 1
        return await self.switch_task(last)

    async def refresh_progress(self) -> ProgressState:
        self.progress = await self.api.get_progress()
        self._changed()
        return self.progress

    async def switch_task(self, task_id: int) -> str:
        """
        Make `task_id` active and return its saved draft.

        Unsaved edits of the previous task are saved in the background; the
        last-task pointer is updated best-effort.
        """
        if not 1 <= task_id <= self.task_count:
            raise ValidationError(f"task must be between 1 and {self.task_count}")

        self._cancel_advance()
        pending = self.scheduler.flush_pending()
        if pending is not None:
            self._track(pending)

        self.active_task = task_id
        self.content = ""
        self._changed()
        self._spawn(self._remember_last_task(task_id))

        content = await self.api.load_draft(task_id)
        if self.active_task == task_id:
            self.content = content
            self._changed()
        return content

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def edit(self, content: str) -> None:
        self.content = content
        self.scheduler.edit(self.active_task, content)

    async def save(self) -> Optional[bool]:
        """Manual save of the active task's current content."""
        return await self.scheduler.save_now(self.active_task, self.content)

    async def on_task_completed(self, task_id: Optional[int] = None) -> Optional[bool]:
        """
        Save, mark `task_id` (default: the active task) complete, refresh
        progress and, unless it was the last task, open the next one after
        `advance_delay` seconds.

        Returns the outcome of the save that preceded completion.
        """
        task_id = task_id or self.active_task
        if task_id == self.active_task:
            saved = await self.scheduler.save_now(task_id, self.content)
        else:
            pending = self.scheduler.flush_pending()
            saved = await pending if pending is not None else None

        await self.api.complete_task(task_id)
        await self.refresh_progress()

        if task_id < self.task_count:
            self._cancel_advance()
            self._advance = asyncio.get_running_loop().call_later(
                self.advance_delay, self._advance_to, task_id + 1
            )
        return saved

    async def drain(self) -> None:
        """Wait for background work: pending saves and last-task updates."""
        await self.scheduler.wait_idle()
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def reset(self) -> None:
        self._cancel_advance()
        self.active_task = 1
        self.content = ""
        self.progress = None
        self._changed()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _cancel_advance(self) -> None:
        if self._advance is not None:
            self._advance.cancel()
            self._advance = None

    def _advance_to(self, task_id: int) -> None:
        self._advance = None
        self._spawn(self.switch_task(task_id))

    def _spawn(self, coro) -> asyncio.Task:
        return self._track(asyncio.ensure_future(coro))

    def _track(self, fut):
        self._background.add(fut)
        fut.add_done_callback(self._done)
        return fut

    def _done(self, fut) -> None:
        self._background.discard(fut)
        if not fut.cancelled() and fut.exception() is not None:
            logger.error("background navigation step failed: %r", fut.exception())

    async def _remember_last_task(self, task_id: int) -> None:
        try:
            await self.api.set_last_task(task_id)
        except CourseError as exc:
            logger.warning("could not store last task %s: %s", task_id, exc)
