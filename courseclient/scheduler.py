"""
SaveScheduler - debounce draft edits into save requests.

    IDLE -> PENDING -> SAVING -> SAVED | ERROR -> (display period) -> IDLE

- An edit (re)arms a 2 s debounce timer; only the latest content is sent.
- `save_now` (manual save, task completion) cancels the timer and saves at once.
- At most one save is in flight. Edits that arrive while saving are buffered
  and re-armed when the outstanding save resolves.
- Failures end in ERROR and are not retried; the next edit or manual save is
  the only way to a new attempt.

The scheduler knows nothing about the UI; observers subscribe via `on_state`.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

from .errors import CourseError

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 2.0
DISPLAY_SECONDS = 2.0

SaveFn = Callable[[int, str], Awaitable[None]]


class SaveState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class SaveScheduler:
    """
    Drives `save(task_id, content)` from edit events.

    Must be used from within a running event loop; all state lives on the
    instance and is only touched between suspension points.
    """

    def __init__(
        self,
        save: SaveFn,
        *,
        debounce: float = DEBOUNCE_SECONDS,
        display_period: float = DISPLAY_SECONDS,
        on_state: Optional[Callable[[SaveState], None]] = None,
    ):
        self._save = save
        self.debounce = debounce
        self.display_period = display_period
        self.on_state = on_state

        self.state = SaveState.IDLE
        self.last_error: Optional[CourseError] = None
        self._buffer: Optional[Tuple[int, str]] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._decay: Optional[asyncio.TimerHandle] = None
        self._inflight: Optional[asyncio.Task] = None

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def has_unsaved(self) -> bool:
        """True while an edit has not yet been handed to a save request."""
        return self._buffer is not None

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def edit(self, task_id: int, content: str) -> None:
        self._buffer = (task_id, content)
        if self.state is SaveState.SAVING:
            return
        self._arm()

    async def save_now(self, task_id: Optional[int] = None, content: Optional[str] = None) -> Optional[bool]:
        """
        Save immediately, skipping the debounce delay.

        `content` is the current text of `task_id`, so it replaces any edit of
        that task still buffered. Without arguments the buffered edit is saved
        (None if there is none). Waits for an outstanding save first. Returns
        True on success, False when the save ended in ERROR.
        """
        return await self._save_when_free(task_id, content, supersede=True)

    def flush_pending(self) -> Optional[asyncio.Future]:
        """
        Start saving the buffered edit right away and return the awaitable,
        or the outstanding save if nothing is buffered, or None.

        The buffered content is captured synchronously, so later edits (for
        instance on the next task) cannot replace it.
        """
        if self._buffer is None:
            return self._inflight
        task_id, content = self._take()
        self._cancel_timer()
        return asyncio.ensure_future(self._save_when_free(task_id, content, supersede=False))

    async def wait_idle(self) -> None:
        """Wait until nothing is buffered and no save is in flight."""
        while self._inflight is not None or self._buffer is not None:
            if self._inflight is None:
                await self.save_now()
            else:
                await asyncio.shield(self._inflight)

    def discard(self) -> None:
        """Drop the buffered edit and its debounce timer; an outstanding save runs on."""
        self._cancel_timer()
        self._buffer = None
        if self.state is SaveState.PENDING:
            self._set_state(SaveState.IDLE)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _set_state(self, state: SaveState) -> None:
        if state is self.state:
            return
        self.state = state
        if self._decay is not None:
            self._decay.cancel()
            self._decay = None
        if state in (SaveState.SAVED, SaveState.ERROR):
            self._decay = asyncio.get_running_loop().call_later(self.display_period, self._decay_to_idle)
        if self.on_state is not None:
            self.on_state(state)

    def _decay_to_idle(self) -> None:
        self._decay = None
        if self.state in (SaveState.SAVED, SaveState.ERROR):
            self._set_state(SaveState.IDLE)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self) -> None:
        self._cancel_timer()
        self._set_state(SaveState.PENDING)
        self._timer = asyncio.get_running_loop().call_later(self.debounce, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self.state is not SaveState.PENDING or self._inflight is not None or self._buffer is None:
            return
        self._start(*self._take())

    async def _save_when_free(self, task_id, content, *, supersede: bool) -> Optional[bool]:
        self._cancel_timer()
        while self._inflight is not None:
            await asyncio.shield(self._inflight)

        # no await from here until the request is issued
        if task_id is None:
            if self._buffer is None:
                return None
            task_id, content = self._take()
        elif supersede and self._buffer is not None and self._buffer[0] == task_id:
            self._buffer = None
        return await asyncio.shield(self._start(task_id, content))

    def _take(self) -> Tuple[int, str]:
        buffered, self._buffer = self._buffer, None
        return buffered

    def _start(self, task_id: int, content: str) -> asyncio.Task:
        self._cancel_timer()
        self._set_state(SaveState.SAVING)
        self._inflight = asyncio.ensure_future(self._run(task_id, content))
        return self._inflight

    async def _run(self, task_id: int, content: str) -> bool:
        try:
            await self._save(task_id, content)
        except CourseError as exc:
            logger.warning("saving task %s failed: %s", task_id, exc)
            self._finish(ok=False, error=exc)
            return False
        except Exception:
            self._finish(ok=False)
            raise
        self._finish(ok=True)
        return True

    def _finish(self, *, ok: bool, error: Optional[CourseError] = None) -> None:
        self._inflight = None
        self.last_error = error
        self._set_state(SaveState.SAVED if ok else SaveState.ERROR)
        if self._buffer is not None:
            self._arm()
