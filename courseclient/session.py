# courseclient/session.py
from __future__ import annotations

import logging
from typing import Callable, Optional

from .api import CourseApi, Identity
from .errors import AuthError, NotFoundError, ValidationError
from .navigation import ADVANCE_DELAY_SECONDS, DEFAULT_TASK_COUNT, NavigationController
from .scheduler import DEBOUNCE_SECONDS, DISPLAY_SECONDS, SaveScheduler, SaveState

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3


class CourseSession:
    """
    One signed-in learner: credential, save scheduler and navigation.

    Typical flow:
        session = CourseSession(CourseApi("http://localhost:8000"))
        await session.sign_in("alice")      # login, or register if unknown
        session.navigation.edit("Hello")    # autosaves after the debounce
        await session.navigation.on_task_completed()
    """

    def __init__(
        self,
        api: CourseApi,
        *,
        task_count: int = DEFAULT_TASK_COUNT,
        debounce: float = DEBOUNCE_SECONDS,
        display_period: float = DISPLAY_SECONDS,
        advance_delay: float = ADVANCE_DELAY_SECONDS,
        on_save_state: Optional[Callable[[SaveState], None]] = None,
        on_change: Optional[Callable[[NavigationController], None]] = None,
    ):
        self.api = api
        self.api.on_auth_lost = self._on_auth_lost
        self.identity: Optional[Identity] = None
        self.scheduler = SaveScheduler(
            api.save_draft,
            debounce=debounce,
            display_period=display_period,
            on_state=on_save_state,
        )
        self.navigation = NavigationController(
            api,
            self.scheduler,
            task_count=task_count,
            advance_delay=advance_delay,
            on_change=on_change,
        )

    @property
    def signed_in(self) -> bool:
        return self.api.token is not None

    async def sign_in(self, username: str) -> Identity:
        username = username.strip()
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters.")

        try:
            identity = await self.api.login(username)
        except NotFoundError:
            identity = await self.api.register(username)

        self.identity = identity
        logger.info("signed in as %s", identity.username)
        await self.navigation.start()
        return identity

    async def resume(self, token: str) -> bool:
        """Reuse a stored credential. False (and signed out) if it is no longer accepted."""
        self.api.token = token
        try:
            await self.navigation.start()
        except AuthError:
            logger.info("stored credential rejected, signing out")
            await self.sign_out()
            return False
        return True

    async def sign_out(self) -> None:
        """Save what is still buffered, then drop the credential."""
        if self.api.token is not None:
            await self.scheduler.wait_idle()
        self.api.token = None
        self.identity = None
        self.navigation.reset()

    def _on_auth_lost(self) -> None:
        logger.info("credential rejected, returning to sign in")
        self.identity = None
        self.scheduler.discard()
        self.navigation.reset()
