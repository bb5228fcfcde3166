# courseclient/api.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx

from .errors import AuthError, CourseError, RequestFailed, error_for_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    token: str
    username: str
    learner_id: str
    last_task: int = 1

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Identity":
        return cls(
            token=data["token"],
            username=data["username"],
            learner_id=data["userId"],
            last_task=data.get("lastTask") or 1,
        )


@dataclass(frozen=True)
class ProgressState:
    username: str
    last_task: int = 1
    entries: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ProgressState":
        return cls(
            username=data["username"],
            last_task=data.get("lastTask") or 1,
            entries=list(data.get("progress") or []),
        )

    def is_completed(self, task_id: int) -> bool:
        return any(e["task_id"] == task_id and e["completed"] for e in self.entries)

    @property
    def completed_count(self) -> int:
        return sum(1 for e in self.entries if e["completed"])


def _detail(r: httpx.Response) -> str:
    try:
        data = r.json()
    except ValueError:
        return r.text or r.reason_phrase
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    return str(data)


class CourseApi:
    """
    Thin async wrapper over the coursetrack HTTP API.

    Holds the learner credential. A 401 from any call drops the credential
    (and notifies `on_auth_lost`) so the caller goes back to signing in.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_auth_lost: Optional[Callable[[], None]] = None,
    ):
        self.token = token
        self.on_auth_lost = on_auth_lost
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "CourseApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _drop_credential(self) -> None:
        self.token = None
        if self.on_auth_lost is not None:
            self.on_auth_lost()

    async def _request(self, method: str, path: str, *, json: Any = None, auth: bool = True) -> Any:
        headers = {}
        if auth:
            if not self.token:
                raise AuthError("No credential.")
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            r = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise RequestFailed(f"{method} {path}: {exc!r}") from exc

        if r.status_code >= 400:
            err = error_for_status(r.status_code, _detail(r))
            if isinstance(err, AuthError) and auth:
                self._drop_credential()
            raise err
        try:
            return r.json()
        except ValueError as exc:
            raise CourseError(f"{method} {path}: response is not JSON", r.status_code) from exc

    # ---- identity ----

    async def register(self, username: str) -> Identity:
        identity = Identity.from_json(
            await self._request("POST", "/api/auth/register", json={"username": username}, auth=False)
        )
        self.token = identity.token
        return identity

    async def login(self, username: str) -> Identity:
        identity = Identity.from_json(
            await self._request("POST", "/api/auth/login", json={"username": username}, auth=False)
        )
        self.token = identity.token
        return identity

    # ---- progress & drafts ----

    async def get_progress(self) -> ProgressState:
        return ProgressState.from_json(await self._request("GET", "/api/user/progress"))

    async def set_last_task(self, task_id: int) -> None:
        await self._request("POST", "/api/user/last-task", json={"taskId": task_id})

    async def load_draft(self, task_id: int) -> str:
        data = await self._request("GET", f"/api/tasks/{task_id}/text")
        return data.get("content") or ""

    async def save_draft(self, task_id: int, content: str) -> None:
        await self._request("POST", f"/api/tasks/{task_id}/text", json={"content": content})

    async def complete_task(self, task_id: int) -> None:
        await self._request("POST", f"/api/tasks/{task_id}/complete")
