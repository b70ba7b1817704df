import logging
from types import TracebackType
from typing import Any, Type
from urllib.parse import quote
from aiohttp import ClientSession, ClientTimeout

from todo_api.client.exceptions import NotAuthenticatedError, TodoClientError
from todo_api.identity.session import AuthSession
from todo_api.todos.schemas import Todo, TodoUpdateResult


logger = logging.getLogger(__name__)


class TodoClient:
    """Async client for the todo API, authenticated by an AuthSession.

    Every call reads the ID token from the session at request time, so a
    sign-out or account switch takes effect on the next request.
    """

    def __init__(
        self,
        *,
        base_url: str,
        auth_session: AuthSession,
        user_agent: str = "TodoAPI",
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth_session = auth_session
        self.user_agent = user_agent
        self.timeout = ClientTimeout(total=timeout)
        self.session: ClientSession | None = None

    async def __aenter__(self):
        return self

    async def __aexit__(
        self, exc_type: Type[Exception], exc: Exception, tb: TracebackType
    ):
        await self.close()

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    def _get_session(self) -> ClientSession:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                headers={
                    "User-Agent": self.user_agent,
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self.session

    def _auth_headers(self) -> dict[str, str]:
        id_token = self.auth_session.id_token
        if self.auth_session.current_user is None or not id_token:
            raise NotAuthenticatedError("No authenticated user found for API request.")
        return {"Authorization": f"Bearer {id_token}"}

    async def request(
        self,
        method: str,
        path: str,
        fallback_error: str,
        json: dict[str, Any] | None = None,
    ) -> Any | None:
        headers = self._auth_headers()
        session = self._get_session()

        async with session.request(
            method, f"{self.base_url}{path}", json=json, headers=headers
        ) as response:
            if response.status >= 400:
                detail = fallback_error
                try:
                    data = await response.json(content_type=None)
                    if isinstance(data, dict) and isinstance(data.get("detail"), str):
                        detail = data["detail"]
                except ValueError:
                    logger.debug(f"Non-JSON error body from {method} {path}")
                raise TodoClientError(response.status, detail)

            if response.status == 204:
                return None

            return await response.json(content_type=None)

    async def list_todos(self) -> list[Todo]:
        data = await self.request("GET", "/todos", "Failed to fetch todos.")
        return [Todo.model_validate(item) for item in data or []]

    async def create_todo(self, title: str, completed: bool | None = None) -> Todo:
        body: dict[str, Any] = {"title": title}
        if completed is not None:
            body["completed"] = completed

        data = await self.request("POST", "/todos", "Failed to create todo.", json=body)
        return Todo.model_validate(data)

    async def get_todo(self, todo_id: str) -> Todo:
        data = await self.request(
            "GET", f"/todos/{quote(todo_id, safe='')}", "Failed to fetch todo."
        )
        return Todo.model_validate(data)

    async def update_todo(
        self,
        todo_id: str,
        *,
        title: str | None = None,
        completed: bool | None = None,
    ) -> TodoUpdateResult:
        body: dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if completed is not None:
            body["completed"] = completed

        data = await self.request(
            "PUT",
            f"/todos/{quote(todo_id, safe='')}",
            "Failed to update todo.",
            json=body,
        )
        return TodoUpdateResult.model_validate(data)

    async def delete_todo(self, todo_id: str) -> None:
        await self.request(
            "DELETE", f"/todos/{quote(todo_id, safe='')}", "Failed to delete todo."
        )
