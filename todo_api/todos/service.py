import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any
from uuid import uuid4
from pydantic import ValidationError

from todo_api.common.current_datetime import get_current_datetime
from todo_api.common.exceptions import (
    InvalidInputException,
    ResourceForbiddenException,
    ResourceType,
    StorageUnavailableException,
)
from todo_api.todos.schemas import (
    CreateTodoRequest,
    Todo,
    TodoUpdate,
    TodoUpdateResult,
    UpdateTodoRequest,
)
from todo_api.todos.store.base import TodoStore, TodoStoreError


logger = logging.getLogger(__name__)

CREATE_FIELD_ERRORS = {
    "title": "Todo title is required and must be a non-empty string.",
    "completed": "Completed must be a boolean.",
}

UPDATE_FIELD_ERRORS = {
    "title": "Title must be a non-empty string.",
    "completed": "Completed must be a boolean.",
}

UPDATABLE_FIELDS = ("title", "completed")


def describe_validation_error(e: ValidationError, field_errors: dict[str, str]) -> str:
    for error in e.errors():
        loc = error["loc"]
        if loc and loc[0] in field_errors:
            return field_errors[str(loc[0])]
    return "Invalid todo data."


class TodoService:
    """Every todo operation on behalf of an authenticated user.

    ``owner_id`` always comes from the verified bearer token, never from the
    request body. Reads and writes of a single todo check ownership before
    anything else is done with it.
    """

    def __init__(self, todo_store: TodoStore):
        self.todo_store = todo_store

    @contextmanager
    def _storage_errors(self, message: str) -> Iterator[None]:
        try:
            yield
        except TodoStoreError as e:
            logger.exception(e)
            raise StorageUnavailableException(message) from e

    def _get_owned_todo(self, owner_id: str, todo_id: str, action: str) -> Todo:
        todo = self.todo_store.get_todo(todo_id)

        if todo.owner_id != owner_id:
            raise ResourceForbiddenException(ResourceType.TODO, todo_id, action)

        return todo

    def list_todos(self, owner_id: str) -> list[Todo]:
        with self._storage_errors("Failed to fetch todos. Please try again later."):
            return self.todo_store.list_todos(owner_id)

    def create_todo(self, owner_id: str, payload: Mapping[str, Any]) -> Todo:
        try:
            todo_input = CreateTodoRequest.model_validate(payload)
        except ValidationError as e:
            raise InvalidInputException(
                describe_validation_error(e, CREATE_FIELD_ERRORS)
            ) from e

        with self._storage_errors("Failed to add todo. Please try again later."):
            todo = self.todo_store.create_todo(
                id=str(uuid4()),
                owner_id=owner_id,
                title=todo_input.title,
                completed=todo_input.completed,
                timestamp=get_current_datetime(),
            )

        logger.info(f"Created todo '{todo.id}' for user '{owner_id}'")
        return todo

    def get_todo(self, owner_id: str, todo_id: str) -> Todo:
        with self._storage_errors("Failed to fetch todo. Please try again later."):
            return self._get_owned_todo(owner_id, todo_id, "access")

    def update_todo(
        self, owner_id: str, todo_id: str, payload: Mapping[str, Any]
    ) -> TodoUpdateResult:
        if not any(field in payload for field in UPDATABLE_FIELDS):
            raise InvalidInputException(
                'No update data provided. Requires "title" or "completed".'
            )

        with self._storage_errors("Failed to update todo. Please try again later."):
            self._get_owned_todo(owner_id, todo_id, "update")

            try:
                todo_input = UpdateTodoRequest.model_validate(payload)
            except ValidationError as e:
                raise InvalidInputException(
                    describe_validation_error(e, UPDATE_FIELD_ERRORS)
                ) from e

            updates = TodoUpdate(title=todo_input.title, completed=todo_input.completed)
            todo = self.todo_store.update_todo(
                todo_id, updates, get_current_datetime()
            )

        return TodoUpdateResult(
            message="Todo updated successfully.",
            id=todo.id,
            title=todo.title if updates.title is not None else None,
            completed=todo.completed if updates.completed is not None else None,
            updated_at=todo.updated_at,
        )

    def delete_todo(self, owner_id: str, todo_id: str) -> None:
        with self._storage_errors("Failed to delete todo. Please try again later."):
            self._get_owned_todo(owner_id, todo_id, "delete")
            self.todo_store.delete_todo(todo_id)

        logger.info(f"Deleted todo '{todo_id}' for user '{owner_id}'")
