from abc import ABC, abstractmethod
from datetime import datetime
from functools import wraps
from typing import Any, Callable, TypeVar

from todo_api.todos.schemas import Todo, TodoUpdate


F = TypeVar("F", bound=Callable[..., Any])


class TodoStoreError(Exception):
    """The backing store could not complete an operation."""


def translate_store_errors(*error_types: type[Exception]) -> Callable[[F], F]:
    """Re-raise the backend library's errors as TodoStoreError."""

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            try:
                return func(*args, **kwargs)
            except error_types as e:
                raise TodoStoreError(f"{func.__name__} failed: {e}") from e

        return wrapper  # type: ignore

    return decorator


class TodoStore(ABC):
    @abstractmethod
    def create_todo(
        self,
        id: str,
        owner_id: str,
        title: str,
        completed: bool,
        timestamp: datetime,
    ) -> Todo:
        pass

    @abstractmethod
    def get_todo(self, todo_id: str) -> Todo:
        pass

    @abstractmethod
    def list_todos(self, owner_id: str) -> list[Todo]:
        """Todos owned by owner_id, most recently created first."""
        pass

    @abstractmethod
    def update_todo(
        self,
        todo_id: str,
        updates: TodoUpdate,
        timestamp: datetime,
    ) -> Todo:
        pass

    @abstractmethod
    def delete_todo(self, todo_id: str) -> None:
        pass
