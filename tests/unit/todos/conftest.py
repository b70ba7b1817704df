from datetime import datetime
from typing import Generator
import pytest
from fastapi.testclient import TestClient

from todo_api.common.exceptions import ResourceNotFoundException, ResourceType
from todo_api.identity.dependencies import get_identity_verifier
from todo_api.identity.static import StaticIdentityVerifier
from todo_api.main import app
from todo_api.todos.schemas import Todo, TodoUpdate
from todo_api.todos.store.base import TodoStore
from todo_api.todos.store.dependencies import get_todo_store


class InMemoryTodoStore(TodoStore):
    def __init__(self) -> None:
        self.todos: dict[str, Todo] = {}

    def create_todo(
        self,
        id: str,
        owner_id: str,
        title: str,
        completed: bool,
        timestamp: datetime,
    ) -> Todo:
        todo = Todo(
            id=id,
            title=title,
            completed=completed,
            owner_id=owner_id,
            created_at=timestamp,
        )
        self.todos[id] = todo
        return todo

    def get_todo(self, todo_id: str) -> Todo:
        if todo_id not in self.todos:
            raise ResourceNotFoundException(ResourceType.TODO, todo_id)
        return self.todos[todo_id]

    def list_todos(self, owner_id: str) -> list[Todo]:
        owned = [todo for todo in self.todos.values() if todo.owner_id == owner_id]
        return sorted(owned, key=lambda todo: todo.created_at, reverse=True)  # type: ignore

    def update_todo(
        self,
        todo_id: str,
        updates: TodoUpdate,
        timestamp: datetime,
    ) -> Todo:
        todo = self.get_todo(todo_id)
        changes = updates.model_dump(exclude_none=True)
        updated = todo.model_copy(update={**changes, "updated_at": timestamp})
        self.todos[todo_id] = updated
        return updated

    def delete_todo(self, todo_id: str) -> None:
        self.get_todo(todo_id)
        del self.todos[todo_id]


@pytest.fixture
def todo_store() -> InMemoryTodoStore:
    return InMemoryTodoStore()


@pytest.fixture
def client(todo_store: InMemoryTodoStore) -> Generator[TestClient, None, None]:
    verifier = StaticIdentityVerifier({"token-u1": "U1", "token-u2": "U2"})
    app.dependency_overrides[get_todo_store] = lambda: todo_store
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def u1_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-u1"}


@pytest.fixture
def u2_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-u2"}
