from fastapi import Depends

from todo_api.todos.service import TodoService
from todo_api.todos.store.base import TodoStore
from todo_api.todos.store.dependencies import get_todo_store


def get_todo_service(
    todo_store: TodoStore = Depends(get_todo_store),
) -> TodoService:
    return TodoService(todo_store=todo_store)
