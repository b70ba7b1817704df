from typing import Any
from fastapi import APIRouter, Depends, status

from todo_api.common.exceptions import (
    ResourceType,
    invalid_input_response,
    resource_forbidden_response,
    resource_not_found_response,
    unauthenticated_response,
)
from todo_api.common.request_body import read_json_object
from todo_api.identity.dependencies import get_current_user
from todo_api.identity.schemas import AuthenticatedUser
from todo_api.todos.dependencies import get_todo_service
from todo_api.todos.schemas import (
    CreateTodoRequest,
    Todo,
    TodoUpdateResult,
    UpdateTodoRequest,
)
from todo_api.todos.service import TodoService


router = APIRouter(
    prefix="/todos",
    tags=["Todos"],
    responses={**unauthenticated_response},
)

owned_todo_responses = {
    **resource_forbidden_response(ResourceType.TODO),
    **resource_not_found_response(ResourceType.TODO),
}


def _body_schema(
    model: type[CreateTodoRequest] | type[UpdateTodoRequest],
) -> dict[str, Any]:
    # Bodies are read by read_json_object, so document them by hand
    return {
        "requestBody": {
            "content": {"application/json": {"schema": model.model_json_schema()}},
            "required": True,
        }
    }


@router.get("", response_model_exclude_none=True)
def list_todos(
    user: AuthenticatedUser = Depends(get_current_user),
    todo_service: TodoService = Depends(get_todo_service),
) -> list[Todo]:
    return todo_service.list_todos(user.uid)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
    responses={**invalid_input_response},
    openapi_extra=_body_schema(CreateTodoRequest),
)
def create_todo(
    user: AuthenticatedUser = Depends(get_current_user),
    payload: dict[str, Any] = Depends(read_json_object),
    todo_service: TodoService = Depends(get_todo_service),
) -> Todo:
    return todo_service.create_todo(user.uid, payload)


@router.get(
    "/{todo_id}",
    response_model_exclude_none=True,
    responses=owned_todo_responses,
)
def get_todo(
    todo_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    todo_service: TodoService = Depends(get_todo_service),
) -> Todo:
    return todo_service.get_todo(user.uid, todo_id)


@router.put(
    "/{todo_id}",
    response_model_exclude_none=True,
    responses={**invalid_input_response, **owned_todo_responses},
    openapi_extra=_body_schema(UpdateTodoRequest),
)
def update_todo(
    todo_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    payload: dict[str, Any] = Depends(read_json_object),
    todo_service: TodoService = Depends(get_todo_service),
) -> TodoUpdateResult:
    return todo_service.update_todo(user.uid, todo_id, payload)


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=owned_todo_responses,
)
def delete_todo(
    todo_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    todo_service: TodoService = Depends(get_todo_service),
):
    todo_service.delete_todo(user.uid, todo_id)
