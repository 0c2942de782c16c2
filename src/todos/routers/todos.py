from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ..errors import TodoException
from ..schemas import CreateTodo, ErrorResponse, TodoListResponse, TodoResponse, UpdateTodo
from ..services import Service

router = APIRouter(
    prefix="/api/todos/{email}",
    tags=["todos"],
)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request, id or dates"},
    500: {"model": ErrorResponse, "description": "Store failure"},
}


# PUBLIC_INTERFACE
def get_service(request: Request) -> Service:
    """
    Dependency returning the Service wired into the application at startup.
    """
    return request.app.state.service


# PUBLIC_INTERFACE
def status_code_for(exc: TodoException) -> int:
    """Map a TodoException to the HTTP status returned to the caller."""
    if exc.is_client_error:
        return status.HTTP_400_BAD_REQUEST
    if exc.is_conflict:
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item for the owner and return the created resource.",
    responses={201: {"description": "Todo created successfully"}, **_ERROR_RESPONSES},
)
def create_todo(email: str, payload: CreateTodo, service: Service = Depends(get_service)) -> TodoResponse:
    """
    Create a new Todo.
    """
    return TodoResponse(data=service.create(email, payload))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TodoListResponse,
    summary="List Todos",
    description="List every Todo item of the owner. Order is unspecified.",
    responses={200: {"description": "List retrieved successfully"}, **_ERROR_RESPONSES},
)
def list_todos(email: str, service: Service = Depends(get_service)) -> TodoListResponse:
    return TodoListResponse(data=service.get_all(email))


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={200: {"description": "Todo found"}, **_ERROR_RESPONSES},
)
def get_todo(email: str, todo_id: str, service: Service = Depends(get_service)) -> TodoResponse:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoResponse(data=service.get_by_id(email, todo_id))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Replace Todo",
    description=(
        "Replace the name, description and dates of a Todo item. "
        "Completed todos cannot be modified."
    ),
    responses={
        200: {"description": "Todo updated"},
        409: {"model": ErrorResponse, "description": "Todo is completed"},
        **_ERROR_RESPONSES,
    },
)
def update_todo(
    email: str, todo_id: str, payload: UpdateTodo, service: Service = Depends(get_service)
) -> TodoResponse:
    return TodoResponse(data=service.update(email, todo_id, payload))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a Todo item by ID. Deleting an unknown ID succeeds.",
    responses={204: {"description": "Todo deleted"}, **_ERROR_RESPONSES},
)
def delete_todo(email: str, todo_id: str, service: Service = Depends(get_service)) -> Response:
    """
    Delete a Todo. Returns 204 on success.
    """
    service.delete(email, todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
