from enum import Enum
import logging
from typing import Any
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    TODO = "Todo"


# Exceptions
class ResourceNotFoundException(Exception):
    def __init__(
        self, resource_type: ResourceType, identifier: str, message: str | None = None
    ):
        self.resource_type = resource_type.value
        self.identifier = identifier
        super().__init__(message or f"{self.resource_type} '{identifier}' not found")


class ResourceForbiddenException(Exception):
    def __init__(self, resource_type: ResourceType, identifier: str, action: str):
        self.resource_type = resource_type.value
        self.identifier = identifier
        self.action = action
        super().__init__(
            f"Forbidden: You do not have permission to {action} this {self.resource_type.lower()}."
        )


class UnauthenticatedException(Exception):
    def __init__(self, message: str):
        super().__init__(message)


class InvalidInputException(Exception):
    def __init__(self, message: str):
        super().__init__(message)


class StorageUnavailableException(Exception):
    def __init__(self, message: str):
        super().__init__(message)


# Exception handlers
def resource_not_found_handler(request: Request, exc: ResourceNotFoundException):
    logger.error(exc)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


def resource_forbidden_handler(request: Request, exc: ResourceForbiddenException):
    logger.warning(exc)
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc)},
    )


def unauthenticated_handler(request: Request, exc: UnauthenticatedException):
    logger.warning(exc)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


def invalid_input_handler(request: Request, exc: InvalidInputException):
    logger.error(exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


def storage_unavailable_handler(request: Request, exc: StorageUnavailableException):
    logger.error(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


def unexpected_exception_handler(request: Request, exc: Exception):
    logger.error(exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


def validation_exception_handler(request: Request, exc: RequestValidationError):
    def loc_to_dot_sep(loc: tuple[Any, ...]) -> str:
        """Convert a tuple of location parts to a dot-separated string"""
        path = ""
        for i, x in enumerate(loc):
            if isinstance(x, str):
                if i > 0:
                    path += "."
                path += x
            elif isinstance(x, int):
                path += f"[{x}]"
            else:
                raise TypeError("Unexpected type")
        return path

    errors = [
        {**error, "loc": loc_to_dot_sep(tuple(error["loc"]))} for error in exc.errors()
    ]

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": "Validation error", "errors": errors}),
    )


# Response definitions for OpenAPI documentation
ResponseDict = dict[int | str, dict[str, Any]]


def resource_not_found_response(
    resource_type: ResourceType,
) -> ResponseDict:
    return {
        404: {
            "description": f"{resource_type.value} not found",
            "content": {
                "application/json": {
                    "example": {"detail": f"{resource_type.value} 'example' not found"}
                }
            },
        }
    }


def resource_forbidden_response(resource_type: ResourceType) -> ResponseDict:
    return {
        403: {
            "description": f"{resource_type.value} belongs to another user",
            "content": {
                "application/json": {
                    "example": {
                        "detail": f"Forbidden: You do not have permission to access this {resource_type.value.lower()}."
                    }
                }
            },
        }
    }


unauthenticated_response: ResponseDict = {
    401: {
        "description": "Missing, invalid or expired bearer token",
        "content": {
            "application/json": {
                "example": {"detail": "Unauthorized: Invalid or expired token."}
            }
        },
    }
}

invalid_input_response: ResponseDict = {
    400: {
        "description": "Invalid input",
        "content": {
            "application/json": {
                "example": {"detail": "Title must be a non-empty string."}
            }
        },
    }
}

internal_error_response: ResponseDict = {
    500: {
        "description": "Internal server error",
        "content": {
            "application/json": {"example": {"detail": "An unexpected error occurred"}}
        },
    }
}
