import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from todo_api.common.exceptions import (
    InvalidInputException,
    ResourceForbiddenException,
    ResourceNotFoundException,
    StorageUnavailableException,
    UnauthenticatedException,
    internal_error_response,
    invalid_input_handler,
    resource_forbidden_handler,
    resource_not_found_handler,
    storage_unavailable_handler,
    unauthenticated_handler,
    unexpected_exception_handler,
    validation_exception_handler,
)
from todo_api.common.opentelemetry import setup_opentelemetry
from todo_api.common.redis import create_redis_client
from todo_api.config import get_settings
from todo_api.healthcheck.router import router as health_router
from todo_api.identity.backend import get_identity_verifier_backend
from todo_api.todos.router import router as todos_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.redis_client = create_redis_client(
        settings.REDIS_URL, socket_timeout=settings.REDIS_SOCKET_TIMEOUT
    )
    app.state.identity_verifier = get_identity_verifier_backend(settings)
    logger.info(
        f"Todo store backend: {settings.TODO_STORE_BACKEND}, "
        f"identity provider: {settings.IDENTITY_PROVIDER}"
    )
    yield
    await app.state.identity_verifier.close()
    app.state.redis_client.close()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    lifespan=lifespan,
    responses={
        **internal_error_response,
    },
    version=settings.TODO_API_VERSION,
)

if settings.OTEL_ENABLED:
    setup_opentelemetry(settings.OTEL_SERVICE_NAME, app)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(UnauthenticatedException)(unauthenticated_handler)
app.exception_handler(InvalidInputException)(invalid_input_handler)
app.exception_handler(ResourceForbiddenException)(resource_forbidden_handler)
app.exception_handler(ResourceNotFoundException)(resource_not_found_handler)
app.exception_handler(StorageUnavailableException)(storage_unavailable_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


app.include_router(health_router)
app.include_router(todos_router)
