from typing import Any, Generator
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture
from sqlalchemy import delete
from testcontainers.redis import RedisContainer  # type: ignore
from testcontainers.postgres import PostgresContainer  # type: ignore

from todo_api.common.postgres import get_engine
from todo_api.common.redis import create_redis_client
from todo_api.config import Settings, get_settings
from todo_api.main import app as main_app
from todo_api.todos.store.postgres.model import TodoModel
from todo_api.todos.store.postgres.store import ensure_schema


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer, None, None]:
    with RedisContainer(image="redis:7-alpine") as redis:
        yield redis


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    with PostgresContainer("postgres:17-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session", params=["redis", "postgres"])
def test_settings(
    request: pytest.FixtureRequest,
    redis_container: RedisContainer,
    postgres_container: PostgresContainer,
) -> Settings:
    backend: str = request.param
    common_settings: dict[str, Any] = {
        "IDENTITY_PROVIDER": "static",
        "IDENTITY_STATIC_TOKENS": {"token-u1": "U1", "token-u2": "U2"},
        "OTEL_ENABLED": False,
        "REDIS_URL": f"redis://{redis_container.get_container_host_ip()}:{redis_container.get_exposed_port(6379)}",
    }
    if backend == "redis":
        return Settings(TODO_STORE_BACKEND="redis", **common_settings)
    elif backend == "postgres":
        return Settings(
            POSTGRES_URL=postgres_container.get_connection_url(),
            TODO_STORE_BACKEND="postgres",
            **common_settings,
        )
    else:
        raise ValueError(f"Unknown backend: {backend}")


@pytest.fixture(autouse=True)
def patch_settings(test_settings: Settings, mocker: MockerFixture) -> None:
    mocker.patch("todo_api.main.settings", test_settings)


@pytest.fixture(autouse=True)
def clean_todo_store(test_settings: Settings) -> Generator[None, None, None]:
    yield
    if test_settings.TODO_STORE_BACKEND == "redis":
        redis_client = create_redis_client(test_settings.REDIS_URL)
        redis_client.flushdb()
        redis_client.close()
    else:
        engine = get_engine(test_settings.POSTGRES_URL)
        ensure_schema(engine)
        with engine.begin() as connection:
            connection.execute(delete(TodoModel))


@pytest.fixture
def test_app(test_settings: Settings) -> Generator[FastAPI, None, None]:
    def get_test_settings() -> Settings:
        return test_settings

    main_app.dependency_overrides[get_settings] = get_test_settings
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
def test_client(test_app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def u1_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-u1"}


@pytest.fixture
def u2_headers() -> dict[str, str]:
    return {"Authorization": "Bearer token-u2"}
