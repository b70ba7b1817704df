from todo_api.config import Settings
from todo_api.common.redis import RedisClient
from todo_api.todos.store.base import TodoStore
from todo_api.todos.store.postgres.store import PostgresTodoStore
from todo_api.todos.store.redis.store import RedisTodoStore


def get_todo_store_backend(
    redis_client: RedisClient,
    settings: Settings,
) -> TodoStore:
    if settings.TODO_STORE_BACKEND == "postgres":
        return PostgresTodoStore(
            database_url=settings.POSTGRES_URL,
        )
    elif settings.TODO_STORE_BACKEND == "redis":
        return RedisTodoStore(
            redis_client=redis_client,
            key_prefix=settings.TODO_STORE_NAMESPACE,
        )
    else:
        raise ValueError(
            f"Unsupported todo store backend: {settings.TODO_STORE_BACKEND}"
        )
