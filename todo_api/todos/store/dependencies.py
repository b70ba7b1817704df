import logging
from fastapi import Depends

from todo_api.common.exceptions import StorageUnavailableException
from todo_api.common.redis import get_redis_client, RedisClient
from todo_api.config import Settings, get_settings
from todo_api.todos.store.base import TodoStore, TodoStoreError
from todo_api.todos.store.backend import get_todo_store_backend

logger = logging.getLogger(__name__)


def get_todo_store(
    redis_client: RedisClient = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
) -> TodoStore:
    try:
        return get_todo_store_backend(redis_client, settings)
    except TodoStoreError as e:
        logger.exception(e)
        raise StorageUnavailableException(
            "Todo storage is unavailable. Please try again later."
        ) from e
