from fastapi import Request
from redis import Redis
from typing import TYPE_CHECKING


RedisClient = Redis
if TYPE_CHECKING:
    RedisClient = Redis[str]  # type: ignore


def create_redis_client(
    redis_url: str, *, socket_timeout: float | None = None
) -> RedisClient:
    try:
        return Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
    except Exception as e:
        raise RuntimeError(f"Failed to create Redis client for {redis_url}") from e


def get_redis_client(request: Request) -> RedisClient:
    """Process-wide client created in the application lifespan."""
    return request.app.state.redis_client
