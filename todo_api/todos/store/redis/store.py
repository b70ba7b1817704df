from datetime import datetime
from typing import Any, TypedDict
from redis.client import Pipeline
from redis.exceptions import RedisError

from todo_api.common.redis import RedisClient
from todo_api.common.exceptions import ResourceNotFoundException, ResourceType
from todo_api.todos.schemas import Todo, TodoUpdate
from todo_api.todos.store.base import TodoStore, translate_store_errors


class UpdateMapping(TypedDict, total=False):
    updated_at: str
    title: str
    completed: str


def _encode_bool(value: bool) -> str:
    return "1" if value else "0"


class RedisTodoStore(TodoStore):
    """Todos as hashes, with one sorted set per owner ordering their ids.

    ``{prefix}:todo:{id}`` holds the record, ``{prefix}:owner:{owner_id}``
    scores each of the owner's todo ids by creation time.
    """

    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _todo_key(self, todo_id: str) -> str:
        return f"{self.key_prefix}:todo:{todo_id}"

    def _owner_key(self, owner_id: str) -> str:
        return f"{self.key_prefix}:owner:{owner_id}"

    def _to_todo(self, data: dict[str, Any]) -> Todo:
        updated_at = data.get("updated_at")
        return Todo(
            id=data["id"],
            title=data["title"],
            completed=data["completed"] == "1",
            owner_id=data["owner_id"],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    @translate_store_errors(RedisError)
    def create_todo(
        self,
        id: str,
        owner_id: str,
        title: str,
        completed: bool,
        timestamp: datetime,
    ) -> Todo:
        pipeline = self.client.pipeline(transaction=True)
        pipeline.hset(
            self._todo_key(id),
            mapping={
                "id": id,
                "title": title,
                "completed": _encode_bool(completed),
                "owner_id": owner_id,
                "created_at": timestamp.isoformat(),
            },
        )
        pipeline.zadd(self._owner_key(owner_id), {id: timestamp.timestamp()})
        pipeline.execute()

        return Todo(
            id=id,
            title=title,
            completed=completed,
            owner_id=owner_id,
            created_at=timestamp,
        )

    @translate_store_errors(RedisError)
    def get_todo(self, todo_id: str) -> Todo:
        data = self.client.hgetall(self._todo_key(todo_id))
        if not data:
            raise ResourceNotFoundException(ResourceType.TODO, todo_id)

        return self._to_todo(data)

    @translate_store_errors(RedisError)
    def list_todos(self, owner_id: str) -> list[Todo]:
        todo_ids: list[str] = self.client.zrevrange(self._owner_key(owner_id), 0, -1)
        if not todo_ids:
            return []

        pipeline = self.client.pipeline(transaction=False)
        for todo_id in todo_ids:
            pipeline.hgetall(self._todo_key(todo_id))
        records: list[dict[str, Any]] = pipeline.execute()

        return [self._to_todo(record) for record in records if record]

    @translate_store_errors(RedisError)
    def update_todo(
        self,
        todo_id: str,
        updates: TodoUpdate,
        timestamp: datetime,
    ) -> Todo:
        todo_key = self._todo_key(todo_id)

        update_mapping: UpdateMapping = {"updated_at": timestamp.isoformat()}

        if updates.title is not None:
            update_mapping["title"] = updates.title

        if updates.completed is not None:
            update_mapping["completed"] = _encode_bool(updates.completed)

        def apply_update(pipeline: Pipeline) -> None:
            # Never write into a hash that was deleted meanwhile
            if not pipeline.exists(todo_key):
                raise ResourceNotFoundException(ResourceType.TODO, todo_id)
            pipeline.multi()
            pipeline.hset(todo_key, mapping=update_mapping)  # type: ignore
            pipeline.hgetall(todo_key)

        _, data = self.client.transaction(apply_update, todo_key)

        return self._to_todo(data)

    @translate_store_errors(RedisError)
    def delete_todo(self, todo_id: str) -> None:
        todo_key = self._todo_key(todo_id)

        owner_id = self.client.hget(todo_key, "owner_id")
        if owner_id is None:
            raise ResourceNotFoundException(ResourceType.TODO, todo_id)

        pipeline = self.client.pipeline(transaction=True)
        pipeline.delete(todo_key)
        pipeline.zrem(self._owner_key(owner_id), todo_id)
        pipeline.execute()
