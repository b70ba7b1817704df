from datetime import datetime, timezone
import pytest

from todo_api.common.timestamps import parse_timestamp, to_timestamp_dict
from todo_api.todos.schemas import Todo

NOON = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    [
        {"seconds": 1704110400, "nanoseconds": 0},
        {"_seconds": 1704110400, "_nanoseconds": 0},
        {"seconds": 1704110400},
        "2024-01-01T12:00:00+00:00",
        "2024-01-01T12:00:00",
        1704110400000,
        NOON,
        datetime(2024, 1, 1, 12, 0, 0),
    ],
)
def test_parse_timestamp(value: object) -> None:
    assert parse_timestamp(value) == NOON


def test_parse_timestamp_keeps_sub_second_precision() -> None:
    result = parse_timestamp({"seconds": 1704110400, "nanoseconds": 250_000_000})

    assert result == NOON.replace(microsecond=250_000)


@pytest.mark.parametrize(
    "value",
    [None, "", "not a date", {}, {"seconds": "soon"}, True, [1704110400], 10**20],
)
def test_parse_timestamp_unparseable(value: object) -> None:
    assert parse_timestamp(value) is None


def test_to_timestamp_dict() -> None:
    value = NOON.replace(microsecond=123_456)

    assert to_timestamp_dict(value) == {
        "seconds": 1704110400,
        "nanoseconds": 123_456_000,
    }


def test_to_timestamp_dict_treats_naive_as_utc() -> None:
    assert to_timestamp_dict(datetime(1970, 1, 1, 0, 0, 1)) == {
        "seconds": 1,
        "nanoseconds": 0,
    }


def test_todo_serializes_timestamps_as_dicts() -> None:
    todo = Todo(id="todo-1", title="Buy milk", owner_id="U1", created_at=NOON)

    data = todo.model_dump(by_alias=True, exclude_none=True)

    assert data["createdAt"] == {"seconds": 1704110400, "nanoseconds": 0}
    assert Todo.model_validate(data).created_at == NOON
