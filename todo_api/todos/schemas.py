from datetime import datetime
from typing import Any
from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictStr,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from todo_api.common.timestamps import TimestampDict, parse_timestamp, to_timestamp_dict


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Todo(CamelModel):
    id: str
    title: str
    completed: bool = False
    owner_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("created_at", "updated_at", mode="before")
    def parse_timestamps(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, v: datetime | None) -> TimestampDict | None:
        return to_timestamp_dict(v) if v else None


class TodoUpdate(BaseModel):
    """Validated partial update; a None field is left untouched."""

    title: str | None = None
    completed: bool | None = None


class TodoUpdateResult(CamelModel):
    message: str
    id: str
    title: str | None = None
    completed: bool | None = None
    updated_at: datetime | None = None

    @field_validator("updated_at", mode="before")
    def parse_updated_at(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @field_serializer("updated_at")
    def serialize_updated_at(self, v: datetime | None) -> TimestampDict | None:
        return to_timestamp_dict(v) if v else None


def clean_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("title must not be blank")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError("title must be valid unicode text") from e
    return value


class CreateTodoRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: StrictStr
    completed: StrictBool = False

    @field_validator("title")
    def strip_title(cls, value: str):
        return clean_title(value)


class UpdateTodoRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: StrictStr | None = None
    completed: StrictBool | None = None

    @field_validator("title", "completed", mode="before")
    def reject_null(cls, value: Any):
        # Only runs for fields present in the payload
        if value is None:
            raise ValueError("field must not be null")
        return value

    @field_validator("title")
    def strip_title(cls, value: str | None):
        if value is None:
            return value
        return clean_title(value)
