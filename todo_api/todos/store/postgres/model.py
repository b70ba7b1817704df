from datetime import datetime
from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from todo_api.config import get_settings
from todo_api.todos.schemas import Todo


settings = get_settings()

Base = declarative_base()


class TodoModel(Base):
    __tablename__ = settings.TODO_STORE_NAMESPACE

    id: Mapped[str] = mapped_column(String, primary_key=True)
    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __init__(
        self,
        id: str,
        owner_id: str,
        title: str,
        created_at: datetime,
        completed: bool = False,
        updated_at: datetime | None = None,
    ):
        self.id = id
        self.owner_id = owner_id
        self.title = title
        self.created_at = created_at
        self.completed = completed
        self.updated_at = updated_at

    def to_todo(self) -> Todo:
        return Todo(
            id=self.id,
            title=self.title,
            completed=self.completed,
            owner_id=self.owner_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
