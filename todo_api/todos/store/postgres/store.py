from datetime import datetime
from functools import lru_cache
from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from todo_api.common.exceptions import ResourceNotFoundException, ResourceType
from todo_api.common.postgres import get_engine
from todo_api.todos.schemas import Todo, TodoUpdate
from todo_api.todos.store.base import TodoStore, translate_store_errors
from todo_api.todos.store.postgres.model import Base, TodoModel


@lru_cache
def ensure_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


class PostgresTodoStore(TodoStore):
    @translate_store_errors(SQLAlchemyError)
    def __init__(self, database_url: str):
        self.engine = get_engine(database_url)
        self.Session = sessionmaker(bind=self.engine)

    def _session(self) -> Session:
        ensure_schema(self.engine)
        return self.Session()

    @translate_store_errors(SQLAlchemyError)
    def create_todo(
        self,
        id: str,
        owner_id: str,
        title: str,
        completed: bool,
        timestamp: datetime,
    ) -> Todo:
        with self._session() as session:
            todo = TodoModel(
                id=id,
                owner_id=owner_id,
                title=title,
                completed=completed,
                created_at=timestamp,
            )
            session.add(todo)
            session.commit()

            return todo.to_todo()

    @translate_store_errors(SQLAlchemyError)
    def get_todo(self, todo_id: str) -> Todo:
        with self._session() as session:
            todo = session.get(TodoModel, todo_id)

            if not todo:
                raise ResourceNotFoundException(ResourceType.TODO, todo_id)

            return todo.to_todo()

    @translate_store_errors(SQLAlchemyError)
    def list_todos(self, owner_id: str) -> list[Todo]:
        with self._session() as session:
            todos = session.scalars(
                select(TodoModel)
                .where(TodoModel.owner_id == owner_id)
                .order_by(TodoModel.created_at.desc())
            ).all()

            return [todo.to_todo() for todo in todos]

    @translate_store_errors(SQLAlchemyError)
    def update_todo(
        self,
        todo_id: str,
        updates: TodoUpdate,
        timestamp: datetime,
    ) -> Todo:
        with self._session() as session:
            todo = session.get(TodoModel, todo_id, with_for_update=True)

            if not todo:
                raise ResourceNotFoundException(ResourceType.TODO, todo_id)

            if updates.title is not None:
                todo.title = updates.title
            if updates.completed is not None:
                todo.completed = updates.completed

            todo.updated_at = timestamp
            session.commit()

            return todo.to_todo()

    @translate_store_errors(SQLAlchemyError)
    def delete_todo(self, todo_id: str) -> None:
        with self._session() as session:
            todo = session.get(TodoModel, todo_id)

            if not todo:
                raise ResourceNotFoundException(ResourceType.TODO, todo_id)

            session.delete(todo)
            session.commit()
