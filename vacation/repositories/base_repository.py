"""
Base Repository - shared CRUD helpers for all repositories.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from vacation.database import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository over a single model class"""

    def __init__(self, session: Session, model_class: Type[T]):
        """
        Args:
            session: SQLAlchemy Session
            model_class: mapped model class
        """
        self.session = session
        self.model_class = model_class

    def find_by_id(self, id_value: Any) -> Optional[T]:
        """Look up a single row by primary key."""
        return self.session.get(self.model_class, id_value)

    def save(self, entity: T) -> T:
        """
        Add or update a row.

        Flushes so generated ids are available, does not commit.
        """
        self.session.add(entity)
        self.session.flush()
        return entity

    def save_all(self, entities: List[T]) -> List[T]:
        self.session.add_all(entities)
        self.session.flush()
        return entities

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model_class)
        return self.session.execute(stmt).scalar() or 0

    def commit(self) -> None:
        """Commit the current transaction"""
        self.session.commit()

