"""
Persistence port used by the account service.

The service only needs a handful of capabilities (find by id, find by
predicate, insert, update, and a row lock for serialized updates), so it
talks to this wrapper instead of a raw Session. Any store offering the same
methods can be dropped in.
"""

from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from database import Base


T = TypeVar("T", bound=Base)

# Primary keys are signed 64-bit integers in every supported backend.
MAX_ID = 2**63 - 1


def _valid_id(ident: Any) -> bool:
    return isinstance(ident, int) and 1 <= ident <= MAX_ID


class Store:
    def __init__(self, db: Session):
        self.db = db

    def get(self, model: Type[T], ident: Any) -> Optional[T]:
        if not _valid_id(ident):
            return None
        return self.db.get(model, ident)

    def lock(self, model: Type[T], ident: Any) -> Optional[T]:
        """Load a row with SELECT ... FOR UPDATE (ignored by SQLite)."""
        if not _valid_id(ident):
            return None
        return self.select(model, model.id == ident, for_update=True).first()

    def select(self, model: Type[T], *criteria, for_update: bool = False):
        query = self.db.query(model).filter(*criteria).order_by(model.id)
        if for_update:
            query = query.with_for_update().populate_existing()
        return query

    def exists(self, model: Type[T], *criteria) -> bool:
        return self.db.query(self.db.query(model).filter(*criteria).exists()).scalar()

    def find(self, model: Type[T], *criteria, for_update: bool = False) -> Optional[T]:
        return self.select(model, *criteria, for_update=for_update).first()

    def find_all(self, model: Type[T], *criteria) -> List[T]:
        return self.select(model, *criteria).all()

    def insert(self, obj: T) -> T:
        self.db.add(obj)
        # Flush so the store-assigned id is available before commit.
        self.db.flush()
        return obj

    def update(self, obj: T, **values) -> T:
        for key, value in values.items():
            setattr(obj, key, value)
        self.db.add(obj)
        return obj

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
