"""Repository helpers for database operations.

Provides a small generic repository plus `save` / `delete` shortcuts and
JSON column helpers used by the services to map rows at the boundary.
"""

import json
from sqlalchemy.orm import Session
from typing import TypeVar, Generic, Type, Optional, List, Any
from core.exceptions import DatabaseError, NotFoundError
from database.models import Base

T = TypeVar('T', bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository for common database operations.

    Attributes:
        model: SQLAlchemy model class to operate on.
        session: Database session for executing queries.
        resource: Human-readable name used in not-found errors.
    """

    def __init__(self, model: Type[T], session: Session, resource: Optional[str] = None):
        self.model = model
        self.session = session
        self.resource = resource or model.__name__

    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an object by its primary key, or None."""
        return self.session.get(self.model, id)

    def get_or_404(self, id: Any) -> T:
        """Retrieve an object by its primary key.

        Raises:
            NotFoundError: If no row has that key.
        """
        obj = self.get_by_id(id)
        if obj is None:
            raise NotFoundError(self.resource, id)
        return obj

    def get_all(self, skip: int = 0, limit: int = 100) -> List[T]:
        return self.session.query(self.model).offset(skip).limit(limit).all()

    def create(self, obj: T) -> T:
        return save(self.session, obj)

    def update(self, obj: T) -> T:
        """Commit changes to an existing object and refresh."""
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        self.session.delete(obj)
        self.session.commit()

    def count(self) -> int:
        return self.session.query(self.model).count()


def save(session: Session, obj: Base) -> Base:
    """Convenience function to add, commit and refresh an object.

    Args:
        session: Database session.
        obj: Model instance to persist.

    Returns:
        The persisted object with refreshed attributes.
    """
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


def dump_json(value: Any) -> Optional[str]:
    """Encode a list/dict column value; None stays None."""
    if value is None:
        return None
    return json.dumps(value)


def load_json(raw: Optional[str], default: Any = None, column: str = "json") -> Any:
    """Decode a JSON text column.

    Raises:
        DatabaseError: If the stored text is not valid JSON, so corrupt rows
            fail at the mapping layer instead of surfacing as missing data.
    """
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise DatabaseError(
            f"Stored value for '{column}' is not valid JSON",
            operation="decode",
            details={"column": column, "error": str(exc)},
        )


def iso(value) -> Optional[str]:
    """ISO-format a date/datetime, passing None through."""
    return value.isoformat() if value is not None else None
