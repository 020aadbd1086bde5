"""
Base repository with standardized read/write operations.

Repositories never commit: they add, flush and query inside the
transaction owned by the calling service (see TransactionManager).
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from residence_engine.core.exceptions import ResourceNotFoundError
from residence_engine.core.logging import get_logger
from residence_engine.models.base import BaseModel

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository over one model class.

    Subclasses set ``not_found_error`` to the typed NotFound exception of
    their entity.
    """

    not_found_error: Type[ResourceNotFoundError] = ResourceNotFoundError

    def __init__(self, model: Type[ModelType], session: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Database session
        """
        self.model = model
        self.session = session

    # ==================== Create / Delete ====================

    def add(self, entity: ModelType) -> ModelType:
        """
        Stage a new entity and flush it so defaults and constraints apply.

        Args:
            entity: Entity to create

        Returns:
            Created entity
        """
        self.session.add(entity)
        self.session.flush()
        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    def delete(self, entity: ModelType) -> None:
        self.session.delete(entity)
        self.session.flush()
        logger.debug(f"Deleted {self.model.__name__} with id: {entity.id}")

    # ==================== Read Operations ====================

    def find_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Find entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None
        """
        if id is None:
            return None
        return self.session.get(self.model, id)

    def get_by_id(self, id: Any) -> ModelType:
        """
        Get entity by ID or raise the repository's NotFound error.

        Raises:
            ResourceNotFoundError: If entity not found
        """
        entity = self.find_by_id(id)
        if entity is None:
            raise self.not_found_error(id)
        return entity

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        order_by: Optional[Sequence[str]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Find entities matching criteria.

        None values are ignored, list/tuple values become IN filters and
        order_by fields prefixed with '-' sort descending.
        """
        query = select(self.model)

        for key, value in criteria.items():
            if value is None or not hasattr(self.model, key):
                continue
            column = getattr(self.model, key)
            if isinstance(value, (list, tuple, set)):
                query = query.where(column.in_(list(value)))
            else:
                query = query.where(column == value)

        for field in order_by or ():
            if field.startswith('-'):
                query = query.order_by(getattr(self.model, field[1:]).desc())
            else:
                query = query.order_by(getattr(self.model, field))

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        return list(self.session.execute(query).unique().scalars().all())

    def find_one_by_criteria(self, criteria: Dict[str, Any]) -> Optional[ModelType]:
        results = self.find_by_criteria(criteria, limit=1)
        return results[0] if results else None

    def count(self, criteria: Optional[Dict[str, Any]] = None) -> int:
        query = select(func.count(self.model.id))
        for key, value in (criteria or {}).items():
            if value is not None and hasattr(self.model, key):
                query = query.where(getattr(self.model, key) == value)
        return self.session.execute(query).scalar_one()

    def exists(self, criteria: Dict[str, Any]) -> bool:
        return self.count(criteria) > 0
