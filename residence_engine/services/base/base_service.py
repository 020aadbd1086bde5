"""
Base service class providing common functionality for all services.
"""

from enum import Enum
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from residence_engine.core.exceptions import BaseAppException, ErrorCode, ValidationError
from residence_engine.core.logging import get_logger
from residence_engine.services.base.service_result import (
    ErrorSeverity,
    ServiceResult,
)
from residence_engine.services.base.transaction_manager import TransactionManager

T = TypeVar("T")


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - One transaction per mutating call, with conflict retry
    """

    def __init__(self, db_session: Session):
        """
        Initialize base service.

        Args:
            db_session: SQLAlchemy database session
        """
        self.db: Session = db_session
        self.tx = TransactionManager(db_session)
        self._logger = get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Typed application errors keep their kind and details; anything else
        is logged with a traceback and reported as an internal error.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, BaseAppException):
            self._logger.info(f"{operation} refused: {exception}", extra=context)
            return ServiceResult.from_app_exception(exception)

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )
        code = ErrorCode.DATABASE_ERROR if isinstance(exception, SQLAlchemyError) else ErrorCode.INTERNAL_ERROR
        return ServiceResult.from_exception(exception, operation, code=code, severity=ErrorSeverity.CRITICAL)

    # -------------------------------------------------------------------------
    # Execution helpers
    # -------------------------------------------------------------------------

    def _execute(
        self,
        operation: str,
        func: Callable[[], T],
        entity_ref: Optional[Any] = None,
        message: Optional[str] = None,
    ) -> ServiceResult[T]:
        """Run a mutating step in one retried transaction."""
        try:
            data = self.tx.run(func, name=operation)
        except Exception as e:
            return self._handle_exception(e, operation, entity_ref)
        self._log_operation(operation, entity_ref)
        return ServiceResult.success(data, message=message)

    def _query(
        self,
        operation: str,
        func: Callable[[], T],
        entity_ref: Optional[Any] = None,
    ) -> ServiceResult[T]:
        """Run a read step; reads take no locks."""
        try:
            return ServiceResult.success(func())
        except SQLAlchemyError as e:
            self.db.rollback()
            return self._handle_exception(e, operation, entity_ref)
        except Exception as e:
            return self._handle_exception(e, operation, entity_ref)

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        log_data = {"operation": operation, "entity_ref": str(entity_ref) if entity_ref is not None else None}
        if extra:
            log_data.update(extra)
        self._logger.info(f"Completed {operation}", extra=log_data)


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Any, field: str) -> E:
    """Parse a case-insensitive enum value or raise ValidationError naming the field."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {field} '{value}'",
            field_errors={field: [f"must be one of: {allowed}"]},
        )
