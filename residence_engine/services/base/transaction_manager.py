"""
Transaction manager utilities for service layer operations.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional, TypeVar
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from residence_engine.config.settings import settings
from residence_engine.core.exceptions import ConcurrentConflictError
from residence_engine.core.logging import get_logger

T = TypeVar("T")

# PostgreSQL serialization_failure, deadlock_detected, lock_not_available
_CONFLICT_SQLSTATES = {"40001", "40P01", "55P03"}
_UNIQUE_VIOLATION_SQLSTATE = "23505"
_SQLITE_LOCK_MESSAGES = ("database is locked", "database table is locked")
_SQLITE_UNIQUE_MESSAGE = "unique constraint failed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def is_conflict(exc: BaseException) -> bool:
    """True for database errors that mean a concurrent writer got there first."""
    if isinstance(exc, IntegrityError):
        # Unique violations only
        orig = getattr(exc, "orig", None)
        if getattr(orig, "pgcode", None) == _UNIQUE_VIOLATION_SQLSTATE:
            return True
        return _SQLITE_UNIQUE_MESSAGE in str(orig or exc).lower()
    if isinstance(exc, OperationalError):
        orig = getattr(exc, "orig", None)
        if getattr(orig, "pgcode", None) in _CONFLICT_SQLSTATES:
            return True
        text = str(orig or exc).lower()
        return any(marker in text for marker in _SQLITE_LOCK_MESSAGES)
    return False


@dataclass
class TransactionContext:
    """Context information for a transaction."""

    transaction_id: str = field(default_factory=lambda: str(uuid4()))
    started_at: datetime = field(default_factory=_now)
    attempt: int = 1
    committed: bool = False
    rolled_back: bool = False
    completed_at: Optional[datetime] = None
    error: Optional[Exception] = None

    @property
    def duration_ms(self) -> Optional[float]:
        """Get transaction duration in milliseconds."""
        if self.completed_at:
            delta = self.completed_at - self.started_at
            return delta.total_seconds() * 1000
        return None


class TransactionManager:
    """
    Unit-of-work boundary for service operations.

    ``start`` commits on success and rolls back on any exception, turning
    lock and uniqueness races into ConcurrentConflictError. ``run`` wraps
    ``start`` and retries conflicts a bounded number of times.
    """

    def __init__(self, db_session: Session, max_retries: Optional[int] = None):
        self.db = db_session
        self.max_retries = settings.CONFLICT_MAX_RETRIES if max_retries is None else max_retries
        self._logger = get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @contextmanager
    def start(self, attempt: int = 1) -> Iterator[TransactionContext]:
        """
        Start a new transaction.

        Example:
            with transaction_manager.start() as ctx:
                # perform operations
                # automatic commit on success, rollback on exception
        """
        ctx = TransactionContext(attempt=attempt)
        self._logger.debug(
            f"Transaction started: {ctx.transaction_id}",
            extra={"transaction_id": ctx.transaction_id, "attempt": attempt},
        )

        try:
            yield ctx
            self._commit(ctx)
        except SQLAlchemyError as exc:
            self._rollback(ctx, exc)
            if is_conflict(exc):
                raise ConcurrentConflictError(
                    details={"transaction_id": ctx.transaction_id, "cause": type(exc).__name__},
                ) from exc
            raise
        except Exception as exc:
            self._rollback(ctx, exc)
            raise
        finally:
            ctx.completed_at = _now()
            self._logger.debug(
                f"Transaction completed: {ctx.transaction_id} "
                f"({'committed' if ctx.committed else 'rolled back'}) "
                f"in {ctx.duration_ms:.2f}ms",
                extra={
                    "transaction_id": ctx.transaction_id,
                    "committed": ctx.committed,
                    "duration_ms": ctx.duration_ms,
                },
            )

    def run(self, operation: Callable[[], T], name: str = "operation") -> T:
        """
        Execute ``operation`` in its own transaction and return its value.

        ConcurrentConflictError is retried up to ``max_retries`` times; the
        last one propagates. Every other exception propagates immediately.
        """
        attempt = 1
        while True:
            try:
                with self.start(attempt=attempt):
                    return operation()
            except ConcurrentConflictError:
                if attempt > self.max_retries:
                    self._logger.warning(
                        f"{name} gave up after {attempt} conflicting attempts",
                        extra={"operation": name, "attempts": attempt},
                    )
                    raise
                self._logger.info(
                    f"{name} hit a concurrent conflict, retrying",
                    extra={"operation": name, "attempt": attempt},
                )
                attempt += 1

    def _commit(self, ctx: TransactionContext) -> None:
        self.db.commit()
        ctx.committed = True

    def _rollback(self, ctx: TransactionContext, exc: Exception) -> None:
        ctx.error = exc
        try:
            self.db.rollback()
            ctx.rolled_back = True
            self._logger.debug(
                f"Transaction rolled back: {ctx.transaction_id} - {type(exc).__name__}",
                extra={"transaction_id": ctx.transaction_id, "error": str(exc)},
            )
        except SQLAlchemyError as rollback_error:
            # Keep the original exception as the one the caller sees
            self._logger.error(
                f"Rollback failed for transaction {ctx.transaction_id}: {rollback_error}",
                exc_info=True,
            )


__all__ = ["TransactionContext", "TransactionManager", "is_conflict"]
