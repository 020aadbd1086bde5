from residence_engine.services.base.base_service import BaseService, coerce_enum
from residence_engine.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from residence_engine.services.base.transaction_manager import TransactionContext, TransactionManager

__all__ = [
    "BaseService",
    "coerce_enum",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
    "TransactionContext",
    "TransactionManager",
]
