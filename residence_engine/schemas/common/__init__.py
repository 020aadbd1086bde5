from residence_engine.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    ErrorBody,
    ErrorResponse,
)

__all__ = [
    "BaseCreateSchema",
    "BaseResponseSchema",
    "BaseSchema",
    "ErrorBody",
    "ErrorResponse",
]
