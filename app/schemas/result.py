from __future__ import annotations

"""
Operation result envelope.

Every public creator-pipeline operation returns an `OperationResult`:
`{success: true, data}` or `{success: false, error: {code, message, details?}}`.
`status_code` travels with the result for the HTTP layer but is never
serialized.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from app.core.exceptions import AppException

T = TypeVar("T")


class ErrorInfo(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class OperationResult(BaseModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[ErrorInfo] = None
    status_code: int = Field(200, exclude=True)

    @classmethod
    def ok(cls, data: Any = None, *, status_code: int = 200) -> "OperationResult":
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def fail(cls, exc: AppException) -> "OperationResult":
        return cls(success=False, error=ErrorInfo(**exc.to_error()), status_code=exc.status_code)

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None


__all__ = ["ErrorInfo", "OperationResult"]
