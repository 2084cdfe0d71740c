"""
Request Outcomes

``Result`` is the single return type of every handler. Expected business
outcomes (not found, conflict, invalid input) are Result variants and are
never raised.
"""

from enum import StrEnum
from math import ceil
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class ResultStatus(StrEnum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    INVALID = "invalid"
    ERROR = "error"


class ValidationErrorDetail(BaseModel):
    """Field level validation failure."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., description="Name of the offending field")
    message: str = Field(..., description="Localized error message")


class Result(BaseModel, Generic[T]):
    """Tagged outcome of a request: exactly one status with its payload."""

    model_config = ConfigDict(frozen=True)

    status: ResultStatus
    value: Optional[T] = None
    errors: List[str] = Field(default_factory=list)
    validation_errors: List[ValidationErrorDetail] = Field(default_factory=list)

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(status=ResultStatus.SUCCESS, value=value)

    @classmethod
    def not_found(cls, message: Optional[str] = None) -> "Result[T]":
        return cls(status=ResultStatus.NOT_FOUND, errors=[message] if message else [])

    @classmethod
    def unauthorized(cls) -> "Result[T]":
        return cls(status=ResultStatus.UNAUTHORIZED)

    @classmethod
    def forbidden(cls) -> "Result[T]":
        return cls(status=ResultStatus.FORBIDDEN)

    @classmethod
    def conflict(cls, message: Optional[str] = None) -> "Result[T]":
        return cls(status=ResultStatus.CONFLICT, errors=[message] if message else [])

    @classmethod
    def invalid(cls, errors: List[ValidationErrorDetail]) -> "Result[T]":
        return cls(status=ResultStatus.INVALID, validation_errors=list(errors))

    @classmethod
    def error(cls, message: str) -> "Result[T]":
        return cls(status=ResultStatus.ERROR, errors=[message])

    @property
    def is_success(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def message(self) -> Optional[str]:
        """First error message, if the variant carries one."""
        if self.errors:
            return self.errors[0]
        if self.validation_errors:
            return self.validation_errors[0].message
        return None


class Page(BaseModel, Generic[T]):
    """One page of a listing."""

    items: List[T] = Field(default_factory=list)
    page: int
    page_size: int
    total_count: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return ceil(self.total_count / self.page_size)

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
