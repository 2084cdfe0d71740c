"""
Request Validators

A validator inspects one request type and returns field level errors.
Validators may read from the database but never write.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from ..domain.result import ValidationErrorDetail
from .context import RequestContext

RequestT = TypeVar("RequestT")


class RequestValidator(ABC, Generic[RequestT]):
    def __init__(self, ctx: RequestContext):
        self.ctx = ctx

    @property
    def localizer(self):
        return self.ctx.localizer

    def error(self, identifier: str, key: str, *args) -> ValidationErrorDetail:
        return ValidationErrorDetail(identifier=identifier, message=self.localizer.get(key, *args))

    @abstractmethod
    async def validate(self, request: RequestT) -> List[ValidationErrorDetail]:
        """Return every rule violation; an empty list means valid."""


def check_length(
    value: Optional[str],
    identifier: str,
    minimum: int,
    maximum: int,
    too_short_key: str,
    too_long_key: str,
    validator: RequestValidator,
) -> List[ValidationErrorDetail]:
    """Shared min/max length rule for names."""
    text = (value or "").strip()
    if len(text) < minimum:
        return [validator.error(identifier, too_short_key, minimum)]
    if len(text) > maximum:
        return [validator.error(identifier, too_long_key, maximum)]
    return []
