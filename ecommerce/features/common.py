"""Validators shared by several features."""

from typing import List

from ..constants import CommonConsts
from ..domain.result import ValidationErrorDetail
from ..pipeline.validation import RequestValidator

FREE_TEXT_FILTERS = ("search", "order_by")


class PaginationValidator(RequestValidator):
    """Checks ``page``, ``page_size`` and free-text filters on listing queries."""

    async def validate(self, request) -> List[ValidationErrorDetail]:
        errors = []
        if request.page < 1:
            errors.append(self.error("page", CommonConsts.PAGE_MUST_BE_POSITIVE))
        if not 1 <= request.page_size <= CommonConsts.MAX_PAGE_SIZE:
            errors.append(
                self.error("page_size", CommonConsts.PAGE_SIZE_OUT_OF_RANGE, CommonConsts.MAX_PAGE_SIZE)
            )
        for name in FREE_TEXT_FILTERS:
            value = getattr(request, name, None)
            if value and len(value) > CommonConsts.FILTER_MAX_LENGTH:
                errors.append(self.error(name, CommonConsts.FILTER_TOO_LONG, CommonConsts.FILTER_MAX_LENGTH))
        return errors
