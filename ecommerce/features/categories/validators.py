"""Category request validators."""

from typing import List

from ...constants import CategoryConsts
from ...domain.result import ValidationErrorDetail
from ...pipeline.validation import RequestValidator, check_length


class CategoryNameValidator(RequestValidator):
    """Name is required, 3..100 characters and unique (case-insensitive).

    Applies to create and update; on update the category itself is
    excluded from the uniqueness check.
    """

    async def validate(self, request) -> List[ValidationErrorDetail]:
        name = (request.name or "").strip()
        if not name:
            return [self.error("name", CategoryConsts.NAME_IS_REQUIRED)]

        errors = check_length(
            name,
            "name",
            CategoryConsts.NAME_MIN_LENGTH,
            CategoryConsts.NAME_MAX_LENGTH,
            CategoryConsts.NAME_TOO_SHORT,
            CategoryConsts.NAME_TOO_LONG,
            self,
        )
        if errors:
            return errors

        exclude_id = getattr(request, "id", None)
        if await self.ctx.categories.name_exists(name, exclude_id=exclude_id):
            return [self.error("name", CategoryConsts.NAME_EXISTS)]
        return []
