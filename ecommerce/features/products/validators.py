"""Product request validators."""

from decimal import Decimal
from typing import List

from ...constants import ProductConsts
from ...domain.result import ValidationErrorDetail
from ...models import Category
from ...pipeline.validation import RequestValidator, check_length


class ProductFieldsValidator(RequestValidator):
    """Shared rules for creating and updating a product."""

    async def validate(self, request) -> List[ValidationErrorDetail]:
        errors = check_length(
            request.name,
            "name",
            ProductConsts.NAME_MIN_LENGTH,
            ProductConsts.NAME_MAX_LENGTH,
            ProductConsts.NAME_TOO_SHORT,
            ProductConsts.NAME_TOO_LONG,
            self,
        )

        if request.description and len(request.description) > ProductConsts.DESCRIPTION_MAX_LENGTH:
            errors.append(
                self.error("description", ProductConsts.DESCRIPTION_TOO_LONG, ProductConsts.DESCRIPTION_MAX_LENGTH)
            )

        if request.price is None or Decimal(request.price) <= 0:
            errors.append(self.error("price", ProductConsts.PRICE_MUST_BE_POSITIVE))

        stock_quantity = getattr(request, "stock_quantity", 0)
        if stock_quantity < 0:
            errors.append(self.error("stock_quantity", ProductConsts.STOCK_MUST_NOT_BE_NEGATIVE))

        if not await self.ctx.categories.exists(Category.id == request.category_id):
            errors.append(self.error("category_id", ProductConsts.CATEGORY_NOT_FOUND))

        if not any(error.identifier == "name" for error in errors):
            exclude_id = getattr(request, "id", None)
            if await self.ctx.products.name_exists(request.name, exclude_id=exclude_id):
                errors.append(self.error("name", ProductConsts.NAME_EXISTS))

        return errors


class StockQuantityValidator(RequestValidator):
    async def validate(self, request) -> List[ValidationErrorDetail]:
        if request.quantity < 0:
            return [self.error("quantity", ProductConsts.STOCK_MUST_NOT_BE_NEGATIVE)]
        return []
