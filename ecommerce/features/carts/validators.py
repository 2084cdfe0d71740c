"""Cart request validators."""

from typing import List

from ...constants import CartConsts
from ...domain.result import ValidationErrorDetail
from ...pipeline.validation import RequestValidator


class CartItemQuantityValidator(RequestValidator):
    """Product id is required and quantity is within 1..max per item."""

    async def validate(self, request) -> List[ValidationErrorDetail]:
        errors = []
        if request.product_id is None:
            errors.append(self.error("product_id", CartConsts.PRODUCT_ID_REQUIRED))

        max_quantity = self.ctx.settings.CART_MAX_QUANTITY_PER_ITEM
        if request.quantity <= 0:
            errors.append(self.error("quantity", CartConsts.QUANTITY_MUST_BE_POSITIVE))
        elif request.quantity > max_quantity:
            errors.append(self.error("quantity", CartConsts.MAX_QUANTITY_EXCEEDED, max_quantity))
        return errors
