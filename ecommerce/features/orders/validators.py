"""Order request validators."""

from typing import List

from ...constants import OrderConsts
from ...domain.result import ValidationErrorDetail
from ...pipeline.validation import RequestValidator


class PlaceOrderValidator(RequestValidator):
    async def validate(self, request) -> List[ValidationErrorDetail]:
        errors = []
        if not request.items:
            errors.append(self.error("items", OrderConsts.EMPTY_ORDER))

        for index, item in enumerate(request.items):
            if item.quantity <= 0:
                errors.append(self.error(f"items[{index}].quantity", OrderConsts.QUANTITY_MUST_BE_POSITIVE))

        if not (request.shipping_address or "").strip():
            errors.append(self.error("shipping_address", OrderConsts.SHIPPING_ADDRESS_REQUIRED))
        return errors
