"""
Message Localization

Key based lookup of user facing messages. Handlers and validators never
hard code text; they pass message keys from ``ecommerce.constants``.
"""

from typing import Any, Dict, Optional

from ..constants import (
    CartConsts,
    CategoryConsts,
    CommonConsts,
    OrderConsts,
    ProductConsts,
)

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        CategoryConsts.NOT_FOUND: "Category not found.",
        CategoryConsts.NAME_IS_REQUIRED: "Category name is required.",
        CategoryConsts.NAME_TOO_SHORT: "Category name must be at least {0} characters.",
        CategoryConsts.NAME_TOO_LONG: "Category name must be less than {0} characters.",
        CategoryConsts.NAME_EXISTS: "A category with this name already exists.",
        CategoryConsts.CANNOT_DELETE_WITH_PRODUCTS: "Category cannot be deleted while it has products.",
        ProductConsts.NOT_FOUND: "Product not found.",
        ProductConsts.NOT_ACTIVE: "Product is not active.",
        ProductConsts.NAME_TOO_SHORT: "Product name must be at least {0} characters.",
        ProductConsts.NAME_TOO_LONG: "Product name must be less than {0} characters.",
        ProductConsts.NAME_EXISTS: "A product with this name already exists.",
        ProductConsts.DESCRIPTION_TOO_LONG: "Product description must be less than {0} characters.",
        ProductConsts.PRICE_MUST_BE_POSITIVE: "Product price must be greater than zero.",
        ProductConsts.CATEGORY_NOT_FOUND: "Product category not found.",
        ProductConsts.STOCK_MUST_NOT_BE_NEGATIVE: "Stock quantity cannot be negative.",
        CartConsts.NOT_FOUND: "Cart not found.",
        CartConsts.ITEM_NOT_FOUND: "Cart item not found.",
        CartConsts.PRODUCT_NOT_FOUND: "Product not found.",
        CartConsts.PRODUCT_NOT_ACTIVE: "Product is not available for purchase.",
        CartConsts.INSUFFICIENT_STOCK: "Insufficient stock for the requested quantity.",
        CartConsts.MAX_ITEMS_EXCEEDED: "A cart can contain at most {0} different products.",
        CartConsts.MAX_QUANTITY_EXCEEDED: "Quantity per product cannot exceed {0}.",
        CartConsts.MAX_TOTAL_AMOUNT_EXCEEDED: "Cart total cannot exceed {0}.",
        CartConsts.QUANTITY_MUST_BE_POSITIVE: "Quantity must be greater than zero.",
        CartConsts.PRODUCT_ID_REQUIRED: "Product id is required.",
        OrderConsts.NOT_FOUND: "Order not found.",
        OrderConsts.PRODUCT_NOT_FOUND: "Product {0} not found.",
        OrderConsts.PRODUCT_NOT_ACTIVE: "Product {0} is not active.",
        OrderConsts.INSUFFICIENT_STOCK: "Insufficient stock for product {0}.",
        OrderConsts.EMPTY_ORDER: "Order must contain at least one item.",
        OrderConsts.QUANTITY_MUST_BE_POSITIVE: "Order item quantity must be greater than zero.",
        OrderConsts.SHIPPING_ADDRESS_REQUIRED: "Shipping address is required.",
        OrderConsts.CANNOT_BE_CANCELLED: "Order cannot be cancelled in status {0}.",
        OrderConsts.STATUS_TRANSITION_INVALID: "Order status cannot change from {0} to {1}.",
        CommonConsts.PAGE_MUST_BE_POSITIVE: "Page must be greater than zero.",
        CommonConsts.PAGE_SIZE_OUT_OF_RANGE: "Page size must be between 1 and {0}.",
        CommonConsts.FILTER_TOO_LONG: "Filter value cannot be longer than {0} characters.",
    },
    "tr": {
        CategoryConsts.NOT_FOUND: "Kategori bulunamadı.",
        CategoryConsts.NAME_IS_REQUIRED: "Kategori adı zorunludur.",
        CategoryConsts.NAME_TOO_SHORT: "Kategori adı en az {0} karakter olmalıdır.",
        CategoryConsts.NAME_TOO_LONG: "Kategori adı {0} karakterden kısa olmalıdır.",
        CategoryConsts.NAME_EXISTS: "Bu isimde bir kategori zaten mevcut.",
        CategoryConsts.CANNOT_DELETE_WITH_PRODUCTS: "Ürünleri olan kategori silinemez.",
        ProductConsts.NOT_FOUND: "Ürün bulunamadı.",
        ProductConsts.NOT_ACTIVE: "Ürün aktif değil.",
        CartConsts.INSUFFICIENT_STOCK: "Yetersiz stok.",
        OrderConsts.NOT_FOUND: "Sipariş bulunamadı.",
    },
}


class Localizer:
    """Resolve message keys for one language, falling back to the default.

    Unknown keys resolve to the key itself so a missing translation never
    hides the underlying outcome.
    """

    def __init__(self, language: str = "en", default_language: str = "en"):
        self.language = language if language in MESSAGES else default_language
        self.default_language = default_language

    def __getitem__(self, key: str) -> str:
        return self.get(key)

    def get(self, key: str, *args: Any, language: Optional[str] = None) -> str:
        """
        Look up a message and format positional arguments into it.

        Args:
            key: Message key, e.g. ``"Category:NotFound"``
            *args: Values for ``{0}``, ``{1}`` placeholders
            language: Override the localizer's language

        Returns:
            Localized message text
        """
        lang = language or self.language
        template = MESSAGES.get(lang, {}).get(key)
        if template is None:
            template = MESSAGES.get(self.default_language, {}).get(key, key)
        if args:
            return template.format(*args)
        return template
