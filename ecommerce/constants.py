"""
E-commerce Global Constants

Centralized location for message keys, cache durations and domain limits
used across the application.
"""

from datetime import datetime, timezone


def get_current_timestamp() -> datetime:
    """Get current timestamp with UTC timezone."""
    return datetime.now(timezone.utc)


APP_NAME = "E-commerce Backend"
APP_VERSION = "0.1.0"

# Tracer/meter namespace for pipeline spans
PIPELINE_INSTRUMENTATION_NAME = "ecommerce.pipeline"


class CategoryConsts:
    NAME_MIN_LENGTH = 3
    NAME_MAX_LENGTH = 100

    NOT_FOUND = "Category:NotFound"
    NAME_IS_REQUIRED = "Category:Name:IsRequired"
    NAME_TOO_SHORT = "Category:Name:MustBeAtLeastCharacters"
    NAME_TOO_LONG = "Category:Name:MustBeLessThanCharacters"
    NAME_EXISTS = "Category:Name:Exists"
    CANNOT_DELETE_WITH_PRODUCTS = "Category:CannotDeleteWithProducts"


class ProductConsts:
    NAME_MIN_LENGTH = 3
    NAME_MAX_LENGTH = 100
    DESCRIPTION_MAX_LENGTH = 500

    NOT_FOUND = "Product:NotFound"
    NOT_ACTIVE = "Product:NotActive"
    NAME_TOO_SHORT = "Product:Name:MustBeAtLeastCharacters"
    NAME_TOO_LONG = "Product:Name:MustBeLessThanCharacters"
    NAME_EXISTS = "Product:Name:Exists"
    DESCRIPTION_TOO_LONG = "Product:Description:TooLong"
    PRICE_MUST_BE_POSITIVE = "Product:Price:MustBeGreaterThanZero"
    CATEGORY_NOT_FOUND = "Product:Category:NotFound"
    STOCK_MUST_NOT_BE_NEGATIVE = "Product:StockQuantity:MustBeGreaterThanZero"


class CartConsts:
    NOT_FOUND = "Cart:NotFound"
    ITEM_NOT_FOUND = "Cart:ItemNotFound"
    PRODUCT_NOT_FOUND = "Cart:ProductNotFound"
    PRODUCT_NOT_ACTIVE = "Cart:ProductNotActive"
    INSUFFICIENT_STOCK = "Cart:InsufficientStock"
    MAX_ITEMS_EXCEEDED = "Cart:MaxItemsExceeded"
    MAX_QUANTITY_EXCEEDED = "Cart:MaxQuantityExceeded"
    MAX_TOTAL_AMOUNT_EXCEEDED = "Cart:MaxTotalAmountExceeded"
    QUANTITY_MUST_BE_POSITIVE = "Cart:Validation:QuantityMustBePositive"
    PRODUCT_ID_REQUIRED = "Cart:Validation:ProductIdRequired"


class OrderConsts:
    NOT_FOUND = "Order:NotFound"
    PRODUCT_NOT_FOUND = "Order:ProductNotFound"
    PRODUCT_NOT_ACTIVE = "Order:ProductNotActive"
    INSUFFICIENT_STOCK = "Order:InsufficientStock"
    EMPTY_ORDER = "Order:EmptyOrder"
    QUANTITY_MUST_BE_POSITIVE = "Order:QuantityMustBeGreaterThanZero"
    SHIPPING_ADDRESS_REQUIRED = "Order:ShippingAddressRequired"
    CANNOT_BE_CANCELLED = "Order:CannotBeCancelled"
    STATUS_TRANSITION_INVALID = "Order:OrderStatusInvalid"


class CommonConsts:
    PAGE_MUST_BE_POSITIVE = "Common:Page:MustBePositive"
    PAGE_SIZE_OUT_OF_RANGE = "Common:PageSize:OutOfRange"
    MAX_PAGE_SIZE = 100
    FILTER_MAX_LENGTH = 100
    FILTER_TOO_LONG = "Common:Filter:TooLong"
