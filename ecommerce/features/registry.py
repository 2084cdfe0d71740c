"""
Handler Registration

Every request type the application can dispatch is registered here,
explicitly, together with its validators.
"""

from functools import lru_cache

from ..pipeline.mediator import HandlerRegistry
from .carts.commands import (
    AddToCartCommand,
    AddToCartCommandHandler,
    ClearCartCommand,
    ClearCartCommandHandler,
    RemoveFromCartCommand,
    RemoveFromCartCommandHandler,
    UpdateCartItemQuantityCommand,
    UpdateCartItemQuantityCommandHandler,
)
from .carts.queries import GetCartQuery, GetCartQueryHandler
from .carts.validators import CartItemQuantityValidator
from .categories.commands import (
    CreateCategoryCommand,
    CreateCategoryCommandHandler,
    DeleteCategoryCommand,
    DeleteCategoryCommandHandler,
    UpdateCategoryCommand,
    UpdateCategoryCommandHandler,
)
from .categories.queries import (
    GetAllCategoriesQuery,
    GetAllCategoriesQueryHandler,
    GetCategoryByIdQuery,
    GetCategoryByIdQueryHandler,
)
from .categories.validators import CategoryNameValidator
from .common import PaginationValidator
from .orders.commands import (
    CancelOrderCommand,
    CancelOrderCommandHandler,
    PlaceOrderCommand,
    PlaceOrderCommandHandler,
    UpdateOrderStatusCommand,
    UpdateOrderStatusCommandHandler,
)
from .orders.queries import (
    GetAllOrdersQuery,
    GetAllOrdersQueryHandler,
    GetOrdersByUserQuery,
    GetOrdersByUserQueryHandler,
)
from .orders.validators import PlaceOrderValidator
from .products.commands import (
    CreateProductCommand,
    CreateProductCommandHandler,
    DeleteProductCommand,
    DeleteProductCommandHandler,
    SetProductActiveCommand,
    SetProductActiveCommandHandler,
    UpdateProductCommand,
    UpdateProductCommandHandler,
    UpdateProductStockCommand,
    UpdateProductStockCommandHandler,
)
from .products.queries import (
    GetAllProductsQuery,
    GetAllProductsQueryHandler,
    GetProductByIdQuery,
    GetProductByIdQueryHandler,
    GetProductStockInfoQuery,
    GetProductStockInfoQueryHandler,
)
from .products.validators import ProductFieldsValidator, StockQuantityValidator


def build_registry() -> HandlerRegistry:
    registry = HandlerRegistry()

    # Categories
    registry.register(CreateCategoryCommand, CreateCategoryCommandHandler, [CategoryNameValidator])
    registry.register(UpdateCategoryCommand, UpdateCategoryCommandHandler, [CategoryNameValidator])
    registry.register(DeleteCategoryCommand, DeleteCategoryCommandHandler)
    registry.register(GetCategoryByIdQuery, GetCategoryByIdQueryHandler)
    registry.register(GetAllCategoriesQuery, GetAllCategoriesQueryHandler, [PaginationValidator])

    # Products and stock
    registry.register(CreateProductCommand, CreateProductCommandHandler, [ProductFieldsValidator])
    registry.register(UpdateProductCommand, UpdateProductCommandHandler, [ProductFieldsValidator])
    registry.register(DeleteProductCommand, DeleteProductCommandHandler)
    registry.register(UpdateProductStockCommand, UpdateProductStockCommandHandler, [StockQuantityValidator])
    registry.register(SetProductActiveCommand, SetProductActiveCommandHandler)
    registry.register(GetProductByIdQuery, GetProductByIdQueryHandler)
    registry.register(GetAllProductsQuery, GetAllProductsQueryHandler, [PaginationValidator])
    registry.register(GetProductStockInfoQuery, GetProductStockInfoQueryHandler)

    # Carts
    registry.register(GetCartQuery, GetCartQueryHandler)
    registry.register(AddToCartCommand, AddToCartCommandHandler, [CartItemQuantityValidator])
    registry.register(RemoveFromCartCommand, RemoveFromCartCommandHandler)
    registry.register(
        UpdateCartItemQuantityCommand, UpdateCartItemQuantityCommandHandler, [CartItemQuantityValidator]
    )
    registry.register(ClearCartCommand, ClearCartCommandHandler)

    # Orders
    registry.register(PlaceOrderCommand, PlaceOrderCommandHandler, [PlaceOrderValidator])
    registry.register(CancelOrderCommand, CancelOrderCommandHandler)
    registry.register(UpdateOrderStatusCommand, UpdateOrderStatusCommandHandler)
    registry.register(GetOrdersByUserQuery, GetOrdersByUserQueryHandler)
    registry.register(GetAllOrdersQuery, GetAllOrdersQueryHandler, [PaginationValidator])

    return registry


@lru_cache()
def get_registry() -> HandlerRegistry:
    """Get the process-wide registry, built on first use."""
    return build_registry()
