"""Repositories for data access."""

from .base import BaseRepository
from .cart import CartRepository
from .category import CategoryRepository
from .order import OrderRepository
from .product import ProductRepository

__all__ = [
    "BaseRepository",
    "CartRepository",
    "CategoryRepository",
    "OrderRepository",
    "ProductRepository",
]
