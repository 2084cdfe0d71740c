"""
Cache Value Objects

Immutable value objects for cache keys and expirations. Every key the
application reads or invalidates is built here, so readers and writers
can never disagree on the key format.
"""

import hashlib
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union
from urllib.parse import quote
from uuid import UUID

MAX_KEY_LENGTH = 250
MAX_FRAGMENT_LENGTH = 64


def _fragment(value: Optional[str], empty: str) -> str:
    # Free text is percent-encoded so it cannot carry whitespace or glob characters
    if value is None or value == "":
        return empty
    encoded = quote(value, safe="")
    if len(encoded) > MAX_FRAGMENT_LENGTH:
        return "sha256-" + hashlib.sha256(value.encode("utf-8")).hexdigest()
    return encoded


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Enforces key naming conventions and provides validation.
    """

    value: str

    # Invalidation patterns
    CATEGORIES_PATTERN = "categories:*"
    PRODUCTS_PATTERN = "products:*"
    CARTS_PATTERN = "cart:*"

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > MAX_KEY_LENGTH:
            raise ValueError(f"Cache key too long (max {MAX_KEY_LENGTH} characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def category(cls, category_id: Union[int, str, UUID]) -> "CacheKey":
        """Create single category cache key."""
        return cls(f"category:{category_id}")

    @classmethod
    def categories_list(
        cls,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        order_by: Optional[str] = None,
    ) -> "CacheKey":
        """Create paged category listing cache key."""
        return cls(
            f"categories:page-{page}:size-{page_size}"
            f":search-{_fragment(search, 'empty')}"
            f":order-{_fragment(order_by, 'default')}"
        )

    @classmethod
    def product(cls, product_id: Union[int, str, UUID]) -> "CacheKey":
        """Create single product cache key."""
        return cls(f"product:{product_id}")

    @classmethod
    def products_list(
        cls,
        page: int,
        page_size: int,
        include_category: bool = False,
        order_by: Optional[str] = None,
        category_id: Optional[Union[str, UUID]] = None,
    ) -> "CacheKey":
        """Create paged product listing cache key."""
        return cls(
            f"products:page-{page}:size-{page_size}"
            f":category-{str(include_category).lower()}"
            f":order-{_fragment(order_by, 'default')}"
            f":categoryId-{category_id if category_id is not None else 'all'}"
        )

    @classmethod
    def cart(cls, user_id: Union[str, UUID]) -> "CacheKey":
        """Create per-user cart cache key."""
        return cls(f"cart:{user_id}")

    @classmethod
    def orders(cls, user_id: Union[str, UUID]) -> "CacheKey":
        """Create per-user order history cache key."""
        return cls(f"orders:{user_id}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Provides type-safe TTL configuration with validation.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: int) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    @classmethod
    def days(cls, days: int) -> "TTL":
        """Create TTL from days."""
        return cls(days * 86400)

    def as_timedelta(self) -> timedelta:
        return timedelta(seconds=self.seconds)

    def __int__(self) -> int:
        return self.seconds
