"""
Tests for category commands and queries.

Requests are dispatched through the full pipeline against SQLite.
"""

from uuid import uuid4

import pytest

from ecommerce.domain.cache.value_objects import CacheKey
from ecommerce.domain.result import Result, ResultStatus
from ecommerce.features.categories.commands import (
    CreateCategoryCommand,
    DeleteCategoryCommand,
    UpdateCategoryCommand,
)
from ecommerce.features.categories.queries import GetAllCategoriesQuery, GetCategoryByIdQuery


class TestCreateCategory:
    @pytest.mark.asyncio
    async def test_create_and_read_back(self, pipeline):
        created = await pipeline.dispatch(CreateCategoryCommand(name="  Books  "))

        assert created.is_success
        fetched = await pipeline.dispatch(GetCategoryByIdQuery(id=created.value))
        assert fetched.value.name == "Books"

    @pytest.mark.asyncio
    async def test_name_rules(self, pipeline):
        result = await pipeline.dispatch(CreateCategoryCommand(name="ab"))

        assert result.status is ResultStatus.INVALID
        (error,) = result.validation_errors
        assert error.identifier == "name"
        assert error.message == "Category name must be at least 3 characters."

    @pytest.mark.asyncio
    async def test_blank_name_is_required(self, pipeline):
        result = await pipeline.dispatch(CreateCategoryCommand(name="   "))

        assert result.validation_errors[0].message == "Category name is required."

    @pytest.mark.asyncio
    async def test_duplicate_name_is_case_insensitive(self, pipeline, category):
        result = await pipeline.dispatch(CreateCategoryCommand(name="ELECTRONICS"))

        assert result.status is ResultStatus.INVALID
        assert result.validation_errors[0].message == "A category with this name already exists."

    @pytest.mark.asyncio
    async def test_create_invalidates_listings(self, pipeline, cache_store):
        await pipeline.dispatch(GetAllCategoriesQuery())
        assert str(CacheKey.categories_list(1, 10)) in cache_store.keys()

        await pipeline.dispatch(CreateCategoryCommand(name="Garden"))

        assert str(CacheKey.categories_list(1, 10)) not in cache_store.keys()
        listing = await pipeline.dispatch(GetAllCategoriesQuery())
        assert [item.name for item in listing.value.items] == ["Garden"]


class TestUpdateCategory:
    @pytest.mark.asyncio
    async def test_update_refreshes_cached_entry(self, pipeline, category):
        before = await pipeline.dispatch(GetCategoryByIdQuery(id=category.id))
        assert before.value.name == "Electronics"

        result = await pipeline.dispatch(UpdateCategoryCommand(id=category.id, name="Consumer Electronics"))

        assert result.is_success
        after = await pipeline.dispatch(GetCategoryByIdQuery(id=category.id))
        assert after.value.name == "Consumer Electronics"

    @pytest.mark.asyncio
    async def test_keeping_own_name_is_allowed(self, pipeline, category):
        result = await pipeline.dispatch(UpdateCategoryCommand(id=category.id, name="electronics"))

        assert result.is_success

    @pytest.mark.asyncio
    async def test_unknown_category(self, pipeline):
        result = await pipeline.dispatch(UpdateCategoryCommand(id=uuid4(), name="Whatever"))

        assert result.status is ResultStatus.NOT_FOUND
        assert result.message == "Category not found."


class TestDeleteCategory:
    @pytest.mark.asyncio
    async def test_delete_invalidates_category_and_listings(self, pipeline, category, cache_manager, cache_store):
        await cache_manager.set(CacheKey.category(category.id), Result.success())
        await cache_manager.set(CacheKey.categories_list(1, 10), Result.success())
        await cache_manager.set(CacheKey.products_list(1, 10), Result.success())
        cart_key = CacheKey.cart(uuid4())
        await cache_manager.set(cart_key, Result.success())

        result = await pipeline.dispatch(DeleteCategoryCommand(id=category.id))

        assert result.is_success
        assert cache_store.keys() == [str(cart_key)]
        missing = await pipeline.dispatch(GetCategoryByIdQuery(id=category.id))
        assert missing.status is ResultStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_category_with_products_cannot_be_deleted(self, pipeline, category, make_product):
        await make_product()

        result = await pipeline.dispatch(DeleteCategoryCommand(id=category.id))

        assert result.status is ResultStatus.CONFLICT
        assert (await pipeline.dispatch(GetCategoryByIdQuery(id=category.id))).is_success

    @pytest.mark.asyncio
    async def test_unknown_category(self, pipeline):
        result = await pipeline.dispatch(DeleteCategoryCommand(id=uuid4()))

        assert result.status is ResultStatus.NOT_FOUND


class TestListCategories:
    @pytest.fixture
    async def categories(self, pipeline):
        for name in ("Books", "Garden", "Games", "Music"):
            await pipeline.dispatch(CreateCategoryCommand(name=name))

    @pytest.mark.asyncio
    async def test_paging_and_ordering(self, pipeline, categories):
        result = await pipeline.dispatch(GetAllCategoriesQuery(page=2, page_size=3))

        page = result.value
        assert page.total_count == 4
        assert page.total_pages == 2
        assert [item.name for item in page.items] == ["Music"]

    @pytest.mark.asyncio
    async def test_search_and_descending_order(self, pipeline, categories):
        result = await pipeline.dispatch(GetAllCategoriesQuery(search="ga", order_by="name_desc"))

        assert [item.name for item in result.value.items] == ["Garden", "Games"]

    @pytest.mark.asyncio
    async def test_invalid_paging(self, pipeline):
        result = await pipeline.dispatch(GetAllCategoriesQuery(page=0, page_size=500))

        assert result.status is ResultStatus.INVALID
        assert {error.identifier for error in result.validation_errors} == {"page", "page_size"}

    @pytest.mark.asyncio
    async def test_wildcards_in_search_are_literal(self, pipeline):
        for name in ("50% Deals", "500 Club", "Top_Picks", "TopXPicks"):
            await pipeline.dispatch(CreateCategoryCommand(name=name))

        percent = await pipeline.dispatch(GetAllCategoriesQuery(search="50%"))
        underscore = await pipeline.dispatch(GetAllCategoriesQuery(search="top_"))

        assert [item.name for item in percent.value.items] == ["50% Deals"]
        assert [item.name for item in underscore.value.items] == ["Top_Picks"]

    @pytest.mark.asyncio
    async def test_overlong_search_is_invalid(self, pipeline):
        result = await pipeline.dispatch(GetAllCategoriesQuery(search="x" * 300))

        assert result.status is ResultStatus.INVALID
        assert result.validation_errors[0].identifier == "search"
        assert result.message == "Filter value cannot be longer than 100 characters."

    @pytest.mark.asyncio
    async def test_long_multibyte_search_is_cached_under_bounded_key(self, pipeline, categories, cache_store):
        result = await pipeline.dispatch(GetAllCategoriesQuery(search="ğ" * 90))

        assert result.is_success
        assert result.value.items == []
        (key,) = cache_store.keys()
        assert key.startswith("categories:")
        assert len(key) <= 250
