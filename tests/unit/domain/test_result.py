"""Unit tests for Result and Page."""

from uuid import uuid4

import pytest
from pydantic import TypeAdapter, ValidationError

from ecommerce.domain.result import Page, Result, ResultStatus, ValidationErrorDetail
from ecommerce.features.categories.dtos import CategoryDto


class TestResult:
    """Test Result variants."""

    def test_success_carries_value(self):
        result = Result.success(42)

        assert result.status is ResultStatus.SUCCESS
        assert result.is_success
        assert result.value == 42
        assert result.errors == []
        assert result.message is None

    def test_success_without_value(self):
        result = Result.success()

        assert result.is_success
        assert result.value is None

    @pytest.mark.parametrize(
        "factory, status",
        [
            (Result.not_found, ResultStatus.NOT_FOUND),
            (Result.conflict, ResultStatus.CONFLICT),
            (Result.error, ResultStatus.ERROR),
        ],
    )
    def test_failure_variants_carry_message(self, factory, status):
        result = factory("Something happened")

        assert result.status is status
        assert not result.is_success
        assert result.value is None
        assert result.message == "Something happened"

    def test_unauthorized_and_forbidden_have_no_payload(self):
        assert Result.unauthorized().status is ResultStatus.UNAUTHORIZED
        assert Result.forbidden().status is ResultStatus.FORBIDDEN
        assert Result.unauthorized().message is None

    def test_invalid_exposes_first_validation_message(self):
        errors = [
            ValidationErrorDetail(identifier="name", message="Name is required."),
            ValidationErrorDetail(identifier="price", message="Price must be positive."),
        ]
        result = Result.invalid(errors)

        assert result.status is ResultStatus.INVALID
        assert len(result.validation_errors) == 2
        assert result.message == "Name is required."

    def test_result_is_immutable(self):
        result = Result.success(1)

        with pytest.raises(ValidationError):
            result.status = ResultStatus.ERROR

    def test_json_round_trip_with_typed_value(self):
        dto = CategoryDto(id=uuid4(), name="Books")
        payload = TypeAdapter(Result).dump_json(Result.success(dto))

        restored = TypeAdapter(Result[CategoryDto]).validate_json(payload)

        assert restored.is_success
        assert restored.value == dto


class TestPage:
    """Test Page paging arithmetic."""

    def test_total_pages_rounds_up(self):
        page = Page[int](items=[1, 2], page=1, page_size=2, total_count=5)

        assert page.total_pages == 3
        assert page.has_next

    def test_last_page_has_no_next(self):
        page = Page[int](items=[5], page=3, page_size=2, total_count=5)

        assert not page.has_next

    def test_empty_listing(self):
        page = Page[int](items=[], page=1, page_size=10, total_count=0)

        assert page.total_pages == 0
        assert not page.has_next

    def test_computed_fields_are_serialized(self):
        page = Page[int](items=[1], page=1, page_size=1, total_count=2)

        dumped = page.model_dump()

        assert dumped["total_pages"] == 2
        assert dumped["has_next"] is True
