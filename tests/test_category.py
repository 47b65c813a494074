"""Tests for expense category service."""

import pytest

from sparkreceipt.domain.category import DEFAULT_CATEGORIES
from sparkreceipt.domain.errors import ConflictError, NotFoundError, ValidationError


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_category(self, category_service):
        category_id = category_service.create_category(
            "Photography Gear", color="#000000", irs_category="Supplies"
        )
        category = category_service.get_category(category_id)
        assert category.name == "Photography Gear"
        assert category.is_tax_deductible is True
        assert category.irs_category == "Supplies"

    def test_duplicate_name(self, category_service):
        category_service.create_category("Travel")
        with pytest.raises(ConflictError, match="already exists"):
            category_service.create_category("Travel")

    def test_empty_name(self, category_service):
        with pytest.raises(ValidationError):
            category_service.create_category("  ")

    def test_list_is_ordered_by_name(self, category_service):
        category_service.create_category("Zoo")
        category_service.create_category("Alpha")
        assert [c.name for c in category_service.list_categories()] == ["Alpha", "Zoo"]

    def test_seed_defaults_is_idempotent(self, category_service):
        created, skipped = category_service.seed_default_categories()
        assert created == len(DEFAULT_CATEGORIES)
        assert skipped == 0

        created, skipped = category_service.seed_default_categories()
        assert created == 0
        assert skipped == len(DEFAULT_CATEGORIES)
        assert len(category_service.list_categories()) == len(DEFAULT_CATEGORIES)

    def test_delete_keeps_expense_category_name(self, category_service, expense_service, sample_categories):
        from decimal import Decimal

        travel = sample_categories["Travel"]
        expense_id = expense_service.create_expense(Decimal("300"), "Airline", category_name="Travel")
        category_service.delete_category(travel.id)

        assert category_service.get_category_by_name("Travel") is None
        assert expense_service.get_expense(expense_id).category_name == "Travel"
        with pytest.raises(NotFoundError):
            category_service.require_category_by_name("Travel")
