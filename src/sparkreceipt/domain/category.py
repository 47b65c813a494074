"""Expense category domain service."""

from typing import Optional

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import ExpenseCategory
from sparkreceipt.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_name_not_found,
    duplicate_category_name,
    record_not_found,
)

# (name, color, is_tax_deductible, IRS Schedule C line)
DEFAULT_CATEGORIES = [
    ("Advertising & Marketing", "#EC4899", True, "Advertising"),
    ("Vehicle & Fuel", "#F59E0B", True, "Car and truck expenses"),
    ("Contract Labor", "#8B5CF6", True, "Contract labor"),
    ("Equipment", "#3B82F6", True, "Depreciation"),
    ("Insurance", "#14B8A6", True, "Insurance"),
    ("Professional Services", "#6366F1", True, "Legal and professional services"),
    ("Office Supplies", "#10B981", True, "Office expense"),
    ("Rent", "#EF4444", True, "Rent or lease"),
    ("Repairs & Maintenance", "#F97316", True, "Repairs and maintenance"),
    ("Supplies", "#84CC16", True, "Supplies"),
    ("Licenses & Fees", "#0EA5E9", True, "Taxes and licenses"),
    ("Travel", "#A855F7", True, "Travel"),
    ("Meals", "#F43F5E", True, "Deductible meals"),
    ("Utilities", "#22C55E", True, "Utilities"),
    ("Software & Subscriptions", "#64748B", True, "Other expenses"),
    ("Personal", "#9CA3AF", False, None),
]


class CategoryService:
    """Service for managing expense categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        color: Optional[str] = None,
        is_tax_deductible: bool = True,
        irs_category: Optional[str] = None,
    ) -> int:
        """Create an expense category.

        Args:
            name: Category name (unique)
            color: Optional display color
            is_tax_deductible: Whether expenses in this category are deductible
            irs_category: Optional IRS deduction label

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a category with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(duplicate_category_name(name))

        return self.db.create_category(
            {
                "name": name,
                "color": color,
                "is_tax_deductible": is_tax_deductible,
                "irs_category": irs_category,
            }
        )

    def get_category(self, category_id: int) -> Optional[ExpenseCategory]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[ExpenseCategory]:
        """Get category by name."""
        return self.db.get_category_by_name(name)

    def require_category_by_name(self, name: str) -> ExpenseCategory:
        """Get category by name or raise NotFoundError."""
        category = self.db.get_category_by_name(name)
        if category is None:
            raise NotFoundError(category_name_not_found(name))
        return category

    def list_categories(self) -> list[ExpenseCategory]:
        """List all categories ordered by name."""
        return self.db.list_categories()

    def delete_category(self, category_id: int) -> None:
        """Delete a category.

        Expenses keep their stored category name; only the link is lost.
        """
        if self.db.get_category(category_id) is None:
            raise NotFoundError(record_not_found("Category", category_id))
        self.db.delete_category(category_id)

    def seed_default_categories(self) -> tuple[int, int]:
        """Create the default categories that do not exist yet.

        Returns:
            Tuple of (created, skipped) counts
        """
        created = 0
        skipped = 0
        for name, color, deductible, irs_category in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(name) is not None:
                skipped += 1
                continue
            self.create_category(
                name=name,
                color=color,
                is_tax_deductible=deductible,
                irs_category=irs_category,
            )
            created += 1
        return created, skipped
