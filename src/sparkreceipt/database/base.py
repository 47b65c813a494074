"""Abstract record store interface.

Each collection of the hosted backend (clients, invoices, expenses,
income_entries, events, expense_categories, payments, business_profile)
gets select/insert/update/delete operations. Inserts and updates take a
mapping of field values, like a partial record; only the given fields are
written.
"""

from abc import ABC, abstractmethod
from typing import Optional, Any, Mapping
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from sparkreceipt.domain.entities import (
    BusinessProfile,
    Client,
    Invoice,
    Expense,
    IncomeEntry,
    CalendarEvent,
    ExpenseCategory,
    Payment,
)

Values = Mapping[str, Any]


class Database(ABC):
    """Abstract record store for sparkreceipt."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize the schema (create tables)."""
        pass

    # Business profile
    @abstractmethod
    def get_business_profile(self) -> Optional[BusinessProfile]:
        """Get the business profile, if one was saved."""
        pass

    @abstractmethod
    def create_business_profile(self, values: Values) -> int:
        """Create the business profile. Returns profile ID."""
        pass

    @abstractmethod
    def update_business_profile(self, profile_id: int, values: Values) -> None:
        """Update business profile fields."""
        pass

    # Clients
    @abstractmethod
    def create_client(self, values: Values) -> int:
        """Create a client. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def list_clients(self) -> list[Client]:
        """List clients, newest first."""
        pass

    @abstractmethod
    def update_client(self, client_id: int, values: Values) -> None:
        """Update client fields."""
        pass

    @abstractmethod
    def delete_client(self, client_id: int) -> None:
        """Delete a client."""
        pass

    # Invoices
    @abstractmethod
    def create_invoice(self, values: Values) -> int:
        """Create an invoice. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """Get invoice by its invoice number."""
        pass

    @abstractmethod
    def list_invoices(self, client_id: Optional[int] = None) -> list[Invoice]:
        """List invoices, newest first, optionally for one client."""
        pass

    @abstractmethod
    def update_invoice(self, invoice_id: int, values: Values) -> None:
        """Update invoice fields."""
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice."""
        pass

    # Expenses
    @abstractmethod
    def create_expense(self, values: Values) -> int:
        """Create an expense. Returns expense ID."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
    ) -> list[Expense]:
        """List expenses, most recent transaction date first.

        Date filters exclude expenses without a transaction date.
        """
        pass

    @abstractmethod
    def update_expense(self, expense_id: int, values: Values) -> None:
        """Update expense fields."""
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense."""
        pass

    # Income entries
    @abstractmethod
    def create_income(self, values: Values) -> int:
        """Create an income entry. Returns income ID."""
        pass

    @abstractmethod
    def get_income(self, income_id: int) -> Optional[IncomeEntry]:
        """Get income entry by ID."""
        pass

    @abstractmethod
    def list_income(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
    ) -> list[IncomeEntry]:
        """List income entries, most recent first."""
        pass

    @abstractmethod
    def update_income(self, income_id: int, values: Values) -> None:
        """Update income entry fields."""
        pass

    @abstractmethod
    def delete_income(self, income_id: int) -> None:
        """Delete an income entry."""
        pass

    # Calendar events
    @abstractmethod
    def create_event(self, values: Values) -> int:
        """Create a calendar event. Returns event ID."""
        pass

    @abstractmethod
    def get_event(self, event_id: int) -> Optional[CalendarEvent]:
        """Get event by ID."""
        pass

    @abstractmethod
    def list_events(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[CalendarEvent]:
        """List events in date order (earliest first)."""
        pass

    @abstractmethod
    def update_event(self, event_id: int, values: Values) -> None:
        """Update event fields."""
        pass

    @abstractmethod
    def delete_event(self, event_id: int) -> None:
        """Delete an event."""
        pass

    # Expense categories
    @abstractmethod
    def create_category(self, values: Values) -> int:
        """Create an expense category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[ExpenseCategory]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[ExpenseCategory]:
        """Get category by exact name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[ExpenseCategory]:
        """List categories ordered by name."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        pass

    # Payments
    @abstractmethod
    def create_payment(self, values: Values) -> int:
        """Create a payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID."""
        pass

    @abstractmethod
    def list_payments(self, invoice_id: Optional[int] = None) -> list[Payment]:
        """List payments, most recent first, optionally for one invoice."""
        pass
