"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class BackendError(DomainError):
    """A call to the hosted backend failed or was rejected."""


def record_not_found(kind: str, record_id: int | str) -> str:
    """Return message for a missing record of the given kind."""
    return f"{kind} {record_id} not found"


def client_not_found(client_id: int) -> str:
    """Return message for missing client."""
    return record_not_found("Client", client_id)


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return record_not_found("Invoice", invoice_id)


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def duplicate_category_name(name: str) -> str:
    """Return message for duplicate category name."""
    return f"Category with name '{name}' already exists"


def payment_amount_invalid(amount: object) -> str:
    """Return message for a non-positive payment amount."""
    return f"Payment amount must be greater than zero (got {amount})"


def read_only_calendar_item(item_id: str) -> str:
    """Return message when trying to change an invoice due-date item."""
    return f"Calendar item '{item_id}' is an invoice due date and cannot be edited"
