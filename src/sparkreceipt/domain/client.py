"""Client domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import Client, ClientActivity, LineItem
from sparkreceipt.domain.errors import NotFoundError, ValidationError, client_not_found
from sparkreceipt.domain.line_items import line_items_subtotal

CONTACT_FIELDS = (
    "email",
    "phone",
    "address",
    "city",
    "state",
    "zip",
    "event_date",
    "event_type",
    "venue",
    "ceremony_time",
    "notes",
)

PAYMENT_STATUSES = ("pending", "partial", "paid")


def derive_payment_status(contract_amount: Decimal, balance_due: Decimal) -> str:
    """Payment status from the contract amount and what is still owed."""
    if contract_amount > 0 and balance_due <= 0:
        return "paid"
    if balance_due < contract_amount:
        return "partial"
    return "pending"


class ClientService:
    """Service for managing clients and their booked services."""

    def __init__(self, db: Database):
        """Initialize client service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_client(
        self,
        name: str,
        services: Sequence[LineItem] = (),
        event_type: Optional[str] = "Wedding",
        **contact: Any,
    ) -> int:
        """Create a client.

        The contract amount is the sum of the booked services; the whole
        amount starts out as balance due.

        Args:
            name: Client name
            services: Booked services as line items
            event_type: Type of the client's event
            **contact: Any of CONTACT_FIELDS

        Returns:
            Client ID

        Raises:
            ValidationError: If the name is empty or an unknown field is given
        """
        if not name or not name.strip():
            raise ValidationError("Client name cannot be empty")
        self._check_fields(contact)

        contract_amount = line_items_subtotal(services)
        values: dict[str, Any] = {
            "name": name.strip(),
            "event_type": event_type,
            "services_booked": tuple(services),
            "contract_amount": contract_amount,
            "balance_due": contract_amount,
            "payment_status": "pending",
        }
        values.update(contact)
        return self.db.create_client(values)

    def get_client(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        return self.db.get_client(client_id)

    def require_client(self, client_id: int) -> Client:
        """Get client by ID or raise NotFoundError."""
        client = self.db.get_client(client_id)
        if client is None:
            raise NotFoundError(client_not_found(client_id))
        return client

    def list_clients(self) -> list[Client]:
        """List all clients, newest first."""
        return self.db.list_clients()

    def search_clients(
        self, query: str = "", payment_status: Optional[str] = None
    ) -> list[Client]:
        """Filter clients by name/email/phone text and payment status.

        Args:
            query: Case-insensitive text matched against name and email, and
                literally against phone
            payment_status: Optional status filter (pending, partial, paid)
        """
        needle = query.strip().lower()
        results = []
        for client in self.db.list_clients():
            matches_search = (
                not needle
                or needle in client.name.lower()
                or needle in (client.email or "").lower()
                or query.strip() in (client.phone or "")
            )
            matches_status = payment_status is None or client.payment_status == payment_status
            if matches_search and matches_status:
                results.append(client)
        return results

    def update_client(
        self,
        client_id: int,
        name: Optional[str] = None,
        services: Optional[Sequence[LineItem]] = None,
        **fields: Any,
    ) -> None:
        """Update client fields.

        When services change, the contract amount is recomputed and the
        amount already paid is carried over into the new balance.

        Raises:
            NotFoundError: If the client doesn't exist
            ValidationError: If an unknown field is given
        """
        client = self.require_client(client_id)
        self._check_fields(fields, allow=("event_type",))

        values: dict[str, Any] = dict(fields)
        if name is not None:
            if not name.strip():
                raise ValidationError("Client name cannot be empty")
            values["name"] = name.strip()

        if services is not None:
            already_paid = client.contract_amount - client.balance_due
            contract_amount = line_items_subtotal(services)
            balance_due = contract_amount - already_paid
            values["services_booked"] = tuple(services)
            values["contract_amount"] = contract_amount
            values["balance_due"] = balance_due
            values["payment_status"] = derive_payment_status(contract_amount, balance_due)

        if values:
            self.db.update_client(client_id, values)

    def delete_client(self, client_id: int) -> None:
        """Delete a client. Linked invoices and expenses keep the stale ID."""
        self.require_client(client_id)
        self.db.delete_client(client_id)

    def get_activity(self, client_id: int) -> ClientActivity:
        """Invoices and expenses linked to a client, with invoice totals."""
        client = self.require_client(client_id)
        invoices = tuple(self.db.list_invoices(client_id=client_id))
        expenses = tuple(self.db.list_expenses(client_id=client_id))
        total_invoiced = sum((inv.total for inv in invoices), Decimal("0"))
        total_paid = sum((inv.amount_paid for inv in invoices), Decimal("0"))
        return ClientActivity(
            client=client,
            invoices=invoices,
            expenses=expenses,
            total_invoiced=total_invoiced,
            total_paid=total_paid,
            outstanding=total_invoiced - total_paid,
        )

    @staticmethod
    def _check_fields(fields: dict[str, Any], allow: tuple[str, ...] = ()) -> None:
        unknown = sorted(set(fields) - set(CONTACT_FIELDS) - set(allow))
        if unknown:
            raise ValidationError(f"Unknown client field(s): {', '.join(unknown)}")
        event_date = fields.get("event_date")
        if event_date is not None and not isinstance(event_date, date):
            raise ValidationError(f"Invalid event date '{event_date}'")
