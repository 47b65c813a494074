"""Utility for resolving client names to IDs."""

from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.errors import NotFoundError, ValidationError


def resolve_client(client_service: ClientService, client: str | int) -> int:
    """Resolve a client ID or name to a client ID.

    Numeric references are tried as IDs first; otherwise the name is
    matched case-insensitively.

    Raises:
        NotFoundError: If no client matches
        ValidationError: If a name matches more than one client
    """
    reference = str(client).strip()
    if reference.isdigit():
        found = client_service.get_client(int(reference))
        if found is not None:
            return found.id

    matches = [c for c in client_service.list_clients() if c.name.lower() == reference.lower()]
    if not matches:
        raise NotFoundError(f"Client '{reference}' not found")
    if len(matches) > 1:
        ids = ", ".join(str(c.id) for c in matches)
        raise ValidationError(f"Client name '{reference}' is ambiguous (IDs: {ids}); use the ID")
    return matches[0].id
