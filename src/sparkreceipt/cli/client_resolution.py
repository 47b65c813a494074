"""CLI helpers for client resolution."""

from __future__ import annotations

from typing import Optional

import click

from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.domain.client import ClientService
from sparkreceipt.utils.client_resolver import resolve_client


def resolve_client_or_exit(
    ctx: click.Context, client_service: ClientService, client: Optional[str]
) -> Optional[int]:
    """Resolve a client name or ID, or exit with a CLI error.

    Returns None when no client was given.
    """
    if client is None or client == "":
        return None
    try:
        return resolve_client(client_service, client)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
