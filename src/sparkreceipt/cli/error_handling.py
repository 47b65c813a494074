"""CLI error handling helpers."""

import logging

import click

from sparkreceipt.domain.errors import BackendError, DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, BackendError):
        logger.error("Backend call failed: %s", error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
