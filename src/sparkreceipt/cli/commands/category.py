"""Expense category commands."""

import click

from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.domain.category import CategoryService


@click.group()
def category_group():
    """Manage expense categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all expense categories."""
    service = CategoryService(ctx.obj["db"])
    categories = service.list_categories()
    if not categories:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        deductible = "deductible" if cat.is_tax_deductible else "not deductible"
        irs = f", IRS: {cat.irs_category}" if cat.irs_category else ""
        click.echo(f"{cat.name} (ID: {cat.id}) [{deductible}{irs}]")


@category_group.command("create")
@click.argument("name")
@click.option("--color", help="Display color (e.g. #10B981)")
@click.option("--irs-category", help="IRS Schedule C line (e.g. 'Office expense')")
@click.option("--deductible/--not-deductible", default=True, help="Tax deductible (default: yes)")
@click.pass_context
def create_category(ctx, name: str, color: str | None, irs_category: str | None, deductible: bool):
    """Create a new expense category."""
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(
            name=name, color=color, is_tax_deductible=deductible, irs_category=irs_category
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name}' (ID: {category_id})")


@category_group.command("delete")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, name: str, yes: bool):
    """Delete a category. Expenses keep their category name."""
    service = CategoryService(ctx.obj["db"])
    try:
        category = service.require_category_by_name(name)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete category '{category.name}'?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_category(category.id)
    click.echo(f"Deleted category '{category.name}'")


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Create the default expense categories that don't exist yet."""
    service = CategoryService(ctx.obj["db"])
    click.echo("Creating default categories...")
    created, skipped = service.seed_default_categories()
    click.echo(f"Created {created} categories, {skipped} already existed.")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
    cli.add_command(init_categories)
