"""Business profile commands."""

import click

from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.domain.profile import BusinessProfileService


@click.group()
def profile_group():
    """Manage the business profile shown on invoices."""
    pass


@profile_group.command("show")
@click.pass_context
def show_profile(ctx):
    """Show the business profile."""
    service = BusinessProfileService(ctx.obj["db"])
    profile = service.get_profile()
    if profile is None:
        click.echo("No business profile yet. Use 'profile set --business-name ...' to create one.")
        return

    click.echo(profile.business_name or "(no business name)")
    if profile.address:
        click.echo(profile.address)
    location = ", ".join(part for part in (profile.city, profile.state) if part)
    if location or profile.zip:
        click.echo(f"{location} {profile.zip or ''}".strip())
    for label, value in (("Phone", profile.phone), ("Email", profile.email), ("Website", profile.website)):
        if value:
            click.echo(f"{label}: {value}")


@profile_group.command("set")
@click.option("--business-name", help="Business name")
@click.option("--address", help="Street address")
@click.option("--city", help="City")
@click.option("--state", help="State")
@click.option("--zip", "zip_code", help="ZIP code")
@click.option("--phone", help="Phone number")
@click.option("--email", help="Email address")
@click.option("--website", help="Website")
@click.pass_context
def set_profile(ctx, business_name, address, city, state, zip_code, phone, email, website):
    """Create or update the business profile.

    Only the given options are changed.

    Examples:
        sparkreceipt profile set --business-name "Spark Events" --phone 555-0100
    """
    service = BusinessProfileService(ctx.obj["db"])
    try:
        profile = service.save_profile(
            business_name=business_name,
            address=address,
            city=city,
            state=state,
            zip=zip_code,
            phone=phone,
            email=email,
            website=website,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Saved business profile '{profile.business_name}'")


def register_commands(cli):
    """Register profile commands with main CLI."""
    cli.add_command(profile_group, name="profile")
