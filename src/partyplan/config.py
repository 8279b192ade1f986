"""Configuration management commands."""

import click

from partyplan import logger
from partyplan.matching.config import (
    create_default_config,
    get_config_file,
    load_catalog_config,
    load_engine_config,
)


@click.group("config")
def config_group() -> None:
    """Manage partyplan configuration."""


@config_group.command("init")
def init_config() -> None:
    """Initialize configuration file with default settings.

    Creates ~/.partyplan/config.toml with the catalog source and engine weights.
    """
    try:
        create_default_config()
        config_file = get_config_file()
        click.echo(f"✓ Created configuration file: {config_file}")
        click.echo("\nEdit the [catalog] section to point at your supplier catalog.")
        click.echo(
            "You can also set the PARTYPLAN_CATALOG_FILE or PARTYPLAN_CATALOG_URL "
            "environment variable."
        )
    except Exception as e:
        click.echo(f"❌ Failed to create config file: {e}")
        logger.error(f"Config init failed: {e}")
        raise click.exceptions.Exit(1)


@config_group.command("show")
def show_config() -> None:
    """Display current configuration.

    Shows the catalog source and any engine weights that differ from the defaults.
    """
    config_file = get_config_file()

    if not config_file.exists():
        click.echo(f"⚠️  No config file found at {config_file}")
        click.echo("Run 'partyplan config init' to create one.")

    catalog = load_catalog_config()
    engine = load_engine_config()

    if config_file.exists():
        click.echo(f"Configuration file: {config_file}\n")

    if catalog.file:
        click.echo(f"✓ Catalog file: {catalog.file}")
    elif catalog.url:
        click.echo(f"✓ Catalog URL: {catalog.url}")
    else:
        click.echo("❌ Catalog: Not configured")

    defaults = type(engine)()
    changed = {
        name: value
        for name, value in engine.model_dump().items()
        if value != getattr(defaults, name)
    }
    if changed:
        click.echo(f"\nEngine overrides ({len(changed)}):")
        for name, value in changed.items():
            click.echo(f"  • {name} = {value}")
    else:
        click.echo(f"\nEngine: defaults (budget tolerance {engine.budget_tolerance}×)")
