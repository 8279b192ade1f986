"""CLI commands for the `partyplan plan` subgroup."""

import asyncio
import json
from pathlib import Path

import click
from pydantic import ValidationError

from partyplan import logger
from partyplan.matching.builder import PartyBuildResult, PartyPlanBuilder
from partyplan.matching.catalog import CatalogPort, JsonFileCatalog, create_catalog
from partyplan.matching.config import load_engine_config
from partyplan.matching.models.brief import PartyBrief
from partyplan.matching.models.plan import PLAN_CATEGORIES
from partyplan.matching.replacement import ReplacementEngine
from partyplan.matching.themes import THEMES, available_themes, theme_suggestions
from partyplan.ui.table import Table, TableColumn

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_brief(brief_file: str) -> PartyBrief:
    try:
        data = json.loads(Path(brief_file).read_text(encoding="utf-8"))
        return PartyBrief.model_validate(data)
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Could not read brief {brief_file}: {e}")
    except ValidationError as e:
        raise click.ClickException(f"Invalid brief {brief_file}:\n{e}")


def _open_catalog(catalog_file: str | None) -> CatalogPort:
    if catalog_file:
        return JsonFileCatalog(catalog_file)
    try:
        return create_catalog()
    except ValueError as e:
        raise click.ClickException(str(e))


def _fmt_money(amount: float | None) -> str:
    if amount is None:
        return "—"
    return f"£{amount:,.0f}"


def _print_plan(result: PartyBuildResult) -> None:
    brief = result.brief
    click.echo(
        f"{result.theme.name} party · {brief.guest_count} guests · "
        f"{brief.display_time_slot} ({brief.time_window['label']}) · "
        f"{brief.display_duration}"
    )
    click.echo(
        f"Budget {_fmt_money(result.budget)} → {result.allocation.tier} tier\n"
    )

    columns = [
        TableColumn("Category", style="bold cyan", no_wrap=True),
        TableColumn("Supplier"),
        TableColumn("Price", justify="right", style="green"),
        TableColumn("Share", justify="right"),
        TableColumn("Status"),
        TableColumn("Reason", style="dim"),
    ]
    table = Table(
        "Party Plan", columns, caption=f"{result.allocation.tier} tier allocation"
    )
    for category in PLAN_CATEGORIES:
        selection = result.selections.get(category)
        if selection is None:
            continue
        item = result.plan.get(category)
        share = _fmt_money(result.allocation.category_budget(category))
        if item is None:
            table.add_row(
                [category, "—", "—", share, "unfilled", selection.reason], style="red"
            )
            continue
        table.add_row(
            [
                category,
                item.name,
                _fmt_money(item.price),
                share,
                item.status,
                selection.reason,
            ],
            style="yellow" if item.is_fallback_selection else None,
        )
    einvites = result.plan.einvites
    table.add_row(
        [
            "einvites",
            einvites.name,
            _fmt_money(einvites.price),
            "—",
            einvites.status,
            "",
        ],
        style="dim",
    )
    table.render()

    click.echo(
        f"\nSuppliers: {_fmt_money(result.total_cost)} "
        f"({result.budget_used_pct}% of budget) · "
        f"Grand total: {_fmt_money(result.grand_total)}"
    )
    if result.needs_confirmation:
        click.echo(
            "⚠️  Needs confirmation (supplier may be unavailable or out of area): "
            + ", ".join(result.needs_confirmation)
        )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.command()
@click.argument("brief_file", type=click.Path(exists=True))
@click.option(
    "--catalog",
    "catalog_file",
    type=click.Path(exists=True),
    default=None,
    help="Supplier catalog JSON. Defaults to the configured catalog source.",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(),
    default=None,
    help="Write the plan record as JSON to this file.",
)
def build(brief_file: str, catalog_file: str | None, output_file: str | None) -> None:
    """Build a party plan from a brief.

    BRIEF_FILE is a JSON party brief (theme, guestCount, date, timeSlot,
    location, budget).
    """
    brief = _load_brief(brief_file)
    catalog = _open_catalog(catalog_file)
    builder = PartyPlanBuilder(catalog, load_engine_config())

    logger.info(f"Building plan for brief {brief_file}")
    try:
        result = asyncio.run(builder.build(brief))
    except Exception as e:
        logger.error(f"Plan build failed: {e}")
        raise click.ClickException(f"Plan build failed: {e}")

    _print_plan(result)

    if output_file:
        payload = {"plan": result.plan.to_record(), "summary": result.summary()}
        Path(output_file).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info(f"Wrote plan to {output_file}")
        click.echo(f"\n✓ Plan saved to {output_file}")


@click.command()
@click.argument("supplier_id")
@click.option(
    "--brief",
    "brief_file",
    type=click.Path(exists=True),
    default=None,
    help="Party brief JSON; its theme favours matching replacements.",
)
@click.option(
    "--catalog",
    "catalog_file",
    type=click.Path(exists=True),
    default=None,
    help="Supplier catalog JSON. Defaults to the configured catalog source.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the replacement record as JSON.",
)
def replace(
    supplier_id: str, brief_file: str | None, catalog_file: str | None, as_json: bool
) -> None:
    """Suggest a replacement for a rejected supplier.

    SUPPLIER_ID is the catalog id of the supplier being rejected.
    """
    brief = _load_brief(brief_file) if brief_file else None
    catalog = _open_catalog(catalog_file)

    async def _find():
        suppliers = await catalog.get_all_suppliers()
        rejected = next((s for s in suppliers if s.id == supplier_id), None)
        if rejected is None:
            return None, None
        engine = ReplacementEngine(catalog, load_engine_config())
        return rejected, await engine.find_replacement(rejected, brief)

    try:
        rejected, replacement = asyncio.run(_find())
    except Exception as e:
        logger.error(f"Replacement search failed: {e}")
        raise click.ClickException(f"Replacement search failed: {e}")

    if rejected is None:
        raise click.ClickException(f"Supplier '{supplier_id}' not found in catalog")
    if replacement is None:
        click.echo(f"No replacement found for {rejected.name}.")
        raise click.exceptions.Exit(1)

    if as_json:
        click.echo(json.dumps(replacement.to_record(), indent=2))
        return

    old, new = replacement.old_supplier, replacement.new_supplier
    columns = [
        TableColumn("", style="bold"),
        TableColumn("Supplier", style="cyan"),
        TableColumn("Price", justify="right", style="green"),
        TableColumn("Rating", justify="right"),
        TableColumn("Reviews", justify="right"),
    ]
    table = Table(f"Replacement for {replacement.category}", columns)
    for label, summary, style in (("Rejected", old, "dim"), ("Suggested", new, None)):
        table.add_row(
            [
                label,
                summary.name,
                _fmt_money(summary.price),
                f"{summary.rating:g}",
                summary.review_count,
            ],
            style=style,
        )
    table.render()

    click.echo(f"\nReason: {replacement.reason}")
    for note in replacement.improvements:
        click.echo(f"  • {note}")


@click.command()
@click.option("--age", type=int, default=None, help="Child's age, to suggest suitable themes.")
def themes(age: int | None) -> None:
    """List party themes."""
    if age is not None:
        chosen = [THEMES[theme_id] for theme_id in theme_suggestions(age)]
        title = f"Suggested themes for age {age}"
    else:
        chosen = available_themes()
        title = "Party themes"

    columns = [
        TableColumn("Id", style="bold cyan", no_wrap=True),
        TableColumn("Name"),
        TableColumn("Colours"),
        TableColumn("Style", style="dim"),
    ]
    table = Table(title, columns)
    for theme in chosen:
        table.add_row(
            [theme.id, theme.name, ", ".join(theme.colors), theme.decoration_style]
        )
    table.render()
