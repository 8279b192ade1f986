import click

from partyplan.matching.command import build, replace, themes


@click.group("plan")
def plan() -> None:
    """Build party plans and find replacement suppliers."""


plan.add_command(build)
plan.add_command(replace)
plan.add_command(themes)
