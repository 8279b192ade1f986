import click

from partyplan.config import config_group
from partyplan.matching import plan
from partyplan.utils.logger import setup_logger


@click.group()
@click.option(
    "-v", "--verbose", is_flag=True, default=False, help="Echo log messages to stderr."
)
def main(verbose: bool) -> None:
    """partyplan – supplier matching and budget allocation for parties."""
    setup_logger(verbose)


main.add_command(plan)
main.add_command(config_group)
