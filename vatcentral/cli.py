"""
Command-line interface for VATCENTRAL.

Provides CLI commands for browsing scenarios, grading entries and running
the interactive workshop.
"""

import logging

import click

from . import __version__
from .config import setup_logging
from .commands.entry import entry_group
from .commands.scenario import scenario_group

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="vatcentral")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose (DEBUG level) logging."
)
@click.pass_context
def main(ctx, verbose):
    """
    VATCENTRAL - VAT centralization workshop.

    Practise the VAT centralizing journal entry on trial-balance scenarios
    and get every mistake explained.
    """
    setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    logger.debug(f"VATCENTRAL version {__version__}")


main.add_command(scenario_group)
main.add_command(entry_group)


if __name__ == "__main__":
    main()
