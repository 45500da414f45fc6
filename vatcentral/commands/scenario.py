"""
Scenario command group for vatcentral.

Commands: list, show
"""

import logging
import sys

import click

from ..scenario import ScenarioCatalog
from ._options import catalog_option

logger = logging.getLogger(__name__)


@click.group(name="scenario")
def scenario_group():
    """Browse the exercise scenarios."""


@scenario_group.command(name="list")
@catalog_option
def list_scenarios(catalog_file):
    """List the scenarios of the catalog in exercise order."""
    try:
        catalog = ScenarioCatalog.load(catalog_file)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid scenario catalog: {e}")
        click.echo(f"[ERROR] {e}")
        sys.exit(1)

    click.echo(f"{'ID':>3}  {'Rows':>4}  Name")
    click.echo("-" * 80)
    for scenario in catalog.scenarios:
        click.echo(f"{scenario.scenario_id:>3}  {len(scenario.rows):>4}  {scenario.name}")


@scenario_group.command(name="show")
@click.argument("scenario_id", type=int)
@catalog_option
@click.option(
    "--reveal-vat",
    is_flag=True,
    help="Mark the VAT accounts (instructor view).",
)
def show_scenario(scenario_id, catalog_file, reveal_vat):
    """
    Show the trial balance of a scenario.

    The VAT flag of each account is hidden unless --reveal-vat is given.
    """
    try:
        catalog = ScenarioCatalog.load(catalog_file)
        scenario = catalog.get(scenario_id)
    except KeyError:
        click.echo(f"[ERROR] Scenario {scenario_id} not found in catalog.")
        sys.exit(1)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid scenario catalog: {e}")
        click.echo(f"[ERROR] {e}")
        sys.exit(1)

    click.echo(render_trial_balance(scenario, reveal_vat=reveal_vat))


def render_trial_balance(scenario, reveal_vat: bool = False) -> str:
    """Render a scenario's trial balance as a text table."""
    lines = [
        "=" * 80,
        scenario.name,
        scenario.description,
        "=" * 80,
        f"{'Code':<6} {'Account':<44} {'Debit':>12} {'Credit':>12}",
        "-" * 80,
    ]
    for row in scenario.rows:
        debit = f"{row.debit:>12,.2f}" if row.debit else ""
        credit = f"{row.credit:>12,.2f}" if row.credit else ""
        marker = " *" if reveal_vat and row.is_vat else ""
        lines.append(f"{row.code:<6} {row.name[:44]:<44} {debit:>12} {credit:>12}{marker}")
    lines.append("-" * 80)
    if reveal_vat:
        lines.append("* VAT account")
    return "\n".join(lines)
