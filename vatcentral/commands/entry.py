"""
Entry command group for vatcentral.

Commands: check, play
"""

import json
import logging
import sys
from pathlib import Path

import click

from ..config import VATConfig
from ..journal import JournalLine, generate_line_id
from ..reports.summary import format_as_json as summary_as_json
from ..reports.summary import format_as_text as summary_as_text
from ..scenario import Scenario, ScenarioCatalog
from ..session import Session
from ..validate import validate_for_catalog
from ._options import catalog_option, format_option, tolerance_option
from .scenario import render_trial_balance

logger = logging.getLogger(__name__)

PLAY_HELP = """\
Commands:
  t CODE [CODE ...]   transfer accounts from the trial balance
  r N                 reverse journal line N
  a CODE AMOUNT       add a centralizing line ({codes})
  d N                 delete journal line N
  x                   clear the journal
  b                   show the trial balance again
  v                   check the entry
  n                   next scenario (after a successful check)
  q                   quit"""


@click.group(name="entry")
def entry_group():
    """Grade VAT centralization entries."""


def load_entry_lines(
    entry_file: Path,
    catalog: ScenarioCatalog
) -> tuple[Scenario, list[JournalLine]]:
    """
    Read a journal entry from a JSON file.

    Expected layout::

        {"scenario": 1,
         "lines": [{"code": "4110", "debit": 0, "credit": 5200},
                   {"code": "4519", "credit": 2600, "manual": true}]}

    Lines default to transferred (non-manual); their original side is
    taken from the scenario's trial balance.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is malformed or names an unknown scenario.
    """
    with open(entry_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    try:
        scenario = catalog.get(int(data["scenario"]))
    except KeyError as e:
        raise ValueError(f"Unknown or missing scenario: {e}") from e

    lines = []
    for item in data.get("lines", []):
        if "code" not in item:
            raise ValueError(f"Entry line without account code: {item}")

        code = str(item["code"])
        is_manual = bool(item.get("manual", False))
        row = scenario.row_for(code)
        account = catalog.centralizer(code)

        if row is not None:
            name = row.name
        elif account is not None:
            name = account.name
        else:
            name = code

        lines.append(
            JournalLine(
                line_id=generate_line_id(),
                code=code,
                name=name,
                debit=float(item.get("debit", 0)),
                credit=float(item.get("credit", 0)),
                is_manual=is_manual,
                original_side=row.natural_side if row is not None and not is_manual else None
            )
        )

    return scenario, lines


@entry_group.command(name="check")
@click.argument("entry_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@catalog_option
@tolerance_option
@format_option()
def check(entry_file, catalog_file, tolerance, format):
    """
    Grade a centralization entry stored in a JSON file.

    Returns exit code 0 if the entry passes, non-zero otherwise.
    """
    try:
        config = VATConfig(numeric_tolerance=tolerance)
        catalog = ScenarioCatalog.load(catalog_file)
        scenario, lines = load_entry_lines(entry_file, catalog)

        verdict = validate_for_catalog(catalog, scenario.scenario_id, lines, config)
        verdict.log_summary()

        if format.lower() == "json":
            output = verdict.format_as_json()
        elif format.lower() == "csv":
            output = verdict.format_as_csv()
        else:
            output = verdict.format_as_text()

        click.echo(output)
        sys.exit(0 if verdict.passed else 1)

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        click.echo(f"[ERROR] File not found: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        click.echo(f"[ERROR] {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error while checking entry: {e}", exc_info=True)
        click.echo(f"[ERROR] {e}")
        sys.exit(1)


def render_journal(session: Session) -> str:
    """Render the session's journal with totals as a numbered table."""
    journal = session.journal
    lines = [f"{'#':>2}  {'Code':<6} {'Account':<40} {'Debit':>12} {'Credit':>12}"]
    lines.append("-" * 80)

    if not journal.lines:
        lines.append("    (empty journal)")

    for i, line in enumerate(journal.lines, 1):
        debit = f"{line.debit:>12,.2f}" if line.debit else ""
        credit = f"{line.credit:>12,.2f}" if line.credit else ""
        lines.append(f"{i:>2}  {line.code:<6} {line.name[:40]:<40} {debit:>12} {credit:>12}")

    totals = journal.totals
    lines.append("-" * 80)
    lines.append(f"    {'':<6} {'TOTALS':<40} {totals.debit:>12,.2f} {totals.credit:>12,.2f}")
    if not totals.is_balanced:
        lines.append(f"    Gap: {session.config.format_amount(totals.diff)}")
    return "\n".join(lines)


def _line_id_at(session: Session, position: str):
    """Map a 1-based position typed by the learner to a line id."""
    try:
        index = int(position) - 1
    except ValueError:
        return None
    if 0 <= index < len(session.journal.lines):
        return session.journal.lines[index].line_id
    return None


def _echo_feedback(session: Session) -> None:
    feedback = session.feedback
    if feedback is None:
        return
    marker = {"success": "[OK]", "error": "[X]", "neutral": "[i]"}[feedback.kind]
    click.echo(f"{marker} {feedback.message}")
    for detail in feedback.details:
        click.echo(f"    - {detail}")


def run_play_loop(session: Session) -> bool:
    """
    Drive a session from learner commands read on the terminal.

    Returns:
        True when every scenario was completed, False if the learner quit.
    """
    catalog = session.catalog
    codes = f"{catalog.payable.code} payable / {catalog.recoverable.code} recoverable"
    help_text = PLAY_HELP.format(codes=codes)

    while not session.complete:
        scenario = session.current_scenario
        click.echo()
        click.echo(f"Scenario {session.position}/{len(session.catalog)}")
        click.echo(render_trial_balance(scenario))
        click.echo(help_text)

        while True:
            click.echo()
            click.echo(render_journal(session))
            _echo_feedback(session)

            raw = click.prompt(">", default="", show_default=False).strip()
            if not raw:
                continue

            command, *args = raw.split()
            command = command.lower()

            if command == "q":
                return False
            elif command == "t":
                session.transfer(args)
            elif command == "r" and args:
                line_id = _line_id_at(session, args[0])
                if line_id:
                    session.reverse(line_id)
            elif command == "a" and len(args) >= 2:
                session.add_manual(args[0], " ".join(args[1:]))
            elif command == "d" and args:
                line_id = _line_id_at(session, args[0])
                if line_id:
                    session.remove(line_id)
            elif command == "x":
                session.reset()
            elif command == "b":
                click.echo(render_trial_balance(scenario))
            elif command == "v":
                session.validate()
            elif command == "n":
                if not session.is_validated:
                    click.echo("Check the entry successfully before moving on.")
                    continue
                session.advance()
                break
            else:
                click.echo(help_text)

    return True


@entry_group.command(name="play")
@catalog_option
@click.option(
    "--learner",
    "-l",
    type=str,
    default=None,
    help="Learner name or e-mail shown on the summary.",
)
@format_option(choices=("text", "json"))
def play(catalog_file, learner, format):
    """
    Work through the scenarios interactively.

    For each scenario, transfer the VAT accounts, reverse them, add the
    centralizing line and check the entry. The summary of all scenarios is
    printed at the end.
    """
    try:
        catalog = ScenarioCatalog.load(catalog_file)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid scenario catalog: {e}")
        click.echo(f"[ERROR] {e}")
        sys.exit(1)

    session = Session(catalog, learner=learner)

    if not run_play_loop(session):
        click.echo("Exercise interrupted.")
        sys.exit(1)

    if format.lower() == "json":
        click.echo(summary_as_json(session.results, learner=session.learner))
    else:
        click.echo(summary_as_text(session.results, learner=session.learner, config=session.config))
