"""
Workshop summary report.

Renders the results of a completed session: for each scenario, its VAT
accounts, the learner's centralization entry and the entry totals.
"""

import json
import logging
from io import StringIO
from typing import Optional

from ..config import VATConfig
from ..journal import JournalLine
from ..scenario import AccountRow
from ..session import ScenarioResult

logger = logging.getLogger(__name__)


def _amount(value: float) -> str:
    return f"{value:>14,.2f}" if value else f"{'':>14}"


def format_as_text(
    results: list[ScenarioResult],
    learner: Optional[str] = None,
    config: Optional[VATConfig] = None
) -> str:
    """
    Format session results as human-readable text.

    Args:
        results: Completed scenario results, in order.
        learner: Optional learner identifier for the header.
        config: Optional configuration; uses default if not provided.

    Returns:
        Formatted text string.
    """
    if config is None:
        from ..config import default_config
        config = default_config

    out = StringIO()
    sep = "=" * 80
    thin = "-" * 80

    out.write(sep + "\n")
    out.write("VAT CENTRALIZATION WORKSHOP - SUMMARY\n")
    if learner:
        out.write(f"Learner: {learner}\n")
    out.write(f"Scenarios completed: {len(results)}\n")
    out.write(f"Currency: {config.default_currency}\n")
    out.write(sep + "\n")

    for result in results:
        status = "[OK]" if result.passed else "[X]"
        out.write(f"\n{status} {result.scenario_name}\n")
        out.write(thin + "\n")

        out.write("VAT accounts in the trial balance:\n")
        for row in result.vat_rows:
            out.write(f"  {row.code:<6} {row.name[:44]:<44} {_amount(row.debit)} {_amount(row.credit)}\n")

        out.write("\nCentralization entry:\n")
        out.write(f"  {'Code':<6} {'Account':<44} {'Debit':>14} {'Credit':>14}\n")
        for line in result.lines:
            out.write(f"  {line.code:<6} {line.name[:44]:<44} {_amount(line.debit)} {_amount(line.credit)}\n")

        out.write(
            f"  {'':<6} {'TOTALS':<44} "
            f"{result.totals.debit:>14,.2f} {result.totals.credit:>14,.2f}\n"
        )
        if result.totals.is_balanced:
            out.write("  Entry is balanced (Debit = Credit)\n")
        else:
            out.write(f"  IMBALANCE: {config.format_amount(result.totals.diff)}\n")

    out.write("\n" + sep + "\n")
    return out.getvalue()


def format_as_json(
    results: list[ScenarioResult],
    learner: Optional[str] = None
) -> str:
    """
    Format session results as JSON.

    Args:
        results: Completed scenario results, in order.
        learner: Optional learner identifier.

    Returns:
        JSON string.
    """
    def row_to_dict(row: AccountRow) -> dict:
        return {
            "code": row.code,
            "name": row.name,
            "debit": round(row.debit, 2),
            "credit": round(row.credit, 2),
        }

    def line_to_dict(line: JournalLine) -> dict:
        return {
            "code": line.code,
            "name": line.name,
            "debit": round(line.debit, 2),
            "credit": round(line.credit, 2),
            "manual": line.is_manual,
        }

    data = {
        "learner": learner,
        "scenarios": [
            {
                "id": r.scenario_id,
                "name": r.scenario_name,
                "passed": r.passed,
                "vat_rows": [row_to_dict(row) for row in r.vat_rows],
                "entry": [line_to_dict(line) for line in r.lines],
                "totals": {
                    "debit": round(r.totals.debit, 2),
                    "credit": round(r.totals.credit, 2),
                    "is_balanced": r.totals.is_balanced,
                },
            }
            for r in results
        ],
    }

    return json.dumps(data, indent=2, ensure_ascii=False)
