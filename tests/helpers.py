"""
Shared test helpers for VATCENTRAL unit tests.

Provides factory functions for creating scenario rows, journal lines and
catalogs, plus a solver that builds the correct centralization entry for a
scenario.
"""

from __future__ import annotations

from vatcentral.journal import JournalLine
from vatcentral.scenario import (
    AccountRow,
    CentralizerAccount,
    Scenario,
    ScenarioCatalog,
)
from vatcentral.validate import compute_net_position


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


RECOVERABLE_ACCOUNT = CentralizerAccount(
    code="4119", name="VAT administration (recoverable)", position="recoverable"
)
PAYABLE_ACCOUNT = CentralizerAccount(
    code="4519", name="VAT administration (payable)", position="payable"
)
CENTRALIZERS = [RECOVERABLE_ACCOUNT, PAYABLE_ACCOUNT]


def make_row(
    code: str,
    debit: float = 0.0,
    credit: float = 0.0,
    is_vat: bool = True,
    name: str | None = None,
) -> AccountRow:
    """Create an AccountRow with a generated name."""
    return AccountRow(
        code=code,
        name=name or f"Account {code}",
        debit=debit,
        credit=credit,
        is_vat=is_vat,
    )


def make_line(
    code: str,
    debit: float = 0.0,
    credit: float = 0.0,
    is_manual: bool = False,
    original_side: str | None = None,
    line_id: str | None = None,
) -> JournalLine:
    """Create a JournalLine; the id defaults to the account code."""
    return JournalLine(
        line_id=line_id or f"line-{code}",
        code=code,
        name=f"Account {code}",
        debit=debit,
        credit=credit,
        is_manual=is_manual,
        original_side=original_side,
    )


def make_scenario(rows: list[AccountRow], scenario_id: int = 1, name: str | None = None) -> Scenario:
    """Create a Scenario around the given rows."""
    return Scenario(
        scenario_id=scenario_id,
        name=name or f"Scenario {scenario_id}",
        description="Test scenario",
        rows=tuple(rows),
    )


def make_catalog(*scenarios: Scenario) -> ScenarioCatalog:
    """Create a ScenarioCatalog with the standard centralizer accounts."""
    return ScenarioCatalog(scenarios=list(scenarios), centralizers=list(CENTRALIZERS))


def catalog_dict(rows: list[dict], scenario_id: int = 1) -> dict:
    """Raw JSON-style catalog data holding one scenario."""
    return {
        "version": 1,
        "centralizers": [
            {"code": "4119", "name": "Recoverable", "position": "recoverable"},
            {"code": "4519", "name": "Payable", "position": "payable"},
        ],
        "scenarios": [
            {
                "id": scenario_id,
                "name": f"Scenario {scenario_id}",
                "description": "Test scenario",
                "rows": rows,
            }
        ],
    }


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------


def solve(scenario: Scenario) -> list[JournalLine]:
    """
    Build the correct centralization entry for a scenario.

    Every VAT row is transferred to the opposite side, and the net position
    (if any) is booked on the matching centralizer account.
    """
    lines = [
        make_line(
            row.code,
            debit=row.credit,
            credit=row.debit,
            original_side=row.natural_side,
        )
        for row in scenario.vat_rows
    ]

    net = compute_net_position(scenario.rows)
    if net.kind == "payable":
        lines.append(make_line("4519", credit=net.amount, is_manual=True))
    elif net.kind == "recoverable":
        lines.append(make_line("4119", debit=net.amount, is_manual=True))

    return lines
