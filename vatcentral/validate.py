"""
Validation engine for VATCENTRAL.

Grades a learner's VAT centralization entry against the scenario's trial
balance. Six independent rules are evaluated and every failure is reported:
1. Every VAT account of the trial balance is present in the journal
2. No non-VAT account was transferred
3. Every transferred account is settled (moved to the opposite side)
4. The net VAT position is computed from the VAT rows
5. The centralizing line matches the net position (account, side, amount)
6. Total debit equals total credit

The engine is a pure function of its inputs: grading the same rows and
lines twice yields the same verdict.
"""

import csv
import json
import logging
from dataclasses import dataclass, field
from io import StringIO
from typing import Iterable, Optional

from .config import VATConfig
from .journal import JournalLine, compute_totals
from .scenario import (
    PAYABLE,
    RECOVERABLE,
    AccountRow,
    CentralizerAccount,
    ScenarioCatalog,
)

logger = logging.getLogger(__name__)

# Violation categories, in evaluation order.
MISSING_VAT = "MISSING_VAT"
NON_VAT_ACCOUNT = "NON_VAT_ACCOUNT"
NOT_SETTLED = "NOT_SETTLED"
MISSING_CENTRALIZER = "MISSING_CENTRALIZER"
WRONG_CENTRALIZER = "WRONG_CENTRALIZER"
WRONG_CENTRALIZER_SIDE = "WRONG_CENTRALIZER_SIDE"
WRONG_CENTRALIZER_AMOUNT = "WRONG_CENTRALIZER_AMOUNT"
UNNECESSARY_CENTRALIZER = "UNNECESSARY_CENTRALIZER"
UNBALANCED = "UNBALANCED"


@dataclass(frozen=True)
class NetPosition:
    """
    Net VAT position of a scenario.

    Attributes:
        kind: "none" when no centralizing line is needed, otherwise
              "payable" (net VAT owed) or "recoverable" (net VAT reclaimable).
        amount: Magnitude of the position (0.0 for "none").
    """

    kind: str
    amount: float = 0.0

    def __post_init__(self):
        """Validate kind value."""
        if self.kind not in ("none", PAYABLE, RECOVERABLE):
            raise ValueError(
                f"Invalid net position kind: {self.kind}. "
                f"Must be 'none', '{PAYABLE}' or '{RECOVERABLE}'."
            )

    @property
    def requires_centralizer(self) -> bool:
        return self.kind != "none"


def compute_net_position(
    rows: Iterable[AccountRow],
    config: Optional[VATConfig] = None
) -> NetPosition:
    """
    Compute the net VAT position of a trial balance.

    The net is the sum of credits minus the sum of debits over the
    VAT-flagged rows. A positive net is payable, a negative net is
    recoverable, and a magnitude within tolerance needs no centralizer.

    Args:
        rows: Trial-balance rows of the scenario.
        config: Optional configuration; uses default if not provided.

    Returns:
        NetPosition describing which centralizer is expected, if any.
    """
    if config is None:
        from .config import default_config
        config = default_config

    vat_rows = [row for row in rows if row.is_vat]
    net = sum(row.credit for row in vat_rows) - sum(row.debit for row in vat_rows)

    if config.is_zero(net):
        return NetPosition("none")
    if net > 0:
        return NetPosition(PAYABLE, net)
    return NetPosition(RECOVERABLE, -net)


@dataclass
class Violation:
    """
    A single failed grading rule.

    Attributes:
        category: Rule category (e.g., "MISSING_VAT", "UNBALANCED").
        message: Plain-language explanation for the learner.
        codes: Account codes the violation concerns.
    """

    category: str
    message: str
    codes: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationVerdict:
    """
    Outcome of grading one journal entry.

    Attributes:
        problems: Failed rules, in evaluation order.
        net_position: Net VAT position the entry was graded against.
    """

    problems: list[Violation] = field(default_factory=list)
    net_position: Optional[NetPosition] = None

    @property
    def passed(self) -> bool:
        """True when no rule failed."""
        return not self.problems

    @property
    def violations(self) -> list[str]:
        """Plain-language messages, one per failed rule."""
        return [p.message for p in self.problems]

    @property
    def categories(self) -> list[str]:
        return [p.category for p in self.problems]

    def add(self, category: str, message: str, codes: Optional[list[str]] = None) -> None:
        """
        Record a failed rule.

        Args:
            category: Violation category.
            message: Violation message.
            codes: Optional account codes concerned.
        """
        self.problems.append(Violation(category, message, list(codes or [])))

    def log_summary(self) -> None:
        """Log the verdict and every violation."""
        if self.passed:
            logger.info("✓ Entry passed all checks")
            return

        for problem in self.problems:
            logger.warning(f"[{problem.category}] {problem.message}")

        logger.info(f"✗ Entry FAILED with {len(self.problems)} violation(s)")

    def format_as_text(self) -> str:
        """
        Format the verdict as human-readable text.

        Returns:
            Formatted text report.
        """
        lines = []
        sep = "=" * 70

        lines.append(sep)
        lines.append("VAT CENTRALIZATION CHECK")
        lines.append(sep)

        if self.passed:
            lines.append("[PASSED] The centralization entry is correct.")
        else:
            lines.append(f"[FAILED] {len(self.problems)} problem(s) found:")
            lines.append("")
            for i, problem in enumerate(self.problems, 1):
                lines.append(f"{i}. {problem.message}")

        lines.append(sep)
        return "\n".join(lines)

    def format_as_json(self) -> str:
        """
        Format the verdict as JSON.

        Returns:
            JSON string.
        """
        data = {
            "status": "passed" if self.passed else "failed",
            "violation_count": len(self.problems),
            "net_position": (
                {
                    "kind": self.net_position.kind,
                    "amount": round(self.net_position.amount, 2),
                }
                if self.net_position is not None
                else None
            ),
            "violations": [
                {
                    "category": p.category,
                    "message": p.message,
                    "codes": p.codes,
                }
                for p in self.problems
            ],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_as_csv(self) -> str:
        """
        Format the violations as CSV.

        Returns:
            CSV string with one row per violation.
        """
        out = StringIO()
        writer = csv.writer(out)
        writer.writerow(["Category", "Message", "Codes"])
        for p in self.problems:
            writer.writerow([p.category, p.message, " ".join(p.codes)])
        return out.getvalue()


def validate_entry(
    rows: Iterable[AccountRow],
    lines: Iterable[JournalLine],
    centralizers: Iterable[CentralizerAccount],
    config: Optional[VATConfig] = None
) -> ValidationVerdict:
    """
    Grade a VAT centralization entry.

    Args:
        rows: Trial-balance rows of the scenario.
        lines: Journal lines proposed by the learner, in entry order.
        centralizers: The payable and recoverable centralizer accounts.
        config: Optional configuration; uses default if not provided.

    Returns:
        ValidationVerdict with every failed rule, in rule order.
    """
    if config is None:
        from .config import default_config
        config = default_config

    rows = list(rows)
    lines = list(lines)
    centralizers = {c.position: c for c in centralizers}
    rows_by_code = {row.code: row for row in rows}

    logger.debug(f"Grading entry of {len(lines)} line(s) against {len(rows)} row(s)")

    net_position = compute_net_position(rows, config)
    verdict = ValidationVerdict(net_position=net_position)

    check_vat_completeness(rows, lines, verdict)
    check_non_vat_accounts(rows_by_code, lines, verdict)
    check_settlement(rows_by_code, lines, verdict)
    check_centralizer(net_position, lines, centralizers, config, verdict)
    check_balance(lines, config, verdict)

    logger.debug(
        f"Grading complete: {'passed' if verdict.passed else 'failed'} "
        f"({len(verdict.problems)} violation(s))"
    )

    return verdict


def validate_for_catalog(
    catalog: ScenarioCatalog,
    scenario_id: int,
    lines: Iterable[JournalLine],
    config: Optional[VATConfig] = None
) -> ValidationVerdict:
    """
    Grade an entry against one scenario of a catalog.

    Raises:
        KeyError: If the catalog has no such scenario.
    """
    scenario = catalog.get(scenario_id)
    return validate_entry(scenario.rows, lines, catalog.centralizers, config)


def check_vat_completeness(
    rows: list[AccountRow],
    lines: list[JournalLine],
    verdict: ValidationVerdict
) -> None:
    """
    Check that every VAT row of the trial balance appears in the journal.

    Args:
        rows: Trial-balance rows.
        lines: Journal lines.
        verdict: ValidationVerdict to append problems to.
    """
    journal_codes = {line.code for line in lines}
    missing = [row.code for row in rows if row.is_vat and row.code not in journal_codes]

    if missing:
        verdict.add(
            MISSING_VAT,
            f"Missing VAT accounts: {', '.join(missing)}.",
            missing
        )


def check_non_vat_accounts(
    rows_by_code: dict[str, AccountRow],
    lines: list[JournalLine],
    verdict: ValidationVerdict
) -> None:
    """
    Check that no non-VAT account was transferred into the journal.

    A transferred line whose code is not in the trial balance at all is
    reported as well.

    Args:
        rows_by_code: Trial-balance rows keyed by account code.
        lines: Journal lines.
        verdict: ValidationVerdict to append problems to.
    """
    wrong = []
    for line in lines:
        if line.is_manual:
            continue
        row = rows_by_code.get(line.code)
        if row is None or not row.is_vat:
            wrong.append(line.code)

    if wrong:
        verdict.add(
            NON_VAT_ACCOUNT,
            f"Incorrect (non-VAT) accounts detected: {', '.join(wrong)}.",
            wrong
        )


def check_settlement(
    rows_by_code: dict[str, AccountRow],
    lines: list[JournalLine],
    verdict: ValidationVerdict
) -> None:
    """
    Check that every transferred account was moved to the opposite side.

    A row that was originally a debit must now show a positive credit; a row
    that was originally a credit must no longer show one.

    Args:
        rows_by_code: Trial-balance rows keyed by account code.
        lines: Journal lines.
        verdict: ValidationVerdict to append problems to.
    """
    for line in lines:
        if line.is_manual:
            continue
        row = rows_by_code.get(line.code)
        if row is None:
            continue

        original_side = line.original_side or row.natural_side
        now_on_credit = line.credit > 0

        if original_side == "debit" and not now_on_credit:
            verdict.add(
                NOT_SETTLED,
                f"Account {line.code} is not settled (it should be on the credit side).",
                [line.code]
            )
        elif original_side == "credit" and now_on_credit:
            verdict.add(
                NOT_SETTLED,
                f"Account {line.code} is not settled (it should be on the debit side).",
                [line.code]
            )


def check_centralizer(
    net_position: NetPosition,
    lines: list[JournalLine],
    centralizers: dict[str, CentralizerAccount],
    config: VATConfig,
    verdict: ValidationVerdict
) -> None:
    """
    Check the centralizing line against the net VAT position.

    Only the first manual line is graded. Account errors are reported
    before side errors, and the amount is only checked once both are right.

    Args:
        net_position: Expected net position.
        lines: Journal lines.
        centralizers: Centralizer accounts keyed by position.
        config: Configuration with tolerances.
        verdict: ValidationVerdict to append problems to.
    """
    centralizer_line = next((line for line in lines if line.is_manual), None)

    if not net_position.requires_centralizer:
        if centralizer_line is not None:
            verdict.add(
                UNNECESSARY_CENTRALIZER,
                "Net VAT is zero: no centralizing account is needed.",
                [centralizer_line.code]
            )
        return

    if centralizer_line is None:
        codes = sorted(c.code for c in centralizers.values())
        verdict.add(
            MISSING_CENTRALIZER,
            f"The centralizing account is missing ({' or '.join(codes)}).",
            codes
        )
        return

    expected = centralizers[net_position.kind]

    if centralizer_line.code != expected.code:
        verdict.add(
            WRONG_CENTRALIZER,
            f"Net VAT {net_position.kind}: use account {expected.code}.",
            [centralizer_line.code]
        )
    elif getattr(centralizer_line, expected.side) == 0:
        verdict.add(
            WRONG_CENTRALIZER_SIDE,
            f"Account {expected.code} must be on the {expected.side} side.",
            [expected.code]
        )
    elif not config.amounts_match(getattr(centralizer_line, expected.side), net_position.amount):
        verdict.add(
            WRONG_CENTRALIZER_AMOUNT,
            f"Incorrect amount for {expected.code}. "
            f"Expected: {config.format_amount(net_position.amount)}.",
            [expected.code]
        )


def check_balance(
    lines: list[JournalLine],
    config: VATConfig,
    verdict: ValidationVerdict
) -> None:
    """
    Check that total debit equals total credit.

    Args:
        lines: Journal lines.
        config: Configuration with numeric tolerance.
        verdict: ValidationVerdict to append problems to.
    """
    totals = compute_totals(lines, config)

    if not totals.is_balanced:
        verdict.add(
            UNBALANCED,
            f"The entry does not balance (gap: {config.format_amount(totals.diff)})."
        )
