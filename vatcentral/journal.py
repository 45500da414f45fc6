"""
Journal state for VATCENTRAL.

Holds the journal entry a learner builds for one scenario attempt:
- Transfer of trial-balance rows into the journal
- Reversal of a line to the opposite side
- Manual centralizing lines
- Removal and reset
- Locking once the attempt has been graded successfully
"""

import logging
import math
import re
import uuid
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Union

from .config import VATConfig
from .scenario import CentralizerAccount, Scenario

logger = logging.getLogger(__name__)

NOTHING_TRANSFERRED = (
    "No new account selected, or the selected accounts are already in the journal."
)


def generate_line_id() -> str:
    """Return a short unique identifier for a journal line."""
    return uuid.uuid4().hex[:9]


def parse_amount(value: Union[str, float, int, None]) -> float:
    """
    Parse an amount typed by a learner.

    Accepts a comma as decimal separator and ignores any character other
    than digits and the decimal point. Unparsable input yields 0.0.

    Args:
        value: Raw input, either text or an already numeric value.

    Returns:
        Parsed amount.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = re.sub(r"[^0-9.]", "", value.replace(",", ".", 1))
    match = re.match(r"\d*\.?\d*", cleaned)
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


@dataclass
class JournalLine:
    """
    A single line of the learner's journal entry.

    Attributes:
        line_id: Opaque unique identifier.
        code: Account number.
        name: Account name.
        debit: Debit amount.
        credit: Credit amount.
        is_manual: True for learner-authored (centralizing) lines,
                   False for lines transferred from the trial balance.
        original_side: Side of the originating row before any reversal
                       ("debit" or "credit"); transferred lines only.
    """

    line_id: str
    code: str
    name: str
    debit: float = 0.0
    credit: float = 0.0
    is_manual: bool = False
    original_side: Optional[str] = None

    def __post_init__(self):
        """Validate original side value."""
        if self.original_side not in (None, "debit", "credit"):
            raise ValueError(
                f"Invalid original side: {self.original_side}. "
                f"Must be 'debit', 'credit' or None."
            )


@dataclass(frozen=True)
class JournalTotals:
    """
    Totals of a journal entry.

    Attributes:
        debit: Sum of all line debits.
        credit: Sum of all line credits.
        diff: Absolute difference between debit and credit.
        is_balanced: Whether diff is below the numeric tolerance.
    """

    debit: float
    credit: float
    diff: float
    is_balanced: bool


def compute_totals(
    lines: Iterable[JournalLine],
    config: Optional[VATConfig] = None
) -> JournalTotals:
    """
    Compute the debit/credit totals of a set of journal lines.

    Args:
        lines: Journal lines.
        config: Optional configuration; uses default if not provided.

    Returns:
        JournalTotals for the lines.
    """
    if config is None:
        from .config import default_config
        config = default_config

    lines = list(lines)
    debit = sum(line.debit for line in lines)
    credit = sum(line.credit for line in lines)
    diff = abs(debit - credit)

    return JournalTotals(
        debit=debit,
        credit=credit,
        diff=diff,
        is_balanced=config.is_balanced(diff)
    )


@dataclass
class JournalState:
    """
    The journal entry under construction for one scenario attempt.

    Every mutation is refused (no state change) once the state is locked.

    Attributes:
        scenario: Scenario whose trial balance feeds the journal.
        centralizers: Accounts allowed for manual lines.
        config: Configuration with tolerances.
        lines: Journal lines in entry order.
        locked: Whether the attempt was graded successfully.
        notice: Pending informational message for the learner, if any.
    """

    scenario: Scenario
    centralizers: list[CentralizerAccount] = field(default_factory=list)
    config: Optional[VATConfig] = None
    lines: list[JournalLine] = field(default_factory=list)
    locked: bool = False
    notice: Optional[str] = None

    @property
    def totals(self) -> JournalTotals:
        """Totals recomputed from the current lines."""
        return compute_totals(self.lines, self.config)

    @property
    def codes(self) -> set[str]:
        """Account codes present among the journal lines."""
        return {line.code for line in self.lines}

    def snapshot(self) -> list[JournalLine]:
        """Return copies of the current lines, detached from this state."""
        return [replace(line) for line in self.lines]

    def get_line(self, line_id: str) -> Optional[JournalLine]:
        """Return the line with the given identifier, if any."""
        for line in self.lines:
            if line.line_id == line_id:
                return line
        return None

    def _refuse_if_locked(self, action: str) -> bool:
        if self.locked:
            logger.debug(f"Journal is locked; ignoring {action}")
            return True
        return False

    def transfer(self, selected_codes: Iterable[str]) -> list[JournalLine]:
        """
        Transfer selected trial-balance rows into the journal.

        Rows whose code is already present among the lines are skipped.
        When nothing new is added, the journal is left untouched and an
        informational notice is set instead.

        Args:
            selected_codes: Account codes of the selected rows.

        Returns:
            The newly appended lines (empty when nothing was added).

        Raises:
            TypeError: If a single code string is passed instead of a
                collection of codes.
        """
        if self._refuse_if_locked("transfer"):
            return []

        if isinstance(selected_codes, str):
            raise TypeError(
                f"Expected a collection of account codes, got the string {selected_codes!r}"
            )

        selected = set(selected_codes)
        existing = self.codes
        new_lines = []

        for row in self.scenario.rows:
            if row.code not in selected or row.code in existing:
                continue
            new_lines.append(
                JournalLine(
                    line_id=generate_line_id(),
                    code=row.code,
                    name=row.name,
                    debit=row.debit,
                    credit=row.credit,
                    is_manual=False,
                    original_side=row.natural_side
                )
            )

        if not new_lines:
            logger.debug("Transfer produced no new line")
            self.notice = NOTHING_TRANSFERRED
            return []

        self.lines.extend(new_lines)
        self.notice = None
        logger.debug(f"Transferred {len(new_lines)} line(s): "
                     f"{', '.join(line.code for line in new_lines)}")
        return new_lines

    def reverse(self, line_id: str) -> bool:
        """
        Move a line's amount to the opposite side.

        Args:
            line_id: Identifier of the line to reverse.

        Returns:
            True if a line was reversed.
        """
        if self._refuse_if_locked("reverse"):
            return False

        line = self.get_line(line_id)
        if line is None:
            logger.debug(f"No journal line {line_id} to reverse")
            return False

        line.debit, line.credit = line.credit, line.debit
        self.notice = None
        return True

    def add_manual(
        self,
        code: str,
        amount: Union[str, float, int, None]
    ) -> Optional[JournalLine]:
        """
        Append a centralizing line.

        The side is fixed by the account: the payable centralizer is booked
        on credit, the recoverable one on debit. A non-positive amount or an
        unknown account leaves the journal untouched.

        Args:
            code: Code of one of the centralizer accounts.
            amount: Amount, possibly as text typed by the learner.

        Returns:
            The new line, or None if nothing was added.
        """
        if self._refuse_if_locked("manual line"):
            return None

        value = parse_amount(amount)
        if not (math.isfinite(value) and value > 0):
            logger.debug(f"Ignoring manual line with invalid amount: {amount!r}")
            return None

        account = next((c for c in self.centralizers if c.code == code), None)
        if account is None:
            logger.debug(f"Ignoring manual line for unknown account {code}")
            return None

        on_credit = account.side == "credit"
        line = JournalLine(
            line_id=generate_line_id(),
            code=account.code,
            name=account.name,
            debit=0.0 if on_credit else value,
            credit=value if on_credit else 0.0,
            is_manual=True
        )
        self.lines.append(line)
        self.notice = None
        return line

    def remove(self, line_id: str) -> bool:
        """
        Delete one line.

        Args:
            line_id: Identifier of the line to delete.

        Returns:
            True if a line was deleted.
        """
        if self._refuse_if_locked("remove"):
            return False

        before = len(self.lines)
        self.lines = [line for line in self.lines if line.line_id != line_id]
        if len(self.lines) == before:
            return False

        self.notice = None
        return True

    def reset(self) -> bool:
        """
        Clear all lines.

        Returns:
            True if the journal was cleared, False if it is locked.
        """
        if self._refuse_if_locked("reset"):
            return False

        self.lines = []
        self.notice = None
        return True

    def lock(self) -> None:
        """Freeze the journal after a successful grading."""
        self.locked = True
        logger.debug(f"Journal for scenario {self.scenario.scenario_id} locked")
