"""
Exercise session for VATCENTRAL.

A Session is created when a learner starts the workshop and discarded on
restart. It walks through the scenario catalog, owns the journal of the
active attempt, grades it on demand and collects one result per completed
scenario for the final report.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from .config import VATConfig
from .journal import JournalLine, JournalState, JournalTotals
from .scenario import AccountRow, Scenario, ScenarioCatalog
from .validate import ValidationVerdict, validate_entry

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Well done! The centralization is correct."
ERROR_MESSAGE = "Careful, the entry has errors:"


@dataclass
class Feedback:
    """
    Message shown to the learner after an action.

    Attributes:
        kind: "success", "error" or "neutral".
        message: Headline message.
        details: Individual explanations (violations for an error).
    """

    kind: str
    message: str
    details: list[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate kind value."""
        if self.kind not in ("success", "error", "neutral"):
            raise ValueError(
                f"Invalid feedback kind: {self.kind}. "
                f"Must be 'success', 'error' or 'neutral'."
            )


@dataclass
class ScenarioResult:
    """
    Final state of one completed scenario, handed off for reporting.

    Attributes:
        scenario_id: Scenario identifier.
        scenario_name: Scenario display name.
        vat_rows: VAT-flagged rows of the scenario's trial balance.
        lines: Learner's final journal lines.
        totals: Totals of the final journal.
        passed: Whether the entry passed grading.
    """

    scenario_id: int
    scenario_name: str
    vat_rows: list[AccountRow]
    lines: list[JournalLine]
    totals: JournalTotals
    passed: bool


class Session:
    """
    One learner's run through the scenario catalog.

    Attributes:
        catalog: Scenarios and centralizer accounts.
        config: Configuration with tolerances.
        learner: Optional learner identifier, stored verbatim.
        journal: Journal of the active scenario attempt.
        feedback: Feedback from the last action, if any.
        results: Results of completed scenarios, in order.
    """

    def __init__(
        self,
        catalog: ScenarioCatalog,
        config: Optional[VATConfig] = None,
        learner: Optional[str] = None
    ) -> None:
        if not catalog.scenarios:
            raise ValueError("Cannot start a session on an empty catalog")

        if config is None:
            from .config import default_config
            config = default_config

        self.catalog = catalog
        self.config = config
        self.learner = learner
        self.results: list[ScenarioResult] = []
        self.feedback: Optional[Feedback] = None
        self.complete = False
        self._index = 0
        self.journal = self._new_journal()

        logger.info(f"Session started ({len(catalog)} scenarios)")

    def _new_journal(self) -> JournalState:
        return JournalState(
            scenario=self.current_scenario,
            centralizers=list(self.catalog.centralizers),
            config=self.config
        )

    @property
    def current_scenario(self) -> Scenario:
        return self.catalog.scenarios[self._index]

    @property
    def position(self) -> int:
        """1-based position of the active scenario in the catalog."""
        return self._index + 1

    @property
    def is_last_scenario(self) -> bool:
        return self._index == len(self.catalog.scenarios) - 1

    @property
    def is_validated(self) -> bool:
        """Whether the active attempt passed grading."""
        return self.journal.locked

    def _after_action(self) -> None:
        if self.journal.notice:
            self.feedback = Feedback("neutral", self.journal.notice)
        else:
            self.feedback = None

    def transfer(self, codes: Iterable[str]) -> list[JournalLine]:
        """Transfer the selected trial-balance rows into the journal."""
        if self.journal.locked:
            return []
        added = self.journal.transfer(codes)
        self._after_action()
        return added

    def reverse(self, line_id: str) -> bool:
        """Move a journal line to the opposite side."""
        changed = self.journal.reverse(line_id)
        if changed:
            self._after_action()
        return changed

    def add_manual(
        self,
        code: str,
        amount: Union[str, float, int, None]
    ) -> Optional[JournalLine]:
        """Append a centralizing line."""
        line = self.journal.add_manual(code, amount)
        if line is not None:
            self._after_action()
        return line

    def remove(self, line_id: str) -> bool:
        """Delete a journal line."""
        changed = self.journal.remove(line_id)
        if changed:
            self._after_action()
        return changed

    def reset(self) -> bool:
        """Clear the journal of the active attempt."""
        changed = self.journal.reset()
        if changed:
            self.feedback = None
        return changed

    def validate(self) -> ValidationVerdict:
        """
        Grade the active journal.

        On success the journal is locked and progression is unlocked.

        Returns:
            ValidationVerdict for the current journal.
        """
        scenario = self.current_scenario
        verdict = validate_entry(
            scenario.rows,
            self.journal.snapshot(),
            self.catalog.centralizers,
            self.config
        )
        verdict.log_summary()

        if verdict.passed:
            self.journal.lock()
            self.feedback = Feedback("success", SUCCESS_MESSAGE)
            logger.info(f"Scenario {scenario.scenario_id} validated")
        else:
            self.feedback = Feedback("error", ERROR_MESSAGE, verdict.violations)

        return verdict

    def advance(self) -> Optional[Scenario]:
        """
        Record the active scenario's result and move to the next one.

        Returns:
            The next scenario, or None when the catalog is finished.

        Raises:
            RuntimeError: If the active scenario has not passed grading,
                          or the session is already complete.
        """
        if self.complete:
            raise RuntimeError("Session is complete; restart to play again")
        if not self.is_validated:
            raise RuntimeError(
                f"Scenario {self.current_scenario.scenario_id} must be "
                f"validated before moving on"
            )

        scenario = self.current_scenario
        self.results.append(
            ScenarioResult(
                scenario_id=scenario.scenario_id,
                scenario_name=scenario.name,
                vat_rows=scenario.vat_rows,
                lines=self.journal.snapshot(),
                totals=self.journal.totals,
                passed=True
            )
        )

        if self.is_last_scenario:
            self.complete = True
            self.feedback = None
            logger.info(f"All {len(self.results)} scenarios completed")
            return None

        self._index += 1
        self.journal = self._new_journal()
        self.feedback = None
        return self.current_scenario

    def restart(self) -> None:
        """Discard all progress and return to the first scenario."""
        self.results = []
        self.complete = False
        self.feedback = None
        self._index = 0
        self.journal = self._new_journal()
        logger.info("Session restarted")
