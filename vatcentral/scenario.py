"""
Scenario catalog for VATCENTRAL.

Provides the static exercise data: trial-balance rows per scenario and the
two centralizing accounts used to book the net VAT position. The catalog is
read from a JSON file and checked once at load time, so the grading engine
can assume well-formed input.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Catalog shipped with the package (the five classroom scenarios).
DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "scenarios.json"

PAYABLE = "payable"
RECOVERABLE = "recoverable"


class ScenarioConfigError(ValueError):
    """Raised when the scenario catalog violates a load-time precondition."""


@dataclass(frozen=True)
class AccountRow:
    """
    A single trial-balance row of a scenario.

    Attributes:
        code: Account number, also used as the row identifier.
        name: Account name.
        debit: Debit amount (>= 0).
        credit: Credit amount (>= 0).
        is_vat: Whether the account takes part in the VAT centralization.
                Hidden from the learner.
    """

    code: str
    name: str
    debit: float
    credit: float
    is_vat: bool = False

    @property
    def natural_side(self) -> str:
        """Side carrying the row's balance: "debit" or "credit"."""
        return "debit" if self.debit > 0 else "credit"


@dataclass(frozen=True)
class CentralizerAccount:
    """
    Account used to book the net VAT position.

    Attributes:
        code: Account number (e.g., "4519").
        name: Display name.
        position: "payable" (net VAT owed, booked on credit) or
                  "recoverable" (net VAT reclaimable, booked on debit).
    """

    code: str
    name: str
    position: str

    def __post_init__(self):
        """Validate position value."""
        if self.position not in (PAYABLE, RECOVERABLE):
            raise ScenarioConfigError(
                f"Invalid centralizer position: '{self.position}'. "
                f"Must be '{PAYABLE}' or '{RECOVERABLE}'."
            )

    @property
    def side(self) -> str:
        """Booking side implied by the account's position."""
        return "credit" if self.position == PAYABLE else "debit"


@dataclass(frozen=True)
class Scenario:
    """
    A read-only exercise: metadata plus ordered trial-balance rows.

    Attributes:
        scenario_id: Numeric scenario identifier.
        name: Display name.
        description: Short narrative shown to the learner.
        rows: Trial-balance rows in display order.
    """

    scenario_id: int
    name: str
    description: str
    rows: tuple[AccountRow, ...] = ()

    @property
    def vat_rows(self) -> list[AccountRow]:
        """Rows flagged as VAT accounts."""
        return [row for row in self.rows if row.is_vat]

    def row_for(self, code: str) -> Optional[AccountRow]:
        """Return the row with the given account code, if any."""
        for row in self.rows:
            if row.code == code:
                return row
        return None


@dataclass
class ScenarioCatalog:
    """
    Ordered scenarios plus the centralizing account definitions.

    Attributes:
        version: Schema version of the catalog file.
        scenarios: Scenarios in exercise order.
        centralizers: The two centralizing accounts.
    """

    version: int = 1
    scenarios: list[Scenario] = field(default_factory=list)
    centralizers: list[CentralizerAccount] = field(default_factory=list)

    def __post_init__(self):
        """Check catalog preconditions."""
        self.check()

    def __len__(self) -> int:
        return len(self.scenarios)

    def check(self) -> None:
        """
        Verify the catalog is well formed.

        Checks:
        - Amounts are non-negative and exactly one side of each row is nonzero
        - Account codes are unique within a scenario
        - Every scenario has at least one VAT-flagged row
        - Scenario ids are unique
        - Exactly one payable and one recoverable centralizer are defined

        Raises:
            ScenarioConfigError: On the first violated precondition.
        """
        positions = sorted(c.position for c in self.centralizers)
        if positions != [PAYABLE, RECOVERABLE]:
            raise ScenarioConfigError(
                "Catalog must define exactly one payable and one recoverable "
                f"centralizer account (found: {', '.join(positions) or 'none'})"
            )

        seen_ids = set()
        for scenario in self.scenarios:
            if scenario.scenario_id in seen_ids:
                raise ScenarioConfigError(
                    f"Duplicate scenario id: {scenario.scenario_id}"
                )
            seen_ids.add(scenario.scenario_id)
            _check_rows(scenario)

    def get(self, scenario_id: int) -> Scenario:
        """
        Look up a scenario by id.

        Raises:
            KeyError: If no scenario has that id.
        """
        for scenario in self.scenarios:
            if scenario.scenario_id == scenario_id:
                return scenario
        raise KeyError(scenario_id)

    def centralizer(self, code: str) -> Optional[CentralizerAccount]:
        """Return the centralizer with the given code, if defined."""
        for account in self.centralizers:
            if account.code == code:
                return account
        return None

    def centralizer_for(self, position: str) -> CentralizerAccount:
        """Return the centralizer for "payable" or "recoverable"."""
        for account in self.centralizers:
            if account.position == position:
                return account
        raise KeyError(position)

    @property
    def payable(self) -> CentralizerAccount:
        return self.centralizer_for(PAYABLE)

    @property
    def recoverable(self) -> CentralizerAccount:
        return self.centralizer_for(RECOVERABLE)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ScenarioCatalog":
        """
        Load a scenario catalog from a JSON file.

        Args:
            path: Path to the catalog file. Defaults to the bundled catalog.

        Returns:
            ScenarioCatalog instance loaded from the file.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            ScenarioConfigError: If required fields are missing or a
                                 precondition is violated.
        """
        if path is None:
            path = DEFAULT_CATALOG_PATH

        logger.info(f"Loading scenario catalog from {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        catalog = cls.from_dict(data)

        logger.info(
            f"Loaded {len(catalog.scenarios)} scenarios, "
            f"{sum(len(s.rows) for s in catalog.scenarios)} rows, "
            f"{len(catalog.centralizers)} centralizer accounts"
        )

        return catalog

    @classmethod
    def from_dict(cls, data: dict) -> "ScenarioCatalog":
        """
        Build a catalog from already-parsed JSON data.

        Raises:
            ScenarioConfigError: If required fields are missing or a
                                 precondition is violated.
        """
        try:
            centralizers = [
                CentralizerAccount(
                    code=str(item["code"]),
                    name=item["name"],
                    position=item["position"]
                )
                for item in data.get("centralizers", [])
            ]

            scenarios = []
            for item in data.get("scenarios", []):
                rows = tuple(
                    AccountRow(
                        code=str(row["code"]),
                        name=row["name"],
                        debit=float(row.get("debit", 0)),
                        credit=float(row.get("credit", 0)),
                        is_vat=bool(row.get("vat", False))
                    )
                    for row in item["rows"]
                )
                scenarios.append(
                    Scenario(
                        scenario_id=int(item["id"]),
                        name=item["name"],
                        description=item.get("description", ""),
                        rows=rows
                    )
                )
        except KeyError as e:
            raise ScenarioConfigError(f"Missing required field in catalog: {e}") from e

        return cls(
            version=data.get("version", 1),
            scenarios=scenarios,
            centralizers=centralizers
        )


def _check_rows(scenario: Scenario) -> None:
    """Check the row-level preconditions of one scenario."""
    label = f"Scenario {scenario.scenario_id}"
    codes = set()

    for row in scenario.rows:
        if row.debit < 0 or row.credit < 0:
            raise ScenarioConfigError(
                f"{label}: account {row.code} has a negative amount"
            )
        if (row.debit > 0) == (row.credit > 0):
            raise ScenarioConfigError(
                f"{label}: account {row.code} must have exactly one of "
                f"debit/credit nonzero (debit={row.debit}, credit={row.credit})"
            )
        if row.code in codes:
            raise ScenarioConfigError(
                f"{label}: account {row.code} appears more than once"
            )
        codes.add(row.code)

    if not scenario.vat_rows:
        raise ScenarioConfigError(f"{label}: no VAT-flagged row")
