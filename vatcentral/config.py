"""
Configuration management for VATCENTRAL.

Handles global configuration settings such as the numeric tolerances used
when grading journal entries and the currency used for display.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class VATConfig:
    """
    Global configuration for VATCENTRAL grading and reporting.

    Attributes:
        numeric_tolerance: Maximum absolute difference for considering
                          numeric values equal in balance checks and for
                          treating the net VAT position as zero.
                          Default: 0.01 (one cent).
        amount_tolerance: Looser tolerance applied when comparing the
                         centralizing amount to the expected net position,
                         absorbing rounding from intermediate sums.
                         Default: 0.1.
        default_currency: The currency symbol used for display.
                         Default: "EUR".
    """

    numeric_tolerance: float = 0.01
    amount_tolerance: float = 0.1
    default_currency: str = "EUR"

    def is_zero(self, value: float) -> bool:
        """
        Check if a numeric value is effectively zero within tolerance.

        Args:
            value: The numeric value to check.

        Returns:
            True if abs(value) <= numeric_tolerance, False otherwise.
        """
        return abs(value) <= self.numeric_tolerance

    def is_balanced(self, difference: float) -> bool:
        """
        Check if a debit/credit difference represents a balanced entry.

        The comparison is strict: a gap equal to the tolerance is
        already an imbalance.

        Args:
            difference: Absolute gap between total debit and total credit.

        Returns:
            True if the gap is below numeric_tolerance.
        """
        return abs(difference) < self.numeric_tolerance

    def amounts_match(self, actual: float, expected: float) -> bool:
        """
        Check whether a booked amount matches the expected amount.

        Args:
            actual: Amount booked by the learner.
            expected: Amount required by the scenario.

        Returns:
            True if the amounts differ by less than amount_tolerance.
        """
        return abs(actual - expected) < self.amount_tolerance

    def format_amount(self, amount: float) -> str:
        """Format an amount with two decimals and the currency symbol."""
        return f"{amount:,.2f} {self.default_currency}"


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, sets log level to DEBUG. Otherwise, INFO.
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if verbose:
        logger.debug("Verbose logging enabled")


# Global default configuration instance
default_config = VATConfig()
