"""
Shared pytest fixtures for VATCENTRAL tests.
"""

import pytest

from vatcentral.config import VATConfig
from vatcentral.journal import JournalState
from vatcentral.scenario import ScenarioCatalog
from tests.helpers import CENTRALIZERS, make_catalog, make_row, make_scenario


@pytest.fixture
def sample_config() -> VATConfig:
    """Default VATCENTRAL configuration."""
    return VATConfig(numeric_tolerance=0.01, amount_tolerance=0.1)


@pytest.fixture
def payable_rows() -> list:
    """
    Trial balance with a net VAT payable position.

        4110  VAT recoverable   debit   5200   (VAT)
        4510  VAT payable       credit  7800   (VAT)
        4400  Suppliers         credit 21000   (not VAT)

        Net position = 7800 - 5200 = 2600 payable
    """
    return [
        make_row("4110", debit=5200, name="VAT recoverable on purchases"),
        make_row("4510", credit=7800, name="VAT payable on sales"),
        make_row("4400", credit=21000, is_vat=False, name="Suppliers"),
    ]


@pytest.fixture
def payable_scenario(payable_rows):
    return make_scenario(payable_rows)


@pytest.fixture
def payable_catalog(payable_scenario):
    return make_catalog(payable_scenario)


@pytest.fixture
def journal(payable_scenario) -> JournalState:
    """Empty journal on the payable scenario."""
    return JournalState(scenario=payable_scenario, centralizers=list(CENTRALIZERS))


@pytest.fixture(scope="session")
def bundled_catalog() -> ScenarioCatalog:
    """The catalog shipped with the package."""
    return ScenarioCatalog.load()
