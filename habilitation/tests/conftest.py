import pytest

from habilitation.core.engine import build_engine
from habilitation.grids.researcher.loaders import DEFAULT_DATA_ROOT


@pytest.fixture(scope="session")
def engine():
    return build_engine(DEFAULT_DATA_ROOT, "en")


@pytest.fixture(scope="session")
def engine_ar():
    return build_engine(DEFAULT_DATA_ROOT, "ar")


@pytest.fixture
def applicant():
    """Scenario A applicant: sciences, five teaching years, nothing declared yet."""
    return {
        "firstName": "Amar",
        "lastName": "Said",
        "specialization": "sciences",
        "teachingYears": 5,
    }
