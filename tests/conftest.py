import pytest

from speed_correction import CorrectionEngine, Model, get_table


@pytest.fixture
def engine() -> CorrectionEngine:
    return CorrectionEngine(get_table(Model.VantagePro2))


@pytest.fixture
def lite_engine() -> CorrectionEngine:
    return CorrectionEngine(get_table(Model.VantagePro2Lite))


@pytest.fixture(params=list(Model))
def any_engine(request) -> CorrectionEngine:
    return CorrectionEngine(get_table(request.param))
