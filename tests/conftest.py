import pytest

from camelsim.engine.scenario import GameScenario


@pytest.fixture
def scenario():
    """Factory fixture to create scenarios."""

    def _builder(stacks=None, **kwargs):
        return GameScenario(stacks, **kwargs)

    return _builder
