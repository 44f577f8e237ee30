import pytest

from kotoba.config import Config
from kotoba.state import AppState


@pytest.fixture(name="config")
def config_fixture():
    return Config()


@pytest.fixture(name="state")
def state_fixture(config):
    return AppState.from_config(config)
