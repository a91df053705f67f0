import pytest

from vector3.settings import reset_settings


@pytest.fixture(autouse=True)
def default_settings():
    reset_settings()
    yield
    reset_settings()
