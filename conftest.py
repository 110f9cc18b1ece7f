import pytest

from infrastructure.container import container


@pytest.fixture(autouse=True)
def reset_container():
    """Every test starts with fresh adapters and services."""
    container.reset()
    yield
    container.reset()
