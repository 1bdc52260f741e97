from unittest.mock import MagicMock

import pytest

from managed_wait import ReentrancyCounter, WaitConfig


@pytest.fixture
def driver():
    return MagicMock(name='driver')


@pytest.fixture
def counter():
    return ReentrancyCounter()


@pytest.fixture
def fast_config():
    """Configuración con sondeo rápido para no alargar las pruebas."""

    return WaitConfig(timeout=1, poll_frequency=0.01, implicit_timeout=30)
