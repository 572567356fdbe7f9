import pytest
from unittest.mock import MagicMock, patch

from evaporative_cooling.utils.resource_limits import available_processors, resolve_thread_count


@pytest.fixture(autouse=True)
def four_processors():
    with patch('evaporative_cooling.utils.resource_limits.psutil.cpu_count', return_value=4):
        yield


@pytest.mark.parametrize("requested, expected", [(0, 4), (-1, 4), (1, 1), (3, 3), (4, 4), (16, 4)])
def test_thread_hint_clamped(requested, expected):
    assert resolve_thread_count(requested, "Random Jungle") == expected


def test_thread_count_logged():
    logger = MagicMock()
    resolve_thread_count(2, "ReliefF", logger)
    logger.info.assert_called_once_with("ReliefF will use 2 of 4 available processors.")


def test_unknown_processor_count():
    with patch('evaporative_cooling.utils.resource_limits.psutil.cpu_count', return_value=None):
        assert available_processors() == 1
