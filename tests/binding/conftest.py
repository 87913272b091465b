"""Helpful fixtures for testing ormy.binding functionality."""

from ormy.binding import Ormy

import pytest

from tests.binding.mocks import MockConnectionPool


@pytest.fixture()
def ormy_and_pool(request):
    """Fixture that yields an Ormy facade (and its MockConnectionPool) initialized with a set of mock cursors.

    .. note::
        Can use the `indirect` parametrize functionality in fixture to specify the mocked results.
    """
    cursor_stack = []
    if hasattr(request, "param"):
        cursor_stack = request.param
    pool = MockConnectionPool(cursor_stack)
    ormy = Ormy(pool)
    yield ormy, pool
    pool.dispose()
