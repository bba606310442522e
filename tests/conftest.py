import pytest

from devlister.events import Category

from helpers import FakeTerminal


@pytest.fixture
def terminal():
    return FakeTerminal()


@pytest.fixture
def capacities():
    return {category: 2 for category in Category}
