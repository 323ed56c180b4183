"""Shared fixtures."""

import pytest

from fakes import FakeFeedSource, FakeStore, make_items


@pytest.fixture
def feed_source():
    return FakeFeedSource(make_items("us", 2))


@pytest.fixture
def store():
    return FakeStore()
