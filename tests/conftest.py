"""Shared pytest fixtures."""

import pytest

from blogrefresh.config import ConfigModel

from tests.fixtures.doubles import InMemoryArticleStore


@pytest.fixture
def store() -> InMemoryArticleStore:
    return InMemoryArticleStore()


@pytest.fixture
def config() -> ConfigModel:
    return ConfigModel(search={"search_url": "https://search.test/html/?q={query}"})
