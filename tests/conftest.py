"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from swappool import InMemoryToken, Pool
from swappool.api.endpoints import Deployment, get_deployment
from swappool.api.main import app
from tests.helpers import make_pool


@pytest.fixture
def pool_and_tokens() -> tuple[Pool, InMemoryToken, InMemoryToken]:
    """Fresh empty pool with funded test accounts."""
    return make_pool()


@pytest.fixture
def pool(pool_and_tokens) -> Pool:
    return pool_and_tokens[0]


@pytest.fixture
def token0(pool_and_tokens) -> InMemoryToken:
    return pool_and_tokens[1]


@pytest.fixture
def token1(pool_and_tokens) -> InMemoryToken:
    return pool_and_tokens[2]


@pytest.fixture
def client(pool_and_tokens) -> Iterator[TestClient]:
    """API client bound to the fixture pool."""
    pool, token0, token1 = pool_and_tokens
    deployment = Deployment(pool=pool, tokens={token0.address: token0, token1.address: token1})
    app.dependency_overrides[get_deployment] = lambda: deployment
    yield TestClient(app)
    app.dependency_overrides.clear()
