"""
Shared fixtures: a key manager with two keys, a fake node that knows them,
and clients wired to both.
"""

import pytest

from helpers import mk_client, mk_iris_client, mk_key_manager, mk_node


@pytest.fixture(scope="session")
def key_manager():
    """Key manager holding ``alice`` and ``bob``; shared, tests must not mutate it."""
    return mk_key_manager()


@pytest.fixture
def node(key_manager):
    return mk_node(key_manager)


@pytest.fixture
def client(node, key_manager):
    """AbstractClient with default gas 20000, fee 0.6iris and sync mode."""
    return mk_client(node, key_manager)


@pytest.fixture
def iris_client(node, key_manager):
    return mk_iris_client(node, key_manager)
