from .mocks import FakeNode, ok_response, error_response, DEFAULT_BLOCK_TIME
from .factories import (
    PASSWORD,
    TEST_ITERATIONS,
    ALICE_SEED,
    BOB_SEED,
    mk_address,
    mk_key_manager,
    mk_node,
    mk_config,
    mk_client,
    mk_iris_client,
    mk_send,
    mk_sends,
    alice_and_bob,
)

__all__ = [
    "FakeNode",
    "ok_response",
    "error_response",
    "DEFAULT_BLOCK_TIME",
    "PASSWORD",
    "TEST_ITERATIONS",
    "ALICE_SEED",
    "BOB_SEED",
    "mk_address",
    "mk_key_manager",
    "mk_node",
    "mk_config",
    "mk_client",
    "mk_iris_client",
    "mk_send",
    "mk_sends",
    "alice_and_bob",
]
