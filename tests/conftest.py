"""
Shared pytest fixtures for the bookchain test suite.

This module provides fixtures that are automatically available to all test files:
- A deterministic clock so block timestamps are predictable
- Fresh Blockchain instances
- Sample checkout payloads
- FastAPI TestClient instances bound to a fresh chain

Every fixture is function scoped: no chain state leaks between tests.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from bookchain.api.server import create_app
from bookchain.chain import Blockchain, CheckoutRecord
from bookchain.config import ServerConfig

# ============================================================================
# CLOCK FIXTURES
# ============================================================================

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def make_clock(start: datetime = EPOCH, step_seconds: int = 1) -> Callable[[], datetime]:
    """
    Build a clock that advances ``step_seconds`` on every call.

    The first call returns ``start``.
    """
    state = {"now": start - timedelta(seconds=step_seconds)}

    def clock() -> datetime:
        state["now"] += timedelta(seconds=step_seconds)
        return state["now"]

    return clock


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """A ticking clock starting at 2024-01-01T00:00:00Z."""
    return make_clock()


# ============================================================================
# CHAIN FIXTURES
# ============================================================================


@pytest.fixture
def blockchain(fixed_clock) -> Blockchain:
    """A fresh chain holding only its genesis block."""
    return Blockchain(clock=fixed_clock)


@pytest.fixture
def alice_checkout() -> CheckoutRecord:
    return CheckoutRecord(book_id="b1", user="alice", checkout_date="2024-01-01T00:00:00Z")


@pytest.fixture
def bob_checkout() -> CheckoutRecord:
    return CheckoutRecord(book_id="b2", user="bob", checkout_date="2024-01-02T00:00:00Z")


@pytest.fixture
def populated_chain(blockchain, alice_checkout, bob_checkout) -> Blockchain:
    """A chain with genesis plus three checkouts (four blocks)."""
    blockchain.append(alice_checkout)
    blockchain.append(bob_checkout)
    blockchain.append(CheckoutRecord(book_id="b3", user="carol", checkout_date="2024-01-03"))
    return blockchain


# ============================================================================
# FASTAPI TEST CLIENT FIXTURES
# ============================================================================


@pytest.fixture
def test_client(blockchain) -> TestClient:
    """
    Create a FastAPI TestClient bound to the ``blockchain`` fixture.

    The app is built with default settings (docs enabled), so tests can
    inspect the chain directly through the fixture as well as over HTTP.

    Example:
        def test_append(test_client, blockchain):
            test_client.post("/", json={...})
            assert len(blockchain) == 2
    """
    app = create_app(blockchain=blockchain, cfg=ServerConfig())
    return TestClient(app)
