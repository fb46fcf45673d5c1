"""Block construction and the genesis bootstrap.

:func:`create_block` is the only way the application derives a new block:
it takes the predecessor's position and hash, stamps the current UTC time,
and hashes the result.  :func:`genesis_block` runs the same path from a
sentinel predecessor at position ``-1`` with an empty hash, which is what
puts the genesis block at position ``0`` with an empty ``previous_hash``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from bookchain.chain.errors import PayloadSerializationError
from bookchain.chain.hasher import compute_block_hash
from bookchain.chain.types import Block, CheckoutRecord

logger = logging.getLogger(__name__)

# A zero-argument callable returning an aware datetime.  Tests pass a fixed
# clock; production uses the wall clock.
Clock = Callable[[], datetime]

# RFC 3339, second precision, always UTC.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Predecessor of the genesis block.  Never stored in a chain.
SENTINEL_BLOCK = Block(
    position=-1,
    timestamp="",
    data=CheckoutRecord(),
    previous_hash="",
    hash="",
)

GENESIS_PAYLOAD = CheckoutRecord(is_genesis=True)


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Format an aware datetime as an RFC 3339 UTC string (``…Z``)."""
    return moment.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse a block timestamp back into an aware datetime.

    Raises:
        ValueError: If ``value`` is not ISO 8601 or carries no UTC offset.
    """
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        raise ValueError(f"timestamp {value!r} has no UTC offset")
    return moment


def create_block(
    predecessor: Block,
    payload: CheckoutRecord,
    *,
    clock: Clock | None = None,
) -> Block:
    """Build the block that extends ``predecessor`` with ``payload``.

    Args:
        predecessor: The block being extended (the chain tail, or
                     :data:`SENTINEL_BLOCK` for genesis).
        payload:     The checkout record to embed.
        clock:       Optional time source; defaults to :func:`utc_now`.

    Returns:
        A fully populated, immutable :class:`~bookchain.chain.types.Block`.

    Raises:
        PayloadSerializationError: If the payload cannot be serialised.
            This is a programming defect; it is logged and propagated.
    """
    position = predecessor.position + 1
    timestamp = format_timestamp((clock or utc_now)())

    try:
        serialized = payload.serialize()
    except PayloadSerializationError:
        logger.exception("chain: cannot serialise payload for block %d", position)
        raise

    return Block(
        position=position,
        timestamp=timestamp,
        data=payload,
        previous_hash=predecessor.hash,
        hash=compute_block_hash(position, timestamp, serialized, predecessor.hash),
    )


def genesis_block(*, clock: Clock | None = None) -> Block:
    """Return a new genesis block (position ``0``, empty ``previous_hash``)."""
    return create_block(SENTINEL_BLOCK, GENESIS_PAYLOAD, clock=clock)
