"""Block content hashing.

The hash binds a block to its exact content and to its predecessor.  The
input is the plain concatenation, in this fixed order and with no
separators, of:

1. ``position`` as a base-10 integer string,
2. ``timestamp``,
3. the canonical JSON of the payload (:meth:`CheckoutRecord.serialize`),
4. ``previous_hash``.

The concatenation is UTF-8 encoded and digested with SHA-256; the digest is
returned as 64 lowercase hex characters.

Example::

    digest = compute_block_hash(1, "2024-01-01T00:00:00Z", payload_json, genesis.hash)
    assert digest == compute_block_hash(1, "2024-01-01T00:00:00Z", payload_json, genesis.hash)
"""

from __future__ import annotations

import hashlib

from bookchain.chain.types import Block


def compute_block_hash(
    position: int,
    timestamp: str,
    serialized_payload: str,
    previous_hash: str,
) -> str:
    """Return the SHA-256 hex digest over a block's fields.

    Pure function: identical inputs always give identical output.

    Args:
        position:           Block position.
        timestamp:          Block timestamp string.
        serialized_payload: Canonical JSON of the checkout record.
        previous_hash:      Hash of the predecessor block (``""`` for genesis).

    Returns:
        64-character lowercase hex string.
    """
    material = f"{position}{timestamp}{serialized_payload}{previous_hash}"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def hash_block(block: Block) -> str:
    """Recompute the hash of ``block`` from its own fields.

    The stored ``block.hash`` is ignored; compare the result against it to
    check self-consistency.
    """
    return compute_block_hash(
        block.position,
        block.timestamp,
        block.data.serialize(),
        block.previous_hash,
    )
