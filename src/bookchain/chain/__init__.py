"""Chain package - the hash-linked checkout ledger.

Public surface
--------------
- :class:`Blockchain`          - owned, lock-protected block sequence.
- :class:`CheckoutRecord`      - the payload recorded in each block.
- :class:`Block`               - one immutable chain entry.
- :class:`AppendResult`        - outcome of an append (block, success, reason).
- :class:`RejectionReason`     - why a candidate block was refused.
- :class:`ChainVerifyResult`   - outcome of a full-chain re-validation.
- :func:`compute_block_hash`   - the block content hash.
- :func:`create_block`, :func:`genesis_block` - block construction.
- :func:`validate_block`, :func:`is_valid_block`, :func:`verify_chain`.
- :exc:`ChainError`, :exc:`PayloadSerializationError`.

Usage example
-------------
::

    from bookchain.chain import Blockchain, CheckoutRecord

    chain = Blockchain()
    block, ok = chain.append(
        CheckoutRecord(book_id="b1", user="alice", checkout_date="2024-01-01T00:00:00Z")
    )
    assert ok and block.previous_hash == chain.snapshot()[0].hash
"""

from bookchain.chain.block import create_block, genesis_block
from bookchain.chain.errors import ChainError, PayloadSerializationError
from bookchain.chain.hasher import compute_block_hash, hash_block
from bookchain.chain.ledger import Blockchain
from bookchain.chain.types import (
    AppendResult,
    Block,
    ChainVerifyResult,
    CheckoutRecord,
    RejectionReason,
)
from bookchain.chain.validation import is_valid_block, validate_block, verify_chain

__all__ = [
    "AppendResult",
    "Block",
    "Blockchain",
    "ChainError",
    "ChainVerifyResult",
    "CheckoutRecord",
    "PayloadSerializationError",
    "RejectionReason",
    "compute_block_hash",
    "create_block",
    "genesis_block",
    "hash_block",
    "is_valid_block",
    "validate_block",
    "verify_chain",
]
