"""Immutable value types for the checkout chain.

These frozen dataclasses are the records that flow between block
construction, validation, the :class:`~bookchain.chain.ledger.Blockchain`
and the HTTP boundary.  A block is never modified after it is built; a
"tampered" block in the tests is a *new* object produced with
:func:`dataclasses.replace`.

Wire names follow the JSON shape served by ``GET /``::

    {
      "position": 1,
      "timestamp": "2024-01-01T00:00:00Z",
      "data": {"book_id": "b1", "user": "alice",
               "checkout_date": "2024-01-01T00:00:00Z", "is_genesis": false},
      "previous_hash": "…",
      "hash": "…"
    }
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from bookchain.chain.errors import PayloadSerializationError


@dataclass(frozen=True)
class CheckoutRecord:
    """One book checkout - the payload embedded in a block.

    Attributes:
        book_id:       Identifier of the checked-out book.
        user:          Who checked the book out.
        checkout_date: Checkout time as supplied by the caller.  Stored
                       verbatim; the chain does not parse it.
        is_genesis:    ``True`` only for the bootstrap block's payload.
    """

    book_id: str = ""
    user: str = ""
    checkout_date: str = ""
    is_genesis: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the payload as a dict in canonical field order."""
        return {
            "book_id": self.book_id,
            "user": self.user,
            "checkout_date": self.checkout_date,
            "is_genesis": self.is_genesis,
        }

    def serialize(self) -> str:
        """Return the canonical JSON encoding fed to the block hasher.

        Compact separators and a fixed key order make the encoding stable:
        the same record always produces the same string.

        Raises:
            PayloadSerializationError: If a field holds a value ``json``
                cannot encode.  Only reachable when the dataclass was built
                with the wrong field types.
        """
        try:
            return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise PayloadSerializationError(repr(self), exc) from exc


@dataclass(frozen=True)
class Block:
    """A single entry in the chain.

    Attributes:
        position:      Zero-based index in the chain; genesis is ``0``.
        timestamp:     Block creation time, RFC 3339 UTC with ``Z`` suffix.
        data:          The embedded :class:`CheckoutRecord`.
        previous_hash: ``hash`` of the preceding block; empty for genesis.
        hash:          64-char lowercase hex SHA-256 over the fields above.
    """

    position: int
    timestamp: str
    data: CheckoutRecord
    previous_hash: str
    hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "timestamp": self.timestamp,
            "data": self.data.to_dict(),
            "previous_hash": self.previous_hash,
            "hash": self.hash,
        }


class RejectionReason(str, Enum):
    """Why a candidate block was refused.

    All reasons are caller-correctable: the candidate is rejected, the chain
    and the process carry on.
    """

    LINEAGE_MISMATCH = "lineage_mismatch"
    HASH_MISMATCH = "hash_mismatch"
    POSITION_MISMATCH = "position_mismatch"
    TIMESTAMP_REGRESSION = "timestamp_regression"
    GENESIS_INVALID = "genesis_invalid"

    @property
    def description(self) -> str:
        return _REASON_DESCRIPTIONS[self]


_REASON_DESCRIPTIONS: dict[RejectionReason, str] = {
    RejectionReason.LINEAGE_MISMATCH: (
        "previous_hash does not match the tail block's hash "
        "(stale or concurrently superseded submission)"
    ),
    RejectionReason.HASH_MISMATCH: (
        "stored hash does not match the hash recomputed from the block's fields"
    ),
    RejectionReason.POSITION_MISMATCH: (
        "position is not the tail position + 1 (out-of-order or duplicate submission)"
    ),
    RejectionReason.TIMESTAMP_REGRESSION: "timestamp is earlier than the tail block's timestamp",
    RejectionReason.GENESIS_INVALID: (
        "first block is not a well-formed genesis block "
        "(position 0, empty previous_hash, genesis payload)"
    ),
}


@dataclass(frozen=True)
class AppendResult:
    """Outcome of :meth:`~bookchain.chain.ledger.Blockchain.append`.

    Supports tuple unpacking as ``block, ok = result``.

    Attributes:
        block:   The committed block on success, or the rejected candidate.
        success: ``True`` when the chain was extended by ``block``.
        reason:  ``None`` on success, otherwise the first failed check.
    """

    block: Block
    success: bool
    reason: RejectionReason | None = None

    def __iter__(self) -> Iterator[Any]:
        yield self.block
        yield self.success


@dataclass(frozen=True)
class ChainVerifyResult:
    """Result of a full-chain re-validation by :func:`~bookchain.chain.validation.verify_chain`.

    Attributes:
        status: One of:
            - ``"ok"``     - genesis is well formed and every link holds.
            - ``"empty"``  - no blocks were supplied.
            - ``"broken"`` - at least one check failed.
        block_count:     Number of blocks inspected.
        failed_position: Index of the first block that failed, or ``None``.
        reason:          The failed check, or ``None``.
        error_detail:    Human-readable failure description, or ``None``.
    """

    status: Literal["ok", "empty", "broken"]
    block_count: int
    failed_position: int | None = None
    reason: RejectionReason | None = None
    error_detail: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.status == "ok"
