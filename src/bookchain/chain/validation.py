"""Candidate-block validation and full-chain verification.

:func:`validate_block` runs the acceptance checks for a block that claims to
extend ``tail``, in this order, stopping at the first failure:

1. lineage  - ``candidate.previous_hash == tail.hash``
2. content  - the hash recomputed from the candidate's fields equals
   ``candidate.hash`` (the stored value is never trusted)
3. ordering - ``candidate.position == tail.position + 1``
4. time     - only when ``enforce_monotonic_timestamps`` is set:
   ``candidate.timestamp >= tail.timestamp``

None of these functions mutate their arguments.
"""

from __future__ import annotations

from collections.abc import Sequence

from bookchain.chain.block import parse_timestamp
from bookchain.chain.hasher import hash_block
from bookchain.chain.types import Block, ChainVerifyResult, RejectionReason


def validate_block(
    candidate: Block,
    tail: Block,
    *,
    enforce_monotonic_timestamps: bool = False,
) -> RejectionReason | None:
    """Classify whether ``candidate`` may be appended after ``tail``.

    Returns:
        ``None`` if the candidate is acceptable, otherwise the
        :class:`~bookchain.chain.types.RejectionReason` of the first
        failed check.
    """
    if candidate.previous_hash != tail.hash:
        return RejectionReason.LINEAGE_MISMATCH
    if hash_block(candidate) != candidate.hash:
        return RejectionReason.HASH_MISMATCH
    if tail.position + 1 != candidate.position:
        return RejectionReason.POSITION_MISMATCH
    if enforce_monotonic_timestamps and _timestamp_regresses(candidate, tail):
        return RejectionReason.TIMESTAMP_REGRESSION
    return None


def is_valid_block(
    candidate: Block,
    tail: Block,
    *,
    enforce_monotonic_timestamps: bool = False,
) -> bool:
    """Boolean form of :func:`validate_block`."""
    return (
        validate_block(
            candidate, tail, enforce_monotonic_timestamps=enforce_monotonic_timestamps
        )
        is None
    )


def verify_chain(
    blocks: Sequence[Block],
    *,
    enforce_monotonic_timestamps: bool = False,
) -> ChainVerifyResult:
    """Re-validate an entire chain from genesis to tail.

    The first block must be a well-formed genesis block: position ``0``,
    empty ``previous_hash``, genesis-flagged payload, and a hash that
    matches its fields.  Every following block is checked against its
    predecessor with :func:`validate_block`.

    Because each block's hash covers its payload and every successor
    commits to that hash, altering any field of a non-tail block surfaces
    either as a hash mismatch on that block or as a lineage mismatch on
    the next one.

    Args:
        blocks: The chain, genesis first (e.g. ``Blockchain.snapshot()``).
        enforce_monotonic_timestamps: Also reject timestamp regressions.

    Returns:
        A :class:`~bookchain.chain.types.ChainVerifyResult`.
    """
    if not blocks:
        return ChainVerifyResult(status="empty", block_count=0)

    genesis = blocks[0]
    if (
        genesis.position != 0
        or genesis.previous_hash != ""
        or not genesis.data.is_genesis
        or hash_block(genesis) != genesis.hash
    ):
        return ChainVerifyResult(
            status="broken",
            block_count=len(blocks),
            failed_position=0,
            reason=RejectionReason.GENESIS_INVALID,
            error_detail=RejectionReason.GENESIS_INVALID.description,
        )

    for index in range(1, len(blocks)):
        reason = validate_block(
            blocks[index],
            blocks[index - 1],
            enforce_monotonic_timestamps=enforce_monotonic_timestamps,
        )
        if reason is not None:
            return ChainVerifyResult(
                status="broken",
                block_count=len(blocks),
                failed_position=index,
                reason=reason,
                error_detail=f"Block {index}: {reason.description}.",
            )

    return ChainVerifyResult(status="ok", block_count=len(blocks))


def _timestamp_regresses(candidate: Block, tail: Block) -> bool:
    # Unparseable or offset-less timestamps cannot be ordered; treat them as a regression.
    try:
        return parse_timestamp(candidate.timestamp) < parse_timestamp(tail.timestamp)
    except ValueError:
        return True
