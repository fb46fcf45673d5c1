"""The in-memory checkout chain.

:class:`Blockchain` owns the ordered block sequence.  It is created with a
genesis block and is only ever extended through :meth:`Blockchain.append`
or :meth:`Blockchain.append_block`, both of which validate the candidate
against the current tail before committing it.

Locking strategy:
    One :class:`threading.Lock` per chain guards the whole
    read-tail / build / validate / commit sequence, so two concurrent
    appends can never both extend the same tail.  Reads
    (:meth:`snapshot`, :meth:`tail`, ``len()``) take the same lock and
    return immutable values, so callers always see a consistent
    point-in-time view.  Nothing under the lock performs I/O.

Lifetime:
    The chain lives in process memory only.  The API creates one per
    application in :func:`~bookchain.api.server.create_app`; it is lost when
    the process exits.
"""

from __future__ import annotations

import logging
import threading

from bookchain.chain.block import Clock, create_block, genesis_block
from bookchain.chain.types import AppendResult, Block, ChainVerifyResult, CheckoutRecord
from bookchain.chain.validation import validate_block, verify_chain

logger = logging.getLogger(__name__)


class Blockchain:
    """Append-only, hash-linked sequence of checkout blocks.

    Args:
        enforce_monotonic_timestamps: Reject candidates whose timestamp is
            earlier than the tail's.  Off by default.
        clock: Optional time source for block timestamps (tests).

    Example::

        chain = Blockchain()
        result = chain.append(CheckoutRecord("b1", "alice", "2024-01-01T00:00:00Z"))
        if not result.success:
            logger.warning("rejected: %s", result.reason.value)
    """

    def __init__(
        self,
        *,
        enforce_monotonic_timestamps: bool = False,
        clock: Clock | None = None,
    ) -> None:
        self._enforce_monotonic_timestamps = enforce_monotonic_timestamps
        self._clock = clock
        self._lock = threading.Lock()
        self._blocks: list[Block] = [genesis_block(clock=clock)]
        logger.debug("chain: genesis block %s", self._blocks[0].hash)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def enforce_monotonic_timestamps(self) -> bool:
        return self._enforce_monotonic_timestamps

    def append(self, payload: CheckoutRecord) -> AppendResult:
        """Build a block for ``payload`` on top of the tail and commit it.

        The candidate is built and validated while the lock is held, so the
        tail it was derived from is still the tail when it is committed.

        Returns:
            :class:`~bookchain.chain.types.AppendResult`.  On rejection the
            chain is left exactly as it was.

        Raises:
            PayloadSerializationError: If ``payload`` cannot be serialised.
        """
        with self._lock:
            candidate = create_block(self._blocks[-1], payload, clock=self._clock)
            return self._commit_locked(candidate)

    def append_block(self, candidate: Block) -> AppendResult:
        """Validate a caller-constructed block against the tail and commit it."""
        with self._lock:
            return self._commit_locked(candidate)

    def snapshot(self) -> tuple[Block, ...]:
        """Return the full chain, genesis first, as an immutable tuple."""
        with self._lock:
            return tuple(self._blocks)

    def tail(self) -> Block:
        """Return the most recently appended block."""
        with self._lock:
            return self._blocks[-1]

    def verify(self) -> ChainVerifyResult:
        """Re-validate every block of a consistent snapshot."""
        return verify_chain(
            self.snapshot(),
            enforce_monotonic_timestamps=self._enforce_monotonic_timestamps,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _commit_locked(self, candidate: Block) -> AppendResult:
        """Validate ``candidate`` against the tail; append it if valid.

        Caller must hold ``self._lock``.
        """
        tail = self._blocks[-1]
        reason = validate_block(
            candidate,
            tail,
            enforce_monotonic_timestamps=self._enforce_monotonic_timestamps,
        )
        if reason is not None:
            logger.warning(
                "chain: rejected block at position %d (tail %d): %s",
                candidate.position,
                tail.position,
                reason.value,
            )
            return AppendResult(block=candidate, success=False, reason=reason)

        self._blocks.append(candidate)
        logger.debug("chain: appended block %d %s", candidate.position, candidate.hash)
        return AppendResult(block=candidate, success=True)
