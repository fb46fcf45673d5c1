"""Unit tests for the block hasher (bookchain/chain/hasher.py).

Tests cover:
- Output shape (64 lowercase hex characters)
- Determinism for identical inputs
- Sensitivity to every input field
- The documented concatenation order
- hash_block recomputing from a block's own fields
"""

import hashlib
from dataclasses import replace

import pytest

from bookchain.chain import CheckoutRecord, compute_block_hash, hash_block

GENESIS_HASH = "0" * 64
PAYLOAD = CheckoutRecord(book_id="b1", user="alice", checkout_date="2024-01-01T00:00:00Z")


@pytest.mark.unit
class TestComputeBlockHash:
    """Tests for compute_block_hash."""

    def test_returns_64_char_lowercase_hex(self) -> None:
        digest = compute_block_hash(1, "2024-01-01T00:00:00Z", PAYLOAD.serialize(), GENESIS_HASH)

        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)

    def test_identical_inputs_give_identical_output(self) -> None:
        """Two calls over the same fields return the same hex string."""
        args = (1, "2024-01-01T00:00:00Z", PAYLOAD.serialize(), GENESIS_HASH)

        assert compute_block_hash(*args) == compute_block_hash(*args)

    @pytest.mark.parametrize(
        "changed",
        [
            (2, "2024-01-01T00:00:00Z", PAYLOAD.serialize(), GENESIS_HASH),
            (1, "2024-01-01T00:00:01Z", PAYLOAD.serialize(), GENESIS_HASH),
            (1, "2024-01-01T00:00:00Z", replace(PAYLOAD, user="mallory").serialize(), GENESIS_HASH),
            (1, "2024-01-01T00:00:00Z", PAYLOAD.serialize(), "1" * 64),
        ],
        ids=["position", "timestamp", "payload", "previous_hash"],
    )
    def test_any_field_change_changes_digest(self, changed) -> None:
        base = compute_block_hash(1, "2024-01-01T00:00:00Z", PAYLOAD.serialize(), GENESIS_HASH)

        assert compute_block_hash(*changed) != base

    def test_digest_is_sha256_of_concatenated_fields(self) -> None:
        """Fields are concatenated as position, timestamp, payload, previous_hash."""
        serialized = PAYLOAD.serialize()
        expected = hashlib.sha256(
            f"1{'2024-01-01T00:00:00Z'}{serialized}{GENESIS_HASH}".encode()
        ).hexdigest()

        assert compute_block_hash(1, "2024-01-01T00:00:00Z", serialized, GENESIS_HASH) == expected


@pytest.mark.unit
class TestCanonicalPayload:
    """Tests for the payload encoding that feeds the hasher."""

    def test_serialize_is_compact_and_ordered(self) -> None:
        assert PAYLOAD.serialize() == (
            '{"book_id":"b1","user":"alice",'
            '"checkout_date":"2024-01-01T00:00:00Z","is_genesis":false}'
        )

    def test_serialize_keeps_non_ascii(self) -> None:
        record = CheckoutRecord(book_id="b1", user="Zoë", checkout_date="2024")

        assert '"user":"Zoë"' in record.serialize()


@pytest.mark.unit
class TestHashBlock:
    """Tests for hash_block."""

    def test_reproduces_stored_hash(self, blockchain, alice_checkout) -> None:
        block, _ = blockchain.append(alice_checkout)

        assert hash_block(block) == block.hash

    def test_ignores_stored_hash(self, blockchain, alice_checkout) -> None:
        """A forged stored hash does not influence the recomputation."""
        block, _ = blockchain.append(alice_checkout)
        forged = replace(block, hash="f" * 64)

        assert hash_block(forged) == block.hash
