"""Unit tests for chain value types (bookchain/chain/types.py)."""

import pytest

from bookchain.chain import (
    AppendResult,
    ChainVerifyResult,
    CheckoutRecord,
    RejectionReason,
    genesis_block,
)


@pytest.mark.unit
class TestCheckoutRecord:
    def test_defaults_are_empty_non_genesis(self) -> None:
        record = CheckoutRecord()

        assert record.to_dict() == {
            "book_id": "",
            "user": "",
            "checkout_date": "",
            "is_genesis": False,
        }

    def test_records_with_equal_fields_are_equal(self) -> None:
        assert CheckoutRecord("b1", "alice", "d") == CheckoutRecord("b1", "alice", "d")


@pytest.mark.unit
class TestBlock:
    def test_to_dict_nests_payload(self) -> None:
        block = genesis_block()

        data = block.to_dict()

        assert list(data) == ["position", "timestamp", "data", "previous_hash", "hash"]
        assert data["data"]["is_genesis"] is True


@pytest.mark.unit
class TestRejectionReason:
    @pytest.mark.parametrize("reason", list(RejectionReason))
    def test_every_reason_has_description(self, reason) -> None:
        assert reason.description

    def test_values_are_wire_strings(self) -> None:
        assert RejectionReason.LINEAGE_MISMATCH == "lineage_mismatch"
        assert RejectionReason("hash_mismatch") is RejectionReason.HASH_MISMATCH


@pytest.mark.unit
class TestResults:
    def test_append_result_unpacks(self) -> None:
        block = genesis_block()

        unpacked_block, ok = AppendResult(block=block, success=False)

        assert unpacked_block is block
        assert ok is False

    @pytest.mark.parametrize(
        "status,valid", [("ok", True), ("empty", False), ("broken", False)]
    )
    def test_verify_result_is_valid(self, status, valid) -> None:
        assert ChainVerifyResult(status=status, block_count=0).is_valid is valid
