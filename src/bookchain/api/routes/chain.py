"""Chain endpoints: read the chain, record checkouts, verify integrity.

Handlers that touch the chain are plain ``def`` functions, so FastAPI runs
them in its worker thread pool.  Concurrent requests therefore reach the
shared :class:`~bookchain.chain.Blockchain` from several threads; its
internal lock serialises appends and gives reads a consistent snapshot.

Status mapping for ``POST /``:
    200 - block appended; body is :class:`~bookchain.api.models.AppendResponse`
    409 - candidate rejected; ``detail`` is a
          :class:`~bookchain.api.models.RejectionDetail`
    422 - malformed request body (pydantic validation)
    500 - payload could not be serialised (see the app exception handler)
"""

import logging

from fastapi import APIRouter, HTTPException, status

from bookchain.api.models import (
    AppendResponse,
    BlockModel,
    ChainVerifyResponse,
    CheckoutRequest,
    RejectionDetail,
)
from bookchain.chain import Blockchain

logger = logging.getLogger(__name__)


def router(blockchain: Blockchain) -> APIRouter:
    """Build the chain router bound to ``blockchain``."""
    api = APIRouter()

    @api.get("/", response_model=list[BlockModel])
    def get_chain():
        """Return every block, genesis first."""
        return [BlockModel.from_block(block) for block in blockchain.snapshot()]

    @api.post("/", response_model=AppendResponse)
    def write_block(request: CheckoutRequest):
        """
        Record a checkout as a new block at the tail of the chain.

        The block is built from the current tail and validated before it is
        committed.  A rejected candidate leaves the chain unchanged and is
        reported with its reason rather than dropped.
        """
        result = blockchain.append(request.to_record())

        if not result.success:
            reason = result.reason
            detail = RejectionDetail(
                reason=reason.value if reason is not None else "rejected",
                message=reason.description if reason is not None else "block was not appended",
                position=result.block.position,
            )
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail.model_dump())

        logger.info(
            "chain: recorded checkout of %r by %r at position %d",
            request.book_id,
            request.user,
            result.block.position,
        )
        return AppendResponse(success=True, block=BlockModel.from_block(result.block))

    @api.get("/tail", response_model=BlockModel)
    def get_tail():
        """Return the most recently appended block."""
        return BlockModel.from_block(blockchain.tail())

    @api.get("/verify", response_model=ChainVerifyResponse)
    def verify():
        """Re-validate the entire chain from genesis."""
        result = blockchain.verify()
        if not result.is_valid:
            logger.error("chain: verification failed: %s", result.error_detail)
        return ChainVerifyResponse.from_result(result)

    return api
