"""
Pydantic models for API requests and responses.

This module defines the data models used on the HTTP boundary. Pydantic
models provide:
- Automatic request validation (malformed bodies get a 422)
- Clear API documentation via FastAPI's automatic OpenAPI schema generation
- Serialization to/from JSON

The chain itself works with the frozen dataclasses in
:mod:`bookchain.chain.types`; the ``from_*`` / ``to_*`` helpers here convert
between the two so the core never depends on pydantic.

Models are organized into two categories:
1. Request models: Data sent FROM the client TO the server
2. Response models: Data sent FROM the server TO the client
"""

from pydantic import BaseModel

from bookchain.books import Book
from bookchain.chain import Block, ChainVerifyResult, CheckoutRecord

# ============================================================================
# REQUEST MODELS (Client → Server)
# ============================================================================


class CheckoutRequest(BaseModel):
    """
    A checkout to record on the chain.

    Attributes:
        book_id: Book identifier (typically the ``id`` returned by ``POST /new``)
        user: Who is checking the book out
        checkout_date: Checkout time as the client knows it; stored verbatim

    Any ``is_genesis`` field sent by a client is ignored: only the
    bootstrap block carries the genesis flag.
    """

    book_id: str
    user: str
    checkout_date: str

    def to_record(self) -> CheckoutRecord:
        """Convert to the chain payload with the genesis flag forced off."""
        return CheckoutRecord(
            book_id=self.book_id,
            user=self.user,
            checkout_date=self.checkout_date,
            is_genesis=False,
        )


class BookRequest(BaseModel):
    """
    Book metadata submitted to ``POST /new``.

    Attributes:
        title: Book title
        author: Book author
        publish_date: Publication date (part of the derived ID)
        isbn: ISBN (part of the derived ID)
    """

    title: str
    author: str
    publish_date: str
    isbn: str

    def to_book(self) -> Book:
        return Book(
            title=self.title,
            author=self.author,
            publish_date=self.publish_date,
            isbn=self.isbn,
        )


# ============================================================================
# RESPONSE MODELS (Server → Client)
# ============================================================================


class CheckoutModel(BaseModel):
    """Checkout payload as embedded in a block."""

    book_id: str
    user: str
    checkout_date: str
    is_genesis: bool


class BlockModel(BaseModel):
    """
    One block of the chain.

    Attributes:
        position: Zero-based position; genesis is 0
        timestamp: Block creation time (RFC 3339, UTC)
        data: The embedded checkout
        previous_hash: Hash of the preceding block (empty for genesis)
        hash: SHA-256 hex digest of this block's fields
    """

    position: int
    timestamp: str
    data: CheckoutModel
    previous_hash: str
    hash: str

    @classmethod
    def from_block(cls, block: Block) -> "BlockModel":
        return cls.model_validate(block.to_dict())


class AppendResponse(BaseModel):
    """Successful append: the block now at the tail of the chain."""

    success: bool
    block: BlockModel


class RejectionDetail(BaseModel):
    """
    Body of the ``detail`` field in a 409 rejection.

    Attributes:
        reason: Machine-readable reason, e.g. ``"lineage_mismatch"``
        message: Human-readable explanation
        position: Position the rejected candidate claimed
    """

    reason: str
    message: str
    position: int


class ChainVerifyResponse(BaseModel):
    """Result of re-validating the whole chain."""

    status: str
    block_count: int
    failed_position: int | None = None
    reason: str | None = None
    error_detail: str | None = None

    @classmethod
    def from_result(cls, result: ChainVerifyResult) -> "ChainVerifyResponse":
        return cls(
            status=result.status,
            block_count=result.block_count,
            failed_position=result.failed_position,
            reason=result.reason.value if result.reason is not None else None,
            error_detail=result.error_detail,
        )


class BookResponse(BaseModel):
    """A book with its derived ``id``."""

    id: str
    title: str
    author: str
    publish_date: str
    isbn: str

    @classmethod
    def from_book(cls, book: Book) -> "BookResponse":
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            publish_date=book.publish_date,
            isbn=book.isbn,
        )


class HealthResponse(BaseModel):
    """Liveness check."""

    status: str
    version: str
    blocks: int
