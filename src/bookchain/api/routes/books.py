"""Book registration endpoint (``POST /new``)."""

import logging

from fastapi import APIRouter, status

from bookchain.api.models import BookRequest, BookResponse
from bookchain.books import register_book

logger = logging.getLogger(__name__)


def router() -> APIRouter:
    """Build the books router."""
    api = APIRouter()

    @api.post("/new", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
    async def new_book(request: BookRequest):
        """
        Return the submitted book with its derived ``id``.

        The ID is the MD5 hex digest of ``isbn + publish_date``.  Nothing is
        stored; clients use the ID as ``book_id`` in later checkouts.
        """
        book = register_book(request.to_book())
        logger.debug("books: registered %r as %s", book.title, book.id)
        return BookResponse.from_book(book)

    return api
