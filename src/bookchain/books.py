"""Book records for the ``POST /new`` endpoint.

A book's ID is derived, not assigned: it is the MD5 hex digest of the ISBN
concatenated with the publish date.  The same book submitted twice gets the
same ID.  MD5 is used as a stable identifier here, not for integrity; the
chain itself uses SHA-256.

Books are not stored and are not recorded on the chain; clients use the
returned ``id`` as the ``book_id`` of later checkouts.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Book:
    """Book metadata.  ``id`` is empty until :func:`register_book` fills it."""

    title: str
    author: str
    publish_date: str
    isbn: str
    id: str = ""


def generate_book_id(isbn: str, publish_date: str) -> str:
    """Return the 32-char lowercase hex ID for a book."""
    return hashlib.md5(  # nosec B324 - identifier, not a security hash
        f"{isbn}{publish_date}".encode("utf-8"),
        usedforsecurity=False,
    ).hexdigest()


def register_book(book: Book) -> Book:
    """Return a copy of ``book`` with its derived ``id`` set."""
    return replace(book, id=generate_book_id(book.isbn, book.publish_date))
