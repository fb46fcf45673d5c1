"""Typed exceptions for the chain package.

Conventions:
    - Caller-correctable outcomes (a candidate block that does not extend the
      tail) are *not* exceptions.  They are returned as a
      :class:`~bookchain.chain.types.RejectionReason` inside an
      :class:`~bookchain.chain.types.AppendResult` so the HTTP boundary can
      map them to a 409 response.
    - Programming defects (a payload that cannot be serialised) raise typed
      exceptions so the API boundary maps them to a deterministic HTTP 500.
"""

from __future__ import annotations


class ChainError(RuntimeError):
    """Base exception for chain-layer failures."""


class PayloadSerializationError(ChainError):
    """Raised when a checkout payload cannot be serialised for hashing.

    Well-typed :class:`~bookchain.chain.types.CheckoutRecord` values always
    serialise, so this signals a defect upstream.  It is never retried.

    Args:
        payload_repr: ``repr()`` of the offending payload, for the logs.
        cause: The underlying ``TypeError``/``ValueError`` from ``json``.
    """

    def __init__(self, payload_repr: str, cause: Exception | None = None) -> None:
        message = f"Failed to serialise payload {payload_repr}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.payload_repr = payload_repr
        self.cause = cause
