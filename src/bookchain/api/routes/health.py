"""Health endpoint.

Provides ``/health`` (liveness check with the current chain length).

The version string is read from ``bookchain.__version__`` which is
resolved at import time via ``importlib.metadata``.
"""

from fastapi import APIRouter

from bookchain import __version__
from bookchain.api.models import HealthResponse
from bookchain.chain import Blockchain


def router(blockchain: Blockchain) -> APIRouter:
    """Build the health router."""
    api = APIRouter()

    @api.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(status="ok", version=__version__, blocks=len(blockchain))

    return api
