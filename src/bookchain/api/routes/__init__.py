"""
Route registration entry point for the FastAPI application.

Each router module builds an ``APIRouter`` bound to the application's
:class:`~bookchain.chain.Blockchain`; ``register_routes`` wires them onto
the app.
"""

from fastapi import FastAPI

from bookchain.api.routes import books, chain, health
from bookchain.chain import Blockchain


def register_routes(app: FastAPI, blockchain: Blockchain) -> None:
    """Register all API routes with the FastAPI app."""
    app.include_router(health.router(blockchain))
    app.include_router(chain.router(blockchain))
    app.include_router(books.router())
