"""
FastAPI backend server for the checkout chain.

This module builds and runs the FastAPI application that exposes the chain
over HTTP. It sets up:
- Logging, from the ``[logging]`` config section
- CORS middleware
- The application's :class:`~bookchain.chain.Blockchain` (one per app)
- An exception handler that turns chain-layer defects into a JSON 500
- All API route endpoints

The server runs on port 3000 by default. If that port is taken,
``start_server`` scans 3000-3099 for a free one.
"""

import logging
import socket
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookchain import __version__
from bookchain.api.routes import register_routes
from bookchain.chain import Blockchain, ChainError
from bookchain.config import ServerConfig, config

logger = logging.getLogger(__name__)

# ============================================================================
# PORT CONFIGURATION
# ============================================================================

DEFAULT_PORT = 3000
PORT_RANGE_START = 3000
PORT_RANGE_END = 3099

# ============================================================================
# LOGGING
# ============================================================================

_LOG_FORMATS = {
    "simple": "%(levelname)s %(message)s",
    "detailed": "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
}


def configure_logging(level: str = "INFO", fmt: str = "detailed") -> None:
    """
    Configure root logging for the server process.

    Args:
        level: Log level name, e.g. "INFO" or "DEBUG". Unknown names fall
               back to INFO.
        fmt: "simple" or "detailed".
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=_LOG_FORMATS.get(fmt, _LOG_FORMATS["detailed"]),
        force=True,
    )


# ============================================================================
# APPLICATION FACTORY
# ============================================================================


def create_app(blockchain: Blockchain | None = None, cfg: ServerConfig | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        blockchain: Chain to serve. A fresh chain (genesis only) is created
                    when omitted, honouring ``cfg.chain`` settings.
        cfg: Configuration to use; defaults to the module-level ``config``.

    Returns:
        FastAPI app with routes registered. The chain is also reachable as
        ``app.state.blockchain``.
    """
    cfg = cfg or config
    if blockchain is None:
        blockchain = Blockchain(
            enforce_monotonic_timestamps=cfg.chain.enforce_monotonic_timestamps
        )

    docs_url = "/docs" if cfg.docs_should_be_enabled else None
    app = FastAPI(
        title="bookchain",
        description="Hash-linked ledger of book checkouts",
        version=__version__,
        docs_url=docs_url,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_url else None,
    )
    app.state.blockchain = blockchain

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.security.cors_origins,
        allow_credentials=cfg.security.cors_allow_credentials,
        allow_methods=cfg.security.cors_allow_methods,
        allow_headers=cfg.security.cors_allow_headers,
    )

    @app.exception_handler(ChainError)
    async def chain_error_handler(request: Request, exc: ChainError) -> JSONResponse:
        """Map chain-layer defects to a 500 with a stable body."""
        logger.exception("chain error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": str(exc),
                "path": str(request.url.path),
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    register_routes(app, blockchain)
    return app


# ============================================================================
# PORT DISCOVERY
# ============================================================================


def is_port_available(port: int, host: str = "0.0.0.0") -> bool:  # nosec B104
    """
    Check whether a TCP port can be bound on ``host``.

    Returns:
        True if binding succeeds, False if the port is in use.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(
    preferred_port: int = DEFAULT_PORT,
    host: str = "0.0.0.0",  # nosec B104
    range_start: int = PORT_RANGE_START,
    range_end: int = PORT_RANGE_END,
) -> int | None:
    """
    Find a free port, trying ``preferred_port`` first.

    The preferred port is checked once; the range is then scanned in order,
    skipping it.

    Returns:
        An available port, or None if every port in the range is in use.
    """
    if is_port_available(preferred_port, host):
        return preferred_port

    for port in range(range_start, range_end + 1):
        if port == preferred_port:
            continue
        if is_port_available(port, host):
            return port

    return None


# ============================================================================
# SERVER STARTUP
# ============================================================================


def start_server(
    host: str | None = None,
    port: int | None = None,
    auto_discover: bool = True,
) -> None:
    """
    Configure logging and run the API under uvicorn.

    Args:
        host: Interface to bind; defaults to ``config.server.host``.
        port: Port to bind; defaults to ``config.server.port``.
        auto_discover: If True and ``port`` is taken, use the next free port
                       in the 3000-3099 range.

    Raises:
        OSError: If no port is available.
    """
    import uvicorn

    host = host or config.server.host
    port = port or config.server.port

    configure_logging(config.logging.level, config.logging.format)

    if auto_discover:
        actual_port = find_available_port(port, host)
        if actual_port is None:
            raise OSError(
                f"No available port found in range {PORT_RANGE_START}-{PORT_RANGE_END}"
            )
        if actual_port != port:
            logger.warning("Port %d is in use, using %d instead", port, actual_port)
        port = actual_port

    logger.info("bookchain %s listening on %s:%d", __version__, host, port)
    uvicorn.run(create_app(), host=host, port=port, log_level=config.logging.level.lower())


# ============================================================================
# MODULE-LEVEL APPLICATION
# ============================================================================

# For ``uvicorn bookchain.api.server:app``.  Holds its own chain, created
# once at import time and kept for the life of the process.
app = create_app()
