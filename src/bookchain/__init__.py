"""bookchain - a hash-linked ledger of book checkouts.

Every checkout submitted over HTTP becomes a block that commits to the hash
of the block before it.  Changing any recorded checkout breaks the chain of
hashes from that point on, so tampering is detectable by re-validation.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
``server.py`` and ``health.py`` import ``__version__`` from here.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ---------------------------------------------------------------------------
# Package version - read from pyproject.toml via importlib.metadata.
#
# If the package is imported without being installed we fall back to the
# version string below so the application can still start.
# ---------------------------------------------------------------------------
try:
    __version__: str = version("bookchain")
except PackageNotFoundError:
    __version__ = "0.1.0"
