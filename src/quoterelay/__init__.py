"""
quoterelay: periodic quote relay from a market data provider to a broker.

Subpackages
-----------
- data:     Update record and provider response models
- relay:    Fetcher, publisher and the fixed-interval scheduler
- plugins:  CLI commands discovered by ``quoterelay.cli``
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version(__name__)
except PackageNotFoundError:  # local editable install
    __version__ = "0.0.0-dev"

__all__ = [
    "data",
    "relay",
]

from . import data, relay
