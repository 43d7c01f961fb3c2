"""
Development HTTP services for quoterelay.

`server` provides a stand-in broker that accepts relayed updates.
"""

from .server import app

__all__ = ["app"]
