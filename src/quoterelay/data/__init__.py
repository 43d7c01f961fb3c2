"""
quoterelay data package: the update record and provider response models.
"""

from .models import (  # noqa: F401
    GlobalQuote,
    GlobalQuoteEnvelope,
    UpdateRecord,
    format_timestamp,
)

__all__ = [
    "UpdateRecord",
    "GlobalQuote",
    "GlobalQuoteEnvelope",
    "format_timestamp",
]
