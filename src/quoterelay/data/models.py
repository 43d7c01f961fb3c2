"""
Data models for the relay: the update record sent to the broker and the
narrow view of the provider's GLOBAL_QUOTE response.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import AwareDatetime, BaseModel, Field, StrictStr


def format_timestamp(value: datetime) -> str:
    """
    Render an aware datetime as RFC 3339 with second precision.

    UTC is written with the ``Z`` suffix, other offsets as ``+HH:MM``.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("timestamp must be timezone-aware")
    return value.isoformat(timespec="seconds").replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UpdateRecord(BaseModel):
    """
    One relayed observation: a symbol, its price and when it was observed.

    Field aliases are the broker's wire names, so a payload received by the
    broker validates straight back into a record.
    """

    symbol: str = Field(..., alias="stock_symbol", min_length=1)
    price: float = Field(..., allow_inf_nan=False)
    observed_at: AwareDatetime = Field(..., alias="timestamp")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def timestamp(self) -> str:
        return format_timestamp(self.observed_at)

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation, keys in the order the broker documents."""
        return {
            "stock_symbol": self.symbol,
            "price": self.price,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "UpdateRecord":
        return cls.model_validate(payload)

    @classmethod
    def observed_now(cls, symbol: str, price: float) -> "UpdateRecord":
        """Build a record stamped with the current wall-clock time."""
        return cls(symbol=symbol, price=price, observed_at=utc_now())

    def __str__(self) -> str:
        return f"{self.symbol} @ {self.price} ({self.timestamp})"


class GlobalQuote(BaseModel):
    """
    The ``Global Quote`` object. Only the price is consumed.
    """

    price: StrictStr = Field(..., alias="05. price")

    model_config = {"extra": "ignore"}


class GlobalQuoteEnvelope(BaseModel):
    """
    Top level of a GLOBAL_QUOTE response.

    When the provider throttles or rejects a request it omits the quote and
    sends one of the informational fields instead.
    """

    quote: Dict[str, Any] = Field(..., alias="Global Quote")

    model_config = {"extra": "ignore"}


class ProviderNotice(BaseModel):
    """Informational fields the provider sends in place of a quote."""

    note: Optional[Any] = Field(None, alias="Note")
    information: Optional[Any] = Field(None, alias="Information")
    error_message: Optional[Any] = Field(None, alias="Error Message")

    model_config = {"extra": "ignore"}

    def text(self) -> Optional[str]:
        for value in (self.error_message, self.information, self.note):
            if value:
                return str(value)
        return None
