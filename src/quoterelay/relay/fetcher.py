"""
Quote fetcher for the upstream provider's GLOBAL_QUOTE endpoint.

One call performs exactly one GET and either returns the latest traded price
or raises a FetchError subclass naming what went wrong. Nothing is cached.
"""

import logging
import threading
import math
import re
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, Field, ValidationError

from ..data.models import GlobalQuote, GlobalQuoteEnvelope, ProviderNotice
from .errors import (
    FetchDecodeError,
    FetchHTTPStatusError,
    FetchParseError,
    FetchSchemaError,
    FetchTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_URL = "https://www.alphavantage.co/query"
QUOTE_FUNCTION = "GLOBAL_QUOTE"
QUOTE_KEY = "Global Quote"
PRICE_KEY = "05. price"

# Plain ASCII decimal notation only: no locale separators, no inf/nan, no underscores.
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class ProviderConfig(BaseModel):
    """
    Connection settings for the quote provider.
    """

    base_url: str = Field(
        default=DEFAULT_PROVIDER_URL, description="Provider query endpoint"
    )
    api_key: str = Field(..., min_length=1, repr=False, description="API key")
    timeout: Optional[float] = Field(
        default=30.0, description="Request timeout in seconds"
    )

    model_config = {"frozen": True}


def parse_price(raw: str, symbol: Optional[str] = None) -> float:
    """
    Parse a provider price string into a float.

    Raises:
        FetchParseError: If the text is not a finite decimal number.
    """
    text = raw.strip()
    if not _DECIMAL_RE.fullmatch(text):
        raise FetchParseError(f"failed to parse price: {raw!r}", symbol)
    value = float(text)
    if not math.isfinite(value):
        raise FetchParseError(f"price out of range: {raw!r}", symbol)
    return value


def decode_quote(payload: Any, symbol: Optional[str] = None) -> float:
    """
    Extract the price from a decoded GLOBAL_QUOTE body.

    Args:
        payload: Result of JSON-decoding the response body
        symbol: Symbol the request was made for, attached to errors

    Returns:
        The parsed price

    Raises:
        FetchDecodeError: If the body is not a JSON object
        FetchSchemaError: If the quote object or its price field is missing
        FetchParseError: If the price is not a number
    """
    if not isinstance(payload, dict):
        raise FetchDecodeError(
            f"expected a JSON object, got {type(payload).__name__}", symbol
        )

    try:
        envelope = GlobalQuoteEnvelope.model_validate(payload)
    except ValidationError:
        message = "unexpected API response format"
        notice = ProviderNotice.model_validate(payload).text()
        if notice:
            message = f"{message}: {notice}"
        raise FetchSchemaError(message, field=QUOTE_KEY, symbol=symbol) from None

    try:
        quote = GlobalQuote.model_validate(envelope.quote)
    except ValidationError:
        raise FetchSchemaError(
            "price not found in API response", field=PRICE_KEY, symbol=symbol
        ) from None

    return parse_price(quote.price, symbol)


class QuoteFetcher:
    """
    Fetches the latest price for a symbol from the quote provider.

    The fetcher holds only its configuration and its HTTP sessions, so a single
    instance can serve many symbols, including from several threads. Without an
    injected session each thread gets its own requests.Session.
    """

    def __init__(
        self, config: ProviderConfig, session: Optional[requests.Session] = None
    ):
        self.config = config
        self._session = session
        self._local = threading.local()
        self.logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )

    @property
    def session(self) -> requests.Session:
        """The injected session, or one private to the calling thread."""
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def build_params(self, symbol: str) -> Dict[str, str]:
        return {
            "function": QUOTE_FUNCTION,
            "symbol": symbol,
            "apikey": self.config.api_key,
        }

    def fetch_price(self, symbol: str) -> float:
        """
        Fetch the latest traded price for ``symbol``.

        Raises:
            FetchError: One of its subclasses, depending on the failure
        """
        self.logger.debug(f"Fetching quote for {symbol}")
        try:
            response = self.session.get(
                self.config.base_url,
                params=self.build_params(symbol),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise FetchTransportError(f"failed to fetch stock data: {e}", symbol) from e

        with response:
            if not 200 <= response.status_code < 300:
                raise FetchHTTPStatusError(response.status_code, symbol)

            try:
                payload = response.json()
            except ValueError as e:
                raise FetchDecodeError(f"failed to parse response: {e}", symbol) from e
            except requests.RequestException as e:
                raise FetchTransportError(
                    f"failed to read response body: {e}", symbol
                ) from e

        return decode_quote(payload, symbol)

    def __call__(self, symbol: str) -> float:
        return self.fetch_price(symbol)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.config.base_url})"


def fetch_value(
    symbol: str, config: ProviderConfig, session: Optional[requests.Session] = None
) -> float:
    """Convenience function to fetch a single price."""
    return QuoteFetcher(config, session).fetch_price(symbol)
