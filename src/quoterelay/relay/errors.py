"""
Exception hierarchy for the relay cycle.

Fetch and publish errors are scoped to one symbol in one cycle; the scheduler
catches them per item and moves on. ConfigurationError is the only fatal one.
"""

from typing import Iterable, Optional


class RelayError(Exception):
    """
    Base class for per-item relay failures.
    """

    def __init__(self, message: str, symbol: Optional[str] = None):
        super().__init__(message)
        self.symbol = symbol


class FetchError(RelayError):
    """
    Raised when a quote could not be retrieved from the provider.
    """


class FetchTransportError(FetchError):
    """DNS, connection, timeout or TLS failure talking to the provider."""


class FetchHTTPStatusError(FetchError):
    """Provider answered with a non-success status code."""

    def __init__(self, status_code: int, symbol: Optional[str] = None):
        super().__init__(f"received non-2xx response: {status_code}", symbol)
        self.status_code = status_code


class FetchDecodeError(FetchError):
    """Provider body is not a JSON object."""


class FetchSchemaError(FetchError):
    """Decoded body does not have the expected shape."""

    def __init__(self, message: str, field: str, symbol: Optional[str] = None):
        super().__init__(message, symbol)
        self.field = field


class FetchParseError(FetchError):
    """Price string is not a finite decimal number."""


class PublishError(RelayError):
    """
    Raised when an update could not be delivered to the broker.
    """


class PublishSerializeError(PublishError):
    """Update record could not be encoded as JSON."""


class PublishTransportError(PublishError):
    """DNS, connection, timeout or TLS failure talking to the broker."""


class PublishHTTPStatusError(PublishError):
    """Broker answered with a non-success status code."""

    def __init__(self, status_code: int, symbol: Optional[str] = None):
        super().__init__(f"broker returned non-2xx response: {status_code}", symbol)
        self.status_code = status_code


class ConfigurationError(Exception):
    """
    Raised at startup when required configuration is missing or invalid.
    """

    def __init__(self, missing: Iterable[str], message: Optional[str] = None):
        self.missing = list(missing)
        super().__init__(
            message or f"Missing required configuration: {', '.join(self.missing)}"
        )
