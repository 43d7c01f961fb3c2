"""
quoterelay relay package: fetch, publish and schedule.
"""

from .errors import (  # noqa: F401
    ConfigurationError,
    FetchDecodeError,
    FetchError,
    FetchHTTPStatusError,
    FetchParseError,
    FetchSchemaError,
    FetchTransportError,
    PublishError,
    PublishHTTPStatusError,
    PublishSerializeError,
    PublishTransportError,
    RelayError,
)
from .fetcher import ProviderConfig, QuoteFetcher, fetch_value  # noqa: F401
from .publisher import BrokerConfig, BrokerPublisher, publish  # noqa: F401
from .scheduler import (  # noqa: F401
    CycleReport,
    ItemResult,
    ItemStatus,
    RelayScheduler,
    run,
)

__all__ = [
    "RelayError",
    "FetchError",
    "FetchTransportError",
    "FetchHTTPStatusError",
    "FetchDecodeError",
    "FetchSchemaError",
    "FetchParseError",
    "PublishError",
    "PublishSerializeError",
    "PublishTransportError",
    "PublishHTTPStatusError",
    "ConfigurationError",
    "ProviderConfig",
    "QuoteFetcher",
    "fetch_value",
    "BrokerConfig",
    "BrokerPublisher",
    "publish",
    "RelayScheduler",
    "CycleReport",
    "ItemResult",
    "ItemStatus",
    "run",
]
