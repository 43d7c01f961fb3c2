"""
Broker publisher: delivers one UpdateRecord as a JSON POST.

Each call makes exactly one request. There is no retry, batching or
idempotency key; a record that fails to deliver is dropped by the caller.
"""

import json
import logging
import threading
from typing import Optional

import requests
from pydantic import BaseModel, Field

from ..data.models import UpdateRecord
from .errors import PublishHTTPStatusError, PublishSerializeError, PublishTransportError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class BrokerConfig(BaseModel):
    """
    Destination settings for the downstream broker.
    """

    url: str = Field(..., min_length=1, description="Broker endpoint URL")
    timeout: Optional[float] = Field(
        default=30.0, description="Request timeout in seconds"
    )

    model_config = {"frozen": True}


def encode_record(record: UpdateRecord) -> bytes:
    """
    Serialize a record to the compact JSON body the broker expects.

    Raises:
        PublishSerializeError: If the record cannot be represented as JSON
    """
    try:
        body = json.dumps(
            record.to_payload(), separators=(",", ":"), allow_nan=False
        )
    except (TypeError, ValueError) as e:
        raise PublishSerializeError(
            f"failed to serialize stock update: {e}", record.symbol
        ) from e
    return body.encode("utf-8")


class BrokerPublisher:
    """
    Posts update records to the configured broker URL.

    Without an injected session each thread gets its own requests.Session.
    """

    def __init__(self, config: BrokerConfig, session: Optional[requests.Session] = None):
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

    def publish(self, record: UpdateRecord) -> None:
        """
        Send ``record`` to the broker.

        Raises:
            PublishSerializeError: If the record cannot be encoded
            PublishTransportError: If the request could not be completed
            PublishHTTPStatusError: If the broker answers outside 2xx
        """
        body = encode_record(record)
        self.logger.debug(f"Posting {len(body)} bytes for {record.symbol}")

        try:
            response = self.session.post(
                self.config.url,
                data=body,
                headers=JSON_HEADERS,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise PublishTransportError(
                f"failed to send stock update: {e}", record.symbol
            ) from e

        with response:
            if not 200 <= response.status_code < 300:
                raise PublishHTTPStatusError(response.status_code, record.symbol)

    def __call__(self, record: UpdateRecord) -> None:
        self.publish(record)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(url={self.config.url})"


def publish(
    record: UpdateRecord,
    destination: str,
    timeout: Optional[float] = 30.0,
    session: Optional[requests.Session] = None,
) -> None:
    """Convenience function to publish a single record to ``destination``."""
    BrokerPublisher(BrokerConfig(url=destination, timeout=timeout), session).publish(
        record
    )
