"""HTTP client that ships telemetry reports to the collector."""
from __future__ import annotations

import logging
import time
from typing import List, Optional

import requests
from pydantic import ValidationError

from .. import __version__
from ..config import AppConfig
from ..logging_config import WIRE_LOGGER_NAME
from ..errors import SerializationError, TransportError
from ..system.host import HostIntrospector
from .models import TelemetryRequest
from .notify import SentSignal

LOGGER = logging.getLogger(__name__)
WIRE_LOGGER = logging.getLogger(WIRE_LOGGER_NAME)

DEFAULT_TIMEOUT_SEC = 4.0
# small reads keep the deadline check close to each byte received
READ_CHUNK_SIZE = 1


class TelemetryClient:
    """POST reports to the collector with a bounded timeout."""

    def __init__(
        self,
        config: AppConfig,
        signal: Optional[SentSignal] = None,
        session: Optional[requests.Session] = None,
        host: Optional[HostIntrospector] = None,
    ) -> None:
        self._timeout = config.telemetry.timeout_sec or DEFAULT_TIMEOUT_SEC
        self._signal = signal or SentSignal()
        self._session = session or requests.Session()
        host = host or HostIntrospector()
        # format: treemon/x.y.z (linux) amd64
        self._user_agent = (
            f"{config.instance.software_name}/{__version__} ({host.os_name()}) {host.arch()}"
        )

    @property
    def signal(self) -> SentSignal:
        return self._signal

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def send(self, endpoint: str, request: TelemetryRequest) -> requests.Response:
        """Send ``request`` and return the raw response.

        The sent signal is published on every exit path, without blocking.

        Raises:
            SerializationError: if the request cannot be encoded.
            TransportError: on connection failure or timeout.
        """

        try:
            LOGGER.debug("Sending telemetry request to %s", endpoint)
            try:
                body = request.to_wire()
            except (ValidationError, TypeError, ValueError) as exc:
                raise SerializationError("send", str(exc)) from exc

            headers = {
                "User-Agent": self._user_agent,
                "Content-Type": "application/json",
            }

            WIRE_LOGGER.debug("client --> collector: %s", body.decode("utf-8"))
            deadline = time.monotonic() + self._timeout
            try:
                response = self._session.post(
                    endpoint, data=body, headers=headers, timeout=self._timeout, stream=True
                )
            except requests.RequestException as exc:
                raise TransportError("send", str(exc)) from exc

            self._read_body(response, deadline)
            return response
        finally:
            self._signal.publish()

    def _read_body(self, response: requests.Response, deadline: float) -> None:
        """Load the body into ``response`` before ``deadline`` passes.

        The timeout given to requests only bounds each socket read, so a
        collector dripping bytes is cut off here instead.
        """

        chunks: List[bytes] = []
        try:
            for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise TransportError(
                        "send", f"response not completed within {self._timeout}s"
                    )
        except requests.RequestException as exc:
            response.close()
            raise TransportError("send", str(exc)) from exc
        except TransportError:
            response.close()
            raise

        response._content = b"".join(chunks)
        response._content_consumed = True
        response.close()

    def close(self) -> None:
        self._session.close()
