"""One telemetry report cycle: build, send, read."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import AppConfig
from ..errors import BlockingError, report_error
from .builder import ReportBuilder
from .client import TelemetryClient
from .models import TelemetryResponse
from .reader import read_response

LOGGER = logging.getLogger(__name__)

ResponseConsumer = Callable[[TelemetryResponse], None]


class TelemetryReporter:
    """Runs report cycles; a failed cycle never affects the next one."""

    def __init__(
        self,
        config: AppConfig,
        builder: ReportBuilder,
        client: TelemetryClient,
        consumer: Optional[ResponseConsumer] = None,
    ) -> None:
        self._config = config
        self._builder = builder
        self._client = client
        self._consumer = consumer

    def report(self, pre_term: bool = False) -> Optional[TelemetryResponse]:
        if not self._config.telemetry.enabled:
            LOGGER.debug("Telemetry disabled, skipping report")
            return None

        try:
            request = self._builder.build(pre_term=pre_term)
        except Exception:
            LOGGER.exception("Could not build telemetry request, skipping cycle")
            return None

        try:
            raw = self._client.send(self._config.telemetry.endpoint, request)
            response = read_response(raw)
        except BlockingError as exc:
            report_error(exc, LOGGER)
            return None

        LOGGER.info("Telemetry report sent, collector result: %s", response.result or "-")
        for message in response.messages:
            LOGGER.info("Collector message: %s", message)

        if self._consumer is not None:
            try:
                self._consumer(response)
            except Exception:
                LOGGER.exception("Telemetry response consumer failed")
        return response
