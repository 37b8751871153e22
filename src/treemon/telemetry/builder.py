"""Assemble telemetry reports from the data already held in memory."""
from __future__ import annotations

import logging
import time
from typing import Optional

from .. import __version__
from ..config import AppConfig
from ..errors import HostLookupError, report_error
from ..system.host import HostIntrospector
from ..system.segment import SegmentStore
from ..system.server import ServerIntrospector
from .models import (
    PROTOCOL_VERSION,
    InstanceSection,
    MachineSection,
    SegmentSection,
    ServerSection,
    TelemetryRequest,
)

LOGGER = logging.getLogger(__name__)


class ReportBuilder:
    """Builds a :class:`TelemetryRequest`; never performs network I/O."""

    def __init__(
        self,
        config: AppConfig,
        segment: SegmentStore,
        server: ServerIntrospector,
        host: Optional[HostIntrospector] = None,
        started_at: Optional[float] = None,
    ) -> None:
        self._config = config
        self._segment = segment
        self._server = server
        self._host = host or HostIntrospector()
        self._started_at = time.monotonic() if started_at is None else started_at

    def build(self, pre_term: bool = False) -> TelemetryRequest:
        """Return a complete request.

        Host lookup failures are non-blocking: the affected field keeps its
        sentinel value and the error is logged.
        """

        return TelemetryRequest(
            protv=PROTOCOL_VERSION,
            instance=self._instance_section(pre_term),
            machine=self._machine_section(),
            server=ServerSection(
                uptime=self._server.uptime(),
                version=self._server.version(),
                protocol=self._server.protocol(),
            ),
        )

    def uptime(self) -> int:
        return max(0, int(time.monotonic() - self._started_at))

    def _instance_section(self, pre_term: bool) -> InstanceSection:
        stats = self._segment.snapshot()
        return InstanceSection(
            id=self._config.instance.id,
            version=__version__,
            uptime=self.uptime(),
            allow_suspend=self._config.instance.allow_suspend,
            segment=SegmentSection(
                seconds=stats.seconds,
                seconds_hibe=stats.seconds_hibe,
                cpu_usage=stats.cpu_usage,
                mem_usage=stats.mem_usage,
                player_sec=stats.player_sec,
                pre_term=pre_term,
            ),
        )

    def _machine_section(self) -> MachineSection:
        machine = MachineSection(
            os=self._host.os_name(),
            arch=self._host.arch(),
            java_version=self._config.server.java_version,
            cores_instance=self._host.instance_cores(),
        )

        try:
            machine.cpu_model, machine.cpu_vendor = self._host.cpu_info()
        except HostLookupError as exc:
            report_error(exc, LOGGER)
            machine.cpu_model, machine.cpu_vendor = "", ""

        try:
            machine.cores_sys = self._host.system_cores()
        except HostLookupError as exc:
            report_error(exc, LOGGER)
            machine.cores_sys = -1

        try:
            machine.mem = self._host.total_memory()
        except HostLookupError as exc:
            report_error(exc, LOGGER)
            machine.mem = -1

        return machine
