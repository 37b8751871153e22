"""Telemetry report building and delivery."""
from .builder import ReportBuilder
from .client import TelemetryClient
from .models import (
    PROTOCOL_VERSION,
    InstanceSection,
    MachineSection,
    SegmentSection,
    ServerSection,
    TelemetryRequest,
    TelemetryResponse,
    VersionInfo,
)
from .notify import SentSignal
from .reader import read_response
from .reporter import TelemetryReporter

__all__ = [
    "PROTOCOL_VERSION",
    "InstanceSection",
    "MachineSection",
    "ReportBuilder",
    "SegmentSection",
    "SentSignal",
    "ServerSection",
    "TelemetryClient",
    "TelemetryReporter",
    "TelemetryRequest",
    "TelemetryResponse",
    "VersionInfo",
    "read_response",
]
