"""Wire models exchanged with the telemetry collector."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

PROTOCOL_VERSION = 2


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SegmentSection(_WireModel):
    """Segment statistics snapshot embedded in a report."""

    seconds: int = Field(0, ge=0)
    seconds_hibe: int = Field(0, ge=0, alias="secondsHibe")
    cpu_usage: float = Field(0.0, ge=0.0, alias="cpuUsage")
    mem_usage: float = Field(0.0, ge=0.0, alias="memUsage")
    player_sec: int = Field(0, ge=0, alias="playerSec")
    pre_term: bool = Field(False, alias="preTerm")


class InstanceSection(_WireModel):
    id: str = ""
    version: str = ""
    uptime: int = Field(0, ge=0)
    allow_suspend: bool = Field(False, alias="allowSuspend")
    segment: SegmentSection = Field(default_factory=SegmentSection)


class MachineSection(_WireModel):
    """Host facts. Lookup failures are encoded as "" or -1."""

    os: str = ""
    arch: str = ""
    java_version: str = Field("", alias="javaVersion")
    cpu_model: str = Field("", alias="cpuModel")
    cpu_vendor: str = Field("", alias="cpuVendor")
    cores_instance: int = Field(-1, alias="coresInstance")
    cores_sys: int = Field(-1, alias="coresSys")
    mem: int = -1


class ServerSection(_WireModel):
    uptime: int = Field(0, ge=0)
    version: str = ""
    protocol: int = 0


class TelemetryRequest(_WireModel):
    """Report POSTed to the collector once per cycle."""

    protv: int = PROTOCOL_VERSION
    instance: InstanceSection = Field(default_factory=InstanceSection)
    machine: MachineSection = Field(default_factory=MachineSection)
    server: ServerSection = Field(default_factory=ServerSection)

    def to_wire(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class VersionInfo(_WireModel):
    official: str = ""
    dev: str = ""


class TelemetryResponse(_WireModel):
    """Collector reply. Unknown keys are dropped, missing keys default."""

    result: str = ""
    version: VersionInfo = Field(default_factory=VersionInfo)
    messages: List[str] = Field(default_factory=list)
