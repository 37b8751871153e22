"""Host machine introspection used when building reports."""
from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Dict, Tuple

import psutil

from ..errors import ErrorCode, HostLookupError

CPUINFO_PATH = Path("/proc/cpuinfo")

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
}


class HostIntrospector:
    """Reads static facts about the machine the monitor runs on."""

    def __init__(self, cpuinfo_path: Path = CPUINFO_PATH) -> None:
        self._cpuinfo_path = cpuinfo_path

    def os_name(self) -> str:
        return platform.system().lower()

    def arch(self) -> str:
        machine = platform.machine().lower()
        return _ARCH_ALIASES.get(machine, machine)

    def cpu_info(self) -> Tuple[str, str]:
        """Return (model, vendor) of the first cpu.

        Raises:
            HostLookupError: when no cpu description is available.
        """
        try:
            fields = self._first_cpu_entry()
        except OSError as exc:
            processor = platform.processor()
            if not processor:
                raise HostLookupError(ErrorCode.GET_CPU_INFO, str(exc)) from exc
            return processor, ""

        model = fields.get("model name") or fields.get("model", "")
        return model, fields.get("vendor_id", "")

    def instance_cores(self) -> int:
        return os.cpu_count() or 1

    def system_cores(self) -> int:
        try:
            cores = psutil.cpu_count(logical=True)
        except (psutil.Error, OSError) as exc:
            raise HostLookupError(ErrorCode.GET_CORES, str(exc)) from exc
        if cores is None:
            raise HostLookupError(ErrorCode.GET_CORES, "cpu count undetermined")
        return cores

    def total_memory(self) -> int:
        try:
            return int(psutil.virtual_memory().total)
        except (psutil.Error, OSError) as exc:
            raise HostLookupError(ErrorCode.GET_MEMORY, str(exc)) from exc

    def _first_cpu_entry(self) -> Dict[str, str]:
        fields: Dict[str, str] = {}
        with self._cpuinfo_path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    if fields:
                        break
                    continue
                key, _, value = line.partition(":")
                fields.setdefault(key.strip(), value.strip())
        if not fields:
            raise OSError(f"no cpu entries in {self._cpuinfo_path}")
        return fields
