"""Running statistics for the current measurement segment."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Tuple

LOGGER = logging.getLogger(__name__)


@dataclass
class SegmentStats:
    """Totals accumulated since the segment was last reset."""

    seconds: int = 0
    seconds_hibe: int = 0
    cpu_usage: float = 0.0
    mem_usage: float = 0.0
    player_sec: int = 0


class SegmentStore:
    """Lock-guarded holder of the current :class:`SegmentStats`.

    The sampler writes usage into it, the report builder reads snapshots from
    it and only the segment owner calls :meth:`reset`.
    A seeded store copies ``stats`` and counts its averages as one sample
    already recorded.
    """

    def __init__(self, stats: SegmentStats | None = None) -> None:
        self._lock = threading.Lock()
        self._stats = replace(stats) if stats is not None else SegmentStats()
        self._samples = 0 if stats is None else 1

    def snapshot(self) -> SegmentStats:
        with self._lock:
            return replace(self._stats)

    def averages(self) -> Tuple[float, float]:
        """Return the current (cpu, mem) averages."""
        with self._lock:
            return self._stats.cpu_usage, self._stats.mem_usage

    def add_awake(self, seconds: int) -> None:
        _check_increment("seconds", seconds)
        with self._lock:
            self._stats.seconds += seconds

    def add_hibernating(self, seconds: int) -> None:
        _check_increment("seconds", seconds)
        with self._lock:
            self._stats.seconds_hibe += seconds

    def add_player_seconds(self, player_seconds: int) -> None:
        _check_increment("player_seconds", player_seconds)
        with self._lock:
            self._stats.player_sec += player_seconds

    def record_usage(self, cpu: float, mem: float) -> None:
        """Fold one tree sample into the running cpu/mem averages."""
        with self._lock:
            count = self._samples
            self._stats.cpu_usage = (self._stats.cpu_usage * count + cpu) / (count + 1)
            self._stats.mem_usage = (self._stats.mem_usage * count + mem) / (count + 1)
            self._samples = count + 1

    def reset(self) -> None:
        with self._lock:
            self._stats = SegmentStats()
            self._samples = 0
        LOGGER.debug("Segment stats reset")


def _check_increment(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} increment must be non-negative, got {value}")
