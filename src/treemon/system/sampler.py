"""Aggregate CPU and memory usage across the current process tree."""
from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

from ..errors import RootResolutionError, report_error
from .process_tree import (
    BRANCH_ERRORS,
    ProcessHandle,
    ProcessSource,
    PsutilProcessSource,
    walk_tree,
)
from .segment import SegmentStore

LOGGER = logging.getLogger(__name__)


class ResourceSampler:
    """Samples the tree rooted at the current process.

    On success :meth:`sample` returns the *sum* of cpu and memory percent over
    every process in the tree. On any failure it returns the averages already
    stored in the segment, so a transient read never disturbs the trend.
    """

    def __init__(
        self,
        segment: SegmentStore,
        source: Optional[ProcessSource] = None,
        root_pid: Optional[int] = None,
    ) -> None:
        self._segment = segment
        self._source = source or PsutilProcessSource()
        self._root_pid = root_pid

    def sample(self) -> Tuple[float, float]:
        totals = self._tree_totals()
        if totals is None:
            return self._segment.averages()
        return totals

    def sample_and_record(self) -> Tuple[float, float]:
        """Sample the tree and fold a successful result into the segment."""
        totals = self._tree_totals()
        if totals is None:
            return self._segment.averages()
        self._segment.record_usage(*totals)
        return totals

    def _tree_totals(self) -> Optional[Tuple[float, float]]:
        try:
            root = self._resolve_root()
        except RootResolutionError as exc:
            report_error(exc, LOGGER)
            return None

        tree = walk_tree(root, self._source)
        cpu_total = 0.0
        mem_total = 0.0
        for handle in tree:
            if handle.is_sentinel:
                LOGGER.debug("Process tree contains an unreadable branch, keeping averages")
                return None
            try:
                cpu_total += self._source.cpu_percent(handle.pid)
                mem_total += self._source.memory_percent(handle.pid)
            except BRANCH_ERRORS as exc:
                LOGGER.debug("Cannot sample pid %s: %s", handle.pid, exc)
                return None

        prune = getattr(self._source, "prune", None)
        if prune is not None:
            prune({handle.pid for handle in tree})

        return cpu_total, mem_total

    def _resolve_root(self) -> ProcessHandle:
        pid = self._root_pid if self._root_pid is not None else os.getpid()
        if pid <= 0:
            raise RootResolutionError("sample", f"invalid root pid {pid}")
        return ProcessHandle(pid)
