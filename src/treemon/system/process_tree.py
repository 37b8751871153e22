"""Enumerate a process and all of its live descendants."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Protocol, Set

import psutil

LOGGER = logging.getLogger(__name__)

SENTINEL_PID = -1

# errors meaning "this branch could not be read"; anything else is a bug
BRANCH_ERRORS = (psutil.Error, OSError)


class NoChildren(Exception):
    """Raised by a process source when a process genuinely has no children.

    Sources may also just return an empty list; both mean zero children.
    """


@dataclass(frozen=True)
class ProcessHandle:
    """Opaque reference to one OS process."""

    pid: int

    @classmethod
    def sentinel(cls) -> "ProcessHandle":
        return cls(SENTINEL_PID)

    @property
    def is_sentinel(self) -> bool:
        return self.pid == SENTINEL_PID


class ProcessSource(Protocol):
    """Capability required to walk and sample a process tree."""

    def children(self, pid: int) -> List[int]:
        ...

    def cpu_percent(self, pid: int) -> float:
        ...

    def memory_percent(self, pid: int) -> float:
        ...


class PsutilProcessSource:
    """Process source backed by psutil.

    ``psutil.Process`` objects are cached per pid so that successive
    ``cpu_percent`` calls measure the interval since the previous sample.
    """

    def __init__(self) -> None:
        self._processes: Dict[int, psutil.Process] = {}

    def _process(self, pid: int) -> psutil.Process:
        proc = self._processes.get(pid)
        if proc is None or not proc.is_running():
            proc = psutil.Process(pid)
            self._processes[pid] = proc
        return proc

    def children(self, pid: int) -> List[int]:
        return [child.pid for child in self._process(pid).children()]

    def cpu_percent(self, pid: int) -> float:
        return float(self._process(pid).cpu_percent(interval=None))

    def memory_percent(self, pid: int) -> float:
        return float(self._process(pid).memory_percent())

    def prune(self, alive: Set[int]) -> None:
        """Forget cached processes that are no longer part of the tree."""
        for pid in list(self._processes):
            if pid not in alive:
                del self._processes[pid]


def walk_tree(root: ProcessHandle, source: ProcessSource) -> List[ProcessHandle]:
    """Return ``root`` followed by all of its descendants, depth first.

    A node whose children cannot be listed is replaced by a single sentinel
    handle and its branch is not descended into. The walk itself never fails.
    """

    tree: List[ProcessHandle] = []
    seen: Set[int] = set()
    stack: List[ProcessHandle] = [root]

    while stack:
        handle = stack.pop()
        if handle.pid in seen:
            continue
        seen.add(handle.pid)

        try:
            child_pids = source.children(handle.pid)
        except NoChildren:
            child_pids = []
        except BRANCH_ERRORS as exc:
            LOGGER.debug("Cannot list children of pid %s: %s", handle.pid, exc)
            tree.append(ProcessHandle.sentinel())
            continue

        tree.append(handle)
        # reversed so the first reported child is walked first
        stack.extend(ProcessHandle(pid) for pid in reversed(child_pids))

    return tree
