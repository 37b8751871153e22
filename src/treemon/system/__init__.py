"""Process tree sampling and host introspection."""
from .host import HostIntrospector
from .process_tree import (
    SENTINEL_PID,
    NoChildren,
    ProcessHandle,
    ProcessSource,
    PsutilProcessSource,
    walk_tree,
)
from .sampler import ResourceSampler
from .segment import SegmentStats, SegmentStore
from .server import ServerIntrospector, StaticServerInfo

__all__ = [
    "HostIntrospector",
    "NoChildren",
    "ProcessHandle",
    "ProcessSource",
    "PsutilProcessSource",
    "ResourceSampler",
    "SENTINEL_PID",
    "SegmentStats",
    "SegmentStore",
    "ServerIntrospector",
    "StaticServerInfo",
    "walk_tree",
]
