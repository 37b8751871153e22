"""Interface to the collaborator that controls the managed server."""
from __future__ import annotations

from typing import Callable, Optional, Protocol

from ..config import ServerConfig


class ServerIntrospector(Protocol):
    """Read-only view of the managed server."""

    def uptime(self) -> int:
        ...

    def version(self) -> str:
        ...

    def protocol(self) -> int:
        ...


class StaticServerInfo:
    """Server facts taken from configuration plus an uptime accessor.

    Without an accessor the server is reported as not running (uptime 0).
    """

    def __init__(self, config: ServerConfig, uptime: Optional[Callable[[], int]] = None) -> None:
        self._config = config
        self._uptime = uptime

    def uptime(self) -> int:
        if self._uptime is None:
            return 0
        return max(0, int(self._uptime()))

    def version(self) -> str:
        return self._config.version

    def protocol(self) -> int:
        return self._config.protocol
