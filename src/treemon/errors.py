"""Error types shared by the sampler and the telemetry client."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Identifiers for the failures the core can report."""

    GET_CPU_INFO = "get_cpu_info"
    GET_CORES = "get_cores"
    GET_MEMORY = "get_memory"
    ROOT_PROCESS = "root_process"
    SERIALIZE = "serialize"
    TRANSPORT = "transport"
    RESPONSE_READ = "response_read"
    RESPONSE_PARSE = "response_parse"


class TreemonError(Exception):
    """Base class for errors raised by the core."""

    blocking = True

    def __init__(self, code: ErrorCode, origin: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.origin = origin
        self.message = message

    def __str__(self) -> str:
        return f"{self.origin}: {self.message}"


class BlockingError(TreemonError):
    """Aborts the current sample or report cycle."""

    blocking = True


class NonBlockingError(TreemonError):
    """Recorded for diagnostics; the enclosing operation still succeeds."""

    blocking = False


class SerializationError(BlockingError):
    def __init__(self, origin: str, message: str) -> None:
        super().__init__(ErrorCode.SERIALIZE, origin, message)


class TransportError(BlockingError):
    def __init__(self, origin: str, message: str) -> None:
        super().__init__(ErrorCode.TRANSPORT, origin, message)


class ResponseReadError(BlockingError):
    def __init__(self, origin: str, message: str) -> None:
        super().__init__(ErrorCode.RESPONSE_READ, origin, message)


class ResponseParseError(BlockingError):
    def __init__(self, origin: str, message: str) -> None:
        super().__init__(ErrorCode.RESPONSE_PARSE, origin, message)


class RootResolutionError(BlockingError):
    def __init__(self, origin: str, message: str) -> None:
        super().__init__(ErrorCode.ROOT_PROCESS, origin, message)


class HostLookupError(NonBlockingError):
    """A host fact (cpu info, core count, memory) could not be read."""

    def __init__(self, code: ErrorCode, message: str, origin: str = "host") -> None:
        super().__init__(code, origin, message)


def report_error(error: TreemonError, logger: Optional[logging.Logger] = None) -> None:
    """Log ``error`` with a severity matching its classification."""
    logger = logger or logging.getLogger(__name__)
    if error.blocking:
        logger.warning("[%s] %s", error.code.value, error)
    else:
        logger.debug("[%s] %s (non blocking)", error.code.value, error)
