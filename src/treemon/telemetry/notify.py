"""Single-slot "request sent" notification."""
from __future__ import annotations

import logging
import queue
from typing import Optional

LOGGER = logging.getLogger(__name__)


class SentSignal:
    """At most one pending "request sent" notification.

    :meth:`publish` never blocks: when the slot is already full the new
    notification is dropped. A listener consumes it with :meth:`wait`.
    """

    def __init__(self) -> None:
        self._slot: "queue.Queue[bool]" = queue.Queue(maxsize=1)

    def publish(self) -> bool:
        """Try to fill the slot. Returns False if the notification was dropped."""
        try:
            self._slot.put_nowait(True)
        except queue.Full:
            LOGGER.debug("Request-sent notification dropped, slot already full")
            return False
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Consume a pending notification, waiting up to ``timeout`` seconds."""
        try:
            self._slot.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def pending(self) -> bool:
        return not self._slot.empty()

    def clear(self) -> None:
        try:
            self._slot.get_nowait()
        except queue.Empty:
            pass
