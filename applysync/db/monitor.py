"""
Passive store connectivity tracking.

The driver sends a heartbeat to every known server in the background; this
listener records the outcome of the latest heartbeat per server so health
checks can read the connection state without issuing a query.
"""
from __future__ import annotations

import logging
import threading

from pymongo import monitoring

logger = logging.getLogger(__name__)


class ConnectionMonitor(monitoring.ServerHeartbeatListener):

    def __init__(self) -> None:
        self._lock    = threading.Lock()
        self._servers: dict[tuple, bool] = {}

    @property
    def connected(self) -> bool:
        with self._lock:
            return any(self._servers.values())

    def mark(self, address: tuple, up: bool) -> None:
        with self._lock:
            was_connected = any(self._servers.values())
            previous      = self._servers.get(address)
            self._servers[address] = up
            now_connected = any(self._servers.values())

        if previous is not None and previous != up:
            logger.info("Server %s:%s is %s", address[0], address[1], "up" if up else "down")
        if now_connected and not was_connected:
            logger.info("Store connected")
        elif was_connected and not now_connected:
            logger.warning("Store disconnected")

    # ── pymongo listener hooks (called from driver monitor threads) ──────────

    def started(self, event: monitoring.ServerHeartbeatStartedEvent) -> None:
        pass

    def succeeded(self, event: monitoring.ServerHeartbeatSucceededEvent) -> None:
        self.mark(event.connection_id, True)

    def failed(self, event: monitoring.ServerHeartbeatFailedEvent) -> None:
        logger.debug("Heartbeat to %s failed: %s", event.connection_id, event.reply)
        self.mark(event.connection_id, False)
