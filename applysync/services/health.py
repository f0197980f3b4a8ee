from dataclasses import dataclass
from datetime import datetime, timezone

from applysync.db.session import SubscriberStore


@dataclass(frozen=True)
class HealthReport:
    status: str
    timestamp: datetime
    store_connected: bool


class HealthReporter:
    """Read-only view of process health. Never queries the store."""

    def __init__(self, store: SubscriberStore):
        self.store = store

    def report(self) -> HealthReport:
        return HealthReport(
            status="UP",
            timestamp=datetime.now(timezone.utc),
            store_connected=self.store.connected,
        )
