from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from applysync.services.health import HealthReport


class SubscribeRequest(BaseModel):
    email: str


class MessageResponse(BaseModel):
    success: bool
    message: str
    error: Optional[str] = None


class HealthRead(BaseModel):
    status: str
    timestamp: str
    database: Literal["Connected", "Disconnected"]

    @classmethod
    def from_report(cls, report: HealthReport) -> "HealthRead":
        return cls(
            status=report.status,
            timestamp=iso_timestamp(report.timestamp),
            database="Connected" if report.store_connected else "Disconnected",
        )


class RootRead(BaseModel):
    message: str
    version: str
    endpoints: list[str]


def iso_timestamp(value: datetime) -> str:
    """UTC, millisecond precision, trailing ``Z``: 2024-05-01T12:00:00.000Z"""
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ── Client-facing messages ────────────────────────────────────────────────────
SUBSCRIBED_MESSAGE         = "Thanks for subscribing! We'll be in touch soon."
ALREADY_SUBSCRIBED_MESSAGE = "You're already subscribed!"
INVALID_EMAIL_MESSAGE      = "Please provide a valid email address"
STORE_FAILURE_MESSAGE      = "Something went wrong. Please try again later."
INTERNAL_ERROR_MESSAGE     = "Internal server error"
CORS_REJECTED_MESSAGE      = (
    "The CORS policy for this site does not allow access from the specified Origin."
)
