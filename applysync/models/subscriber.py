import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

COLLECTION_NAME = "emails"

# local part, "@", and a domain with at least one "." (no whitespace, single "@")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(email: object) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None


@dataclass(frozen=True)
class Subscriber:
    email: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> dict:
        return {"email": self.email, "createdAt": self.created_at}

    @classmethod
    def from_document(cls, doc: dict) -> "Subscriber":
        return cls(email=doc["email"], created_at=doc["createdAt"])
