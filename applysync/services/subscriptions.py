import enum
import logging

from applysync.core.errors import DuplicateSubscriber
from applysync.db.session import SubscriberStore
from applysync.models.subscriber import Subscriber, is_valid_email

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    invalid_input      = "invalid_input"
    already_subscribed = "already_subscribed"
    subscribed         = "subscribed"
    store_failure      = "store_failure"


class SubscriptionService:
    def __init__(self, store: SubscriberStore):
        self.store = store

    async def submit(self, email: str) -> Outcome:
        """
        Subscribe ``email`` unless it is malformed or already stored.

        The lookup is only a fast path. Two concurrent calls can both miss it;
        the unique index then rejects the second insert, which is reported as
        already subscribed. StoreFailure propagates to the caller.
        """
        if not is_valid_email(email):
            return Outcome.invalid_input

        if await self.store.find_by_email(email) is not None:
            return Outcome.already_subscribed

        try:
            await self.store.insert(Subscriber(email=email))
        except DuplicateSubscriber:
            logger.info("Concurrent subscription for %s resolved by unique index", email)
            return Outcome.already_subscribed

        logger.info("New subscriber: %s", email)
        return Outcome.subscribed
