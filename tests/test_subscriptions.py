import asyncio

import pytest
from pymongo.errors import AutoReconnect

from applysync.core.errors import StoreFailure
from applysync.db.session import SubscriberStore
from applysync.models.subscriber import is_valid_email
from applysync.services.subscriptions import Outcome, SubscriptionService

from tests.conftest import FakeCollection


INVALID = [
    "not-an-email",
    "",
    "plainaddress@",
    "@example.com",
    "user@localhost",
    "user@@example.com",
    "us er@example.com",
    "user@exa mple.com",
    "user@example.com ",
    "user@example.com\n",
    "user@example.",
]

VALID = [
    "new@example.com",
    "first.last+tag@mail.example.co.uk",
    "x@y.z",
]


@pytest.mark.parametrize("email", INVALID)
def test_invalid_email_is_rejected_without_store_access(store, collection, email):
    outcome = asyncio.run(SubscriptionService(store).submit(email))

    assert outcome is Outcome.invalid_input
    assert collection.calls == []


@pytest.mark.parametrize("email", VALID)
def test_pattern_accepts_plain_addresses(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("value", [None, 42, ["a@b.com"]])
def test_pattern_rejects_non_strings(value):
    assert not is_valid_email(value)


def test_second_submit_is_already_subscribed(store, collection):
    service = SubscriptionService(store)

    async def twice():
        return [await service.submit("new@example.com"), await service.submit("new@example.com")]

    assert asyncio.run(twice()) == [Outcome.subscribed, Outcome.already_subscribed]
    assert [d["email"] for d in collection.docs] == ["new@example.com"]
    # the repeat is answered by the lookup alone
    assert collection.store_calls() == ["find_one", "insert_one", "find_one"]


def test_new_record_carries_creation_time(store, collection):
    asyncio.run(SubscriptionService(store).submit("new@example.com"))

    doc = collection.docs[0]
    assert set(doc) == {"email", "createdAt"}
    assert doc["createdAt"].tzinfo is not None


def test_email_comparison_is_case_sensitive(store, collection):
    service = SubscriptionService(store)

    async def both():
        return [await service.submit("Reader@Example.com"), await service.submit("reader@example.com")]

    assert asyncio.run(both()) == [Outcome.subscribed, Outcome.subscribed]
    assert len(collection.docs) == 2


def test_concurrent_submits_are_resolved_by_unique_index(monitor):
    collection = FakeCollection(hold_lookups=2)
    service = SubscriptionService(SubscriberStore(collection, monitor))

    async def race():
        return await asyncio.gather(
            service.submit("race@example.com"),
            service.submit("race@example.com"),
        )

    outcomes = asyncio.run(race())

    assert sorted(outcomes) == sorted([Outcome.subscribed, Outcome.already_subscribed])
    assert len(collection.docs) == 1
    # both callers passed the lookup, so both attempted the insert
    assert collection.store_calls().count("insert_one") == 2


def test_store_failure_propagates(store, collection):
    collection.fail_with = AutoReconnect("connection closed")

    with pytest.raises(StoreFailure, match="connection closed"):
        asyncio.run(SubscriptionService(store).submit("new@example.com"))
    assert collection.docs == []
