import asyncio
from datetime import datetime, timezone

import pytest

from core.config import Settings
from domain.common.exceptions import DomainValidationException, EmailAlreadyExistsException
from domain.subscriber.entity import SubscriberEntry
from infrastructure.store import open_store


async def test_create_then_get_returns_pending_entry(store):
    await store.create("a@example.com")
    entry = await store.get_one("a@example.com")

    assert entry is not None
    assert entry.id
    assert entry.email == "a@example.com"
    assert entry.opt_out is False
    assert entry.confirmed_at is None


async def test_create_if_absent_is_idempotent(store):
    await store.create("a@example.com")
    await store.create_if_absent()
    assert await store.get_one("a@example.com") is not None


async def test_duplicate_email_is_rejected(store):
    await store.create("a@example.com")
    with pytest.raises(EmailAlreadyExistsException):
        await store.create("a@example.com")
    page = await store.get_page(0, 10)
    assert [e.email for e in page] == ["a@example.com"]


async def test_invalid_email_is_rejected(store):
    with pytest.raises(DomainValidationException):
        await store.create("not-an-address")


async def test_get_missing_returns_none(store):
    assert await store.get_one("missing@example.com") is None


async def test_update_sets_mutable_fields_and_truncates_timestamp(store):
    await store.create("a@example.com")
    created = await store.get_one("a@example.com")
    confirmed = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)

    updated = await store.update(
        SubscriberEntry(id=created.id, email="a@example.com", confirmed_at=confirmed, opt_out=True)
    )
    entry = await store.get_one("a@example.com")

    assert updated is True
    assert entry.id == created.id
    assert entry.opt_out is True
    assert entry.confirmed_at == confirmed.replace(microsecond=0)


async def test_update_never_changes_id(store):
    await store.create("a@example.com")
    created = await store.get_one("a@example.com")

    await store.update(SubscriberEntry(id=created.id + 100, email="a@example.com", opt_out=True))

    assert (await store.get_one("a@example.com")).id == created.id


async def test_update_can_clear_confirmation(store):
    await store.create("a@example.com")
    await store.update(SubscriberEntry(id=None, email="a@example.com",
                                       confirmed_at=datetime(2024, 1, 1, tzinfo=timezone.utc)))
    await store.update(SubscriberEntry(id=None, email="a@example.com", confirmed_at=None))
    assert (await store.get_one("a@example.com")).confirmed_at is None


async def test_update_missing_address_does_not_create_record(store):
    await store.create("a@example.com")
    updated = await store.update(SubscriberEntry(id=1, email="ghost@example.com", opt_out=True))

    assert updated is False
    assert await store.get_one("ghost@example.com") is None
    assert (await store.get_one("a@example.com")).opt_out is False


async def test_delete_then_get_is_not_found(store):
    await store.create("a@example.com")

    assert await store.delete("a@example.com") is True
    assert await store.get_one("a@example.com") is None
    assert await store.delete("a@example.com") is False


async def test_ids_are_not_reused_after_delete(store):
    await store.create("a@example.com")
    await store.create("b@example.com")
    last = await store.get_one("b@example.com")
    await store.delete("b@example.com")

    await store.create("c@example.com")
    assert (await store.get_one("c@example.com")).id > last.id


async def test_pages_are_bounded_and_disjoint(seeded_store):
    assert len(await seeded_store.get_page(0, 2)) == 2
    assert len(await seeded_store.get_page(2, 2)) == 1
    assert await seeded_store.get_page(3, 2) == []

    scanned = []
    for page in range(3):
        scanned.extend(await seeded_store.get_page(page, 2))
    everything = await seeded_store.get_page(0, 100)

    assert [e.id for e in scanned] == [e.id for e in everything]
    assert len({e.id for e in scanned}) == 5
    assert [e.id for e in everything] == sorted(e.id for e in everything)


async def test_page_arguments_are_clamped(seeded_store):
    assert [e.email for e in await seeded_store.get_page(-3, 1)] == ["user0@example.com"]
    assert await seeded_store.get_page(0, 0) == []
    assert await seeded_store.get_page(0, -1) == []


async def test_page_size_is_capped(tmp_path):
    capped = Settings(_env_file=None, DB_PATH=str(tmp_path / "capped.db"), MAX_PAGE_SIZE=3)
    async with open_store(capped) as store:
        await store.create_if_absent()
        for i in range(5):
            await store.create(f"bulk{i}@example.com")
        assert len(await store.get_page(0, 50)) == 3
        assert [e.email for e in await store.get_page(1, 50)] == ["bulk3@example.com", "bulk4@example.com"]


async def test_handle_is_shared_by_concurrent_callers(store):
    emails = [f"c{i}@example.com" for i in range(10)]
    await asyncio.gather(*(store.create(e) for e in emails))
    found = await asyncio.gather(*(store.get_one(e) for e in emails))

    assert all(f is not None for f in found)
    assert len({f.id for f in found}) == len(emails)
