"""HTTP/JSON surface exercised in-process through httpx's ASGI transport."""
import warnings
from typing import AsyncIterator

import httpx
import pytest

from core.exceptions import HTTP_422_STATUS, _unprocessable_status, business_code_to_http_status
from main import create_app
from shared.codes import BusinessCode


BASE = "/api/v1/emails"


@pytest.fixture
async def client(store, settings) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=create_app(store, settings))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def test_create_update_delete_scenario(client):
    resp = await client.post(BASE, json={"email": "a@example.com"})
    assert resp.status_code == 200
    created = resp.json()["data"]
    assert created["id"] > 0
    assert created["email"] == "a@example.com"
    assert created["opt_out"] is False
    assert created["confirmed_at"] == 0

    resp = await client.put(BASE, json={**created, "opt_out": True})
    assert resp.status_code == 200
    assert resp.json()["data"]["opt_out"] is True

    resp = await client.get(f"{BASE}/a@example.com")
    assert resp.json()["data"]["opt_out"] is True
    assert resp.json()["data"]["id"] == created["id"]

    resp = await client.delete(f"{BASE}/a@example.com")
    assert resp.status_code == 200
    assert resp.json()["data"] is None

    resp = await client.get(f"{BASE}/a@example.com")
    assert resp.status_code == 200
    assert resp.json()["data"] is None
    assert resp.json()["error"] is None


async def test_update_unknown_address_fabricates_nothing(client):
    resp = await client.put(BASE, json={"email": "ghost@example.com", "opt_out": True})
    assert resp.status_code == 200
    assert resp.json()["data"] is None

    resp = await client.get(f"{BASE}/ghost@example.com")
    assert resp.json()["data"] is None


async def test_batch_pages(seeded_store, client):
    first = await client.get(BASE, params={"page": 0, "count": 2})
    third = await client.get(BASE, params={"page": 2, "count": 2})
    past_end = await client.get(BASE, params={"page": 3, "count": 2})

    assert [e["email"] for e in first.json()["data"]] == ["user0@example.com", "user1@example.com"]
    assert [e["email"] for e in third.json()["data"]] == ["user4@example.com"]
    assert past_end.status_code == 200
    assert past_end.json()["data"] == []


async def test_batch_rejects_negative_page(client):
    resp = await client.get(BASE, params={"page": -1, "count": 2})
    assert resp.status_code == 422
    assert resp.json()["error"]["type"] == "ValidationError"


async def test_duplicate_create_is_conflict(client):
    await client.post(BASE, json={"email": "a@example.com"})
    resp = await client.post(BASE, json={"email": "a@example.com"})

    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == 20002
    assert body["error"]["type"] == "EmailAlreadyExists"


async def test_malformed_address_is_rejected(client):
    resp = await client.post(BASE, json={"email": "not-an-address"})
    assert resp.status_code == 422


async def test_address_is_stored_as_sent(client):
    resp = await client.post(BASE, json={"email": "Bob@EXAMPLE.COM"})
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == "Bob@EXAMPLE.COM"

    resp = await client.get(f"{BASE}/Bob@EXAMPLE.COM")
    assert resp.json()["data"]["email"] == "Bob@EXAMPLE.COM"


async def test_special_use_domain_is_accepted(client):
    resp = await client.post(BASE, json={"email": "y@foo.test"})
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == "y@foo.test"


async def test_out_of_range_timestamp_is_rejected(client):
    await client.post(BASE, json={"email": "a@example.com"})
    resp = await client.put(BASE, json={"email": "a@example.com", "confirmed_at": 300_000_000_000})
    assert resp.status_code == 422
    assert resp.json()["error"]["field"] == "confirmed_at"

    resp = await client.get(f"{BASE}/a@example.com")
    assert resp.json()["data"]["confirmed_at"] == 0


async def test_request_id_header_round_trip(client):
    resp = await client.get(f"{BASE}/a@example.com", headers={"X-Request-ID": "req-42"})
    assert resp.headers["X-Request-ID"] == "req-42"


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "healthy"}


async def test_store_failure_is_reported_as_500(settings):
    class BrokenStore:
        async def get_one(self, email):
            raise RuntimeError("database is locked")

    transport = httpx.ASGITransport(app=create_app(BrokenStore(), settings), raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        resp = await c.get(f"{BASE}/a@example.com")

    assert resp.status_code == 500
    assert resp.json()["message"] == "database is locked"


def test_unprocessable_status_resolves_without_deprecation_warning():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        status = _unprocessable_status()
    assert status == 422
    assert HTTP_422_STATUS == 422
    assert business_code_to_http_status(BusinessCode.PARAM_VALIDATION_ERROR) == 422
    assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]
