"""End-to-end tests against an in-process gRPC server on an ephemeral port."""
from typing import AsyncIterator

import grpc
import pytest
from grpc_health.v1 import health_pb2, health_pb2_grpc

from grpc_app.server import create_server
from grpc_app.stubs import mailing_list_pb2, mailing_list_pb2_grpc


async def _start(store, settings) -> tuple[grpc.aio.Server, str]:
    server, port = create_server(store, settings)
    await server.start()
    return server, f"127.0.0.1:{port}"


@pytest.fixture
async def grpc_target(store, settings) -> AsyncIterator[str]:
    server, target = await _start(store, settings)
    try:
        yield target
    finally:
        await server.stop(grace=None)


@pytest.fixture
async def stub(grpc_target) -> AsyncIterator[mailing_list_pb2_grpc.MailingListServiceStub]:
    async with grpc.aio.insecure_channel(grpc_target) as channel:
        yield mailing_list_pb2_grpc.MailingListServiceStub(channel)


async def test_create_update_delete_scenario(stub):
    created = await stub.CreateEmail(mailing_list_pb2.CreateEmailRequest(email_addr="a@example.com"))
    assert created.HasField("email_entry")
    assert created.email_entry.id != 0
    assert created.email_entry.email == "a@example.com"
    assert created.email_entry.opt_out is False
    assert created.email_entry.confirmed_at == 0

    entry = mailing_list_pb2.EmailEntry()
    entry.CopyFrom(created.email_entry)
    entry.opt_out = True
    updated = await stub.UpdateEmail(mailing_list_pb2.UpdateEmailRequest(email_entry=entry))
    assert updated.email_entry.opt_out is True

    got = await stub.GetEmail(mailing_list_pb2.GetEmailRequest(email_addr="a@example.com"))
    assert got.email_entry.opt_out is True
    assert got.email_entry.id == created.email_entry.id

    deleted = await stub.DeleteEmail(mailing_list_pb2.DeleteEmailRequest(email_addr="a@example.com"))
    assert not deleted.HasField("email_entry")

    gone = await stub.GetEmail(mailing_list_pb2.GetEmailRequest(email_addr="a@example.com"))
    assert not gone.HasField("email_entry")


async def test_update_confirms_subscription(stub):
    await stub.CreateEmail(mailing_list_pb2.CreateEmailRequest(email_addr="a@example.com"))
    resp = await stub.UpdateEmail(mailing_list_pb2.UpdateEmailRequest(
        email_entry=mailing_list_pb2.EmailEntry(email="a@example.com", confirmed_at=1_700_000_000),
    ))
    assert resp.email_entry.confirmed_at == 1_700_000_000
    assert resp.email_entry.opt_out is False


async def test_get_unknown_address_is_empty_not_error(stub):
    resp = await stub.GetEmail(mailing_list_pb2.GetEmailRequest(email_addr="nobody@example.com"))
    assert not resp.HasField("email_entry")


async def test_update_unknown_address_fabricates_nothing(stub):
    resp = await stub.UpdateEmail(mailing_list_pb2.UpdateEmailRequest(
        email_entry=mailing_list_pb2.EmailEntry(id=9, email="ghost@example.com", opt_out=True),
    ))
    assert not resp.HasField("email_entry")

    again = await stub.GetEmail(mailing_list_pb2.GetEmailRequest(email_addr="ghost@example.com"))
    assert not again.HasField("email_entry")


async def test_batch_pages(seeded_store, stub):
    first = await stub.GetEmailBatch(mailing_list_pb2.GetEmailBatchRequest(page=0, count=2))
    third = await stub.GetEmailBatch(mailing_list_pb2.GetEmailBatchRequest(page=2, count=2))
    past_end = await stub.GetEmailBatch(mailing_list_pb2.GetEmailBatchRequest(page=3, count=2))

    assert [e.email for e in first.email_entries] == ["user0@example.com", "user1@example.com"]
    assert [e.email for e in third.email_entries] == ["user4@example.com"]
    assert len(past_end.email_entries) == 0


async def test_batch_with_negative_arguments_is_clamped(seeded_store, stub):
    resp = await stub.GetEmailBatch(mailing_list_pb2.GetEmailBatchRequest(page=-1, count=-5))
    assert len(resp.email_entries) == 0

    resp = await stub.GetEmailBatch(mailing_list_pb2.GetEmailBatchRequest(page=-1, count=1))
    assert [e.email for e in resp.email_entries] == ["user0@example.com"]


async def test_duplicate_create_maps_to_already_exists(stub):
    await stub.CreateEmail(mailing_list_pb2.CreateEmailRequest(email_addr="a@example.com"))
    with pytest.raises(grpc.aio.AioRpcError) as ei:
        await stub.CreateEmail(mailing_list_pb2.CreateEmailRequest(email_addr="a@example.com"))

    assert ei.value.code() == grpc.StatusCode.ALREADY_EXISTS
    trailing = dict(ei.value.trailing_metadata() or ())
    assert trailing.get("x-biz-code") == "20002"
    assert trailing.get("x-request-id")


async def test_invalid_address_maps_to_invalid_argument(stub):
    with pytest.raises(grpc.aio.AioRpcError) as ei:
        await stub.CreateEmail(mailing_list_pb2.CreateEmailRequest(email_addr="not-an-address"))
    assert ei.value.code() == grpc.StatusCode.INVALID_ARGUMENT


async def test_out_of_range_timestamp_maps_to_invalid_argument(stub):
    await stub.CreateEmail(mailing_list_pb2.CreateEmailRequest(email_addr="a@example.com"))
    with pytest.raises(grpc.aio.AioRpcError) as ei:
        await stub.UpdateEmail(mailing_list_pb2.UpdateEmailRequest(
            email_entry=mailing_list_pb2.EmailEntry(email="a@example.com", confirmed_at=300_000_000_000),
        ))
    assert ei.value.code() == grpc.StatusCode.INVALID_ARGUMENT

    got = await stub.GetEmail(mailing_list_pb2.GetEmailRequest(email_addr="a@example.com"))
    assert got.email_entry.confirmed_at == 0


async def test_request_id_is_echoed(stub):
    call = stub.GetEmail(
        mailing_list_pb2.GetEmailRequest(email_addr="a@example.com"),
        metadata=(("x-request-id", "req-123"),),
    )
    await call
    trailing = dict(await call.trailing_metadata() or ())
    assert trailing.get("x-request-id") == "req-123"


async def test_store_failure_is_propagated_as_internal(settings):
    class BrokenStore:
        async def get_one(self, email):
            raise RuntimeError("database disk image is malformed")

    server, target = await _start(BrokenStore(), settings)
    try:
        async with grpc.aio.insecure_channel(target) as channel:
            stub = mailing_list_pb2_grpc.MailingListServiceStub(channel)
            with pytest.raises(grpc.aio.AioRpcError) as ei:
                await stub.GetEmail(mailing_list_pb2.GetEmailRequest(email_addr="a@example.com"))
        assert ei.value.code() == grpc.StatusCode.INTERNAL
        assert ei.value.details() == "database disk image is malformed"
    finally:
        await server.stop(grace=None)


async def test_health_reports_serving(grpc_target):
    async with grpc.aio.insecure_channel(grpc_target) as channel:
        health = health_pb2_grpc.HealthStub(channel)
        resp = await health.Check(health_pb2.HealthCheckRequest(service=mailing_list_pb2.FULL_SERVICE_NAME))
    assert resp.status == health_pb2.HealthCheckResponse.SERVING
