from __future__ import annotations

import grpc
from google.protobuf import text_format

from application.ports.subscriber_store import SubscriberStore
from core.logging_config import get_logger
from grpc_app.mappers.subscriber import batch_response, email_response, proto_to_entry
from grpc_app.stubs import mailing_list_pb2, mailing_list_pb2_grpc


logger = get_logger(__name__)


def _describe(request) -> str:
    return text_format.MessageToString(request, as_one_line=True)


class MailingListService(mailing_list_pb2_grpc.MailingListServiceServicer):
    """Thin adapter: decode the request, call the store, encode the result.

    Store failures propagate unchanged; ExceptionMappingInterceptor turns them
    into gRPC statuses.
    """

    def __init__(self, store: SubscriberStore) -> None:
        self._store = store

    async def _email_response(self, email: str) -> mailing_list_pb2.EmailResponse:
        return email_response(await self._store.get_one(email))

    async def CreateEmail(self, request: mailing_list_pb2.CreateEmailRequest, context: grpc.aio.ServicerContext) -> mailing_list_pb2.EmailResponse:  # type: ignore[override]
        logger.info("grpc_create_email", request=_describe(request))
        await self._store.create(request.email_addr)
        return await self._email_response(request.email_addr)

    async def GetEmail(self, request: mailing_list_pb2.GetEmailRequest, context: grpc.aio.ServicerContext) -> mailing_list_pb2.EmailResponse:  # type: ignore[override]
        logger.info("grpc_get_email", request=_describe(request))
        return await self._email_response(request.email_addr)

    async def UpdateEmail(self, request: mailing_list_pb2.UpdateEmailRequest, context: grpc.aio.ServicerContext) -> mailing_list_pb2.EmailResponse:  # type: ignore[override]
        logger.info("grpc_update_email", request=_describe(request))
        entry = proto_to_entry(request.email_entry)
        await self._store.update(entry)
        return await self._email_response(entry.email)

    async def DeleteEmail(self, request: mailing_list_pb2.DeleteEmailRequest, context: grpc.aio.ServicerContext) -> mailing_list_pb2.EmailResponse:  # type: ignore[override]
        logger.info("grpc_delete_email", request=_describe(request))
        await self._store.delete(request.email_addr)
        return await self._email_response(request.email_addr)

    async def GetEmailBatch(self, request: mailing_list_pb2.GetEmailBatchRequest, context: grpc.aio.ServicerContext) -> mailing_list_pb2.GetEmailBatchResponse:  # type: ignore[override]
        logger.info("grpc_get_email_batch", request=_describe(request))
        page = max(0, int(request.page))
        count = max(0, int(request.count))
        entries = await self._store.get_page(page, count)
        return batch_response(entries)
