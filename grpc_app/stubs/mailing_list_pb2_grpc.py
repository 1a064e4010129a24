"""Client and server classes for ``mailing.v1.MailingListService``.

Same surface as ``grpcio-tools`` output: a ``Stub`` for clients, a
``Servicer`` base class and ``add_MailingListServiceServicer_to_server``.
"""
from __future__ import annotations

import grpc

from grpc_app.stubs import mailing_list_pb2


def _message(name: str):
    return getattr(mailing_list_pb2, name)


def _method_path(method_name: str) -> str:
    return f"/{mailing_list_pb2.FULL_SERVICE_NAME}/{method_name}"


class MailingListServiceStub(object):
    """Client stub; each RPC is exposed as an attribute with the method name."""

    def __init__(self, channel):
        for method_name, (request_name, response_name) in mailing_list_pb2.METHODS.items():
            setattr(
                self,
                method_name,
                channel.unary_unary(
                    _method_path(method_name),
                    request_serializer=_message(request_name).SerializeToString,
                    response_deserializer=_message(response_name).FromString,
                ),
            )


class MailingListServiceServicer(object):
    """Base class for service implementations; unimplemented RPCs fail with UNIMPLEMENTED."""

    async def CreateEmail(self, request, context):
        await context.abort(grpc.StatusCode.UNIMPLEMENTED, "Method not implemented!")

    async def GetEmail(self, request, context):
        await context.abort(grpc.StatusCode.UNIMPLEMENTED, "Method not implemented!")

    async def UpdateEmail(self, request, context):
        await context.abort(grpc.StatusCode.UNIMPLEMENTED, "Method not implemented!")

    async def DeleteEmail(self, request, context):
        await context.abort(grpc.StatusCode.UNIMPLEMENTED, "Method not implemented!")

    async def GetEmailBatch(self, request, context):
        await context.abort(grpc.StatusCode.UNIMPLEMENTED, "Method not implemented!")


def add_MailingListServiceServicer_to_server(servicer, server):
    rpc_method_handlers = {
        method_name: grpc.unary_unary_rpc_method_handler(
            getattr(servicer, method_name),
            request_deserializer=_message(request_name).FromString,
            response_serializer=_message(response_name).SerializeToString,
        )
        for method_name, (request_name, response_name) in mailing_list_pb2.METHODS.items()
    }
    generic_handler = grpc.method_handlers_generic_handler(
        mailing_list_pb2.FULL_SERVICE_NAME, rpc_method_handlers
    )
    server.add_generic_rpc_handlers((generic_handler,))
