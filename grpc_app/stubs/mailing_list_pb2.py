"""Protobuf messages for ``mailing.v1`` (see ``grpc_app/protos/mailing/v1``).

The file descriptor is assembled from ``descriptor_pb2`` at import time and
registered in the default pool, so the wire format is identical to what
``protoc`` would produce for ``mailing_list.proto`` without a codegen step.
"""
from __future__ import annotations

from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import message_factory as _message_factory


PACKAGE = "mailing.v1"
SERVICE_NAME = "MailingListService"
FULL_SERVICE_NAME = f"{PACKAGE}.{SERVICE_NAME}"

_F = descriptor_pb2.FieldDescriptorProto
_OPTIONAL = _F.LABEL_OPTIONAL
_REPEATED = _F.LABEL_REPEATED

# message name -> ((field name, type, message type name, label), ...); numbers follow order
_MESSAGES = (
    ("EmailEntry", (
        ("id", _F.TYPE_INT64, None, _OPTIONAL),
        ("email", _F.TYPE_STRING, None, _OPTIONAL),
        ("confirmed_at", _F.TYPE_INT64, None, _OPTIONAL),
        ("opt_out", _F.TYPE_BOOL, None, _OPTIONAL),
    )),
    ("CreateEmailRequest", (("email_addr", _F.TYPE_STRING, None, _OPTIONAL),)),
    ("GetEmailRequest", (("email_addr", _F.TYPE_STRING, None, _OPTIONAL),)),
    ("UpdateEmailRequest", (("email_entry", _F.TYPE_MESSAGE, "EmailEntry", _OPTIONAL),)),
    ("DeleteEmailRequest", (("email_addr", _F.TYPE_STRING, None, _OPTIONAL),)),
    ("GetEmailBatchRequest", (
        ("page", _F.TYPE_INT32, None, _OPTIONAL),
        ("count", _F.TYPE_INT32, None, _OPTIONAL),
    )),
    ("EmailResponse", (("email_entry", _F.TYPE_MESSAGE, "EmailEntry", _OPTIONAL),)),
    ("GetEmailBatchResponse", (("email_entries", _F.TYPE_MESSAGE, "EmailEntry", _REPEATED),)),
)

# rpc name -> (request message, response message)
METHODS = {
    "CreateEmail": ("CreateEmailRequest", "EmailResponse"),
    "GetEmail": ("GetEmailRequest", "EmailResponse"),
    "UpdateEmail": ("UpdateEmailRequest", "EmailResponse"),
    "DeleteEmail": ("DeleteEmailRequest", "EmailResponse"),
    "GetEmailBatch": ("GetEmailBatchRequest", "GetEmailBatchResponse"),
}


def _build_file_descriptor_proto() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(
        name="mailing/v1/mailing_list.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES:
        msg = fdp.message_type.add(name=message_name)
        for number, (field_name, field_type, type_name, label) in enumerate(fields, start=1):
            field = msg.field.add(name=field_name, number=number, type=field_type, label=label)
            if type_name:
                field.type_name = f".{PACKAGE}.{type_name}"

    service = fdp.service.add(name=SERVICE_NAME)
    for method_name, (request_name, response_name) in METHODS.items():
        service.method.add(
            name=method_name,
            input_type=f".{PACKAGE}.{request_name}",
            output_type=f".{PACKAGE}.{response_name}",
        )
    return fdp


DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(
    _build_file_descriptor_proto().SerializeToString()
)


def _message_class(name: str):
    return _message_factory.GetMessageClass(DESCRIPTOR.message_types_by_name[name])


EmailEntry = _message_class("EmailEntry")
CreateEmailRequest = _message_class("CreateEmailRequest")
GetEmailRequest = _message_class("GetEmailRequest")
UpdateEmailRequest = _message_class("UpdateEmailRequest")
DeleteEmailRequest = _message_class("DeleteEmailRequest")
GetEmailBatchRequest = _message_class("GetEmailBatchRequest")
EmailResponse = _message_class("EmailResponse")
GetEmailBatchResponse = _message_class("GetEmailBatchResponse")

_MAILINGLISTSERVICE = DESCRIPTOR.services_by_name[SERVICE_NAME]
