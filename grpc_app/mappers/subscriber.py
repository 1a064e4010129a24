from __future__ import annotations

from typing import Iterable, Optional

from domain.subscriber.entity import SubscriberEntry
from grpc_app.stubs import mailing_list_pb2
from shared.epoch import decode_timestamp, encode_timestamp


def entry_to_proto(entry: SubscriberEntry) -> mailing_list_pb2.EmailEntry:
    """Domain -> wire. An absent ``confirmed_at`` is sent as the epoch-zero sentinel."""
    return mailing_list_pb2.EmailEntry(
        id=int(entry.id or 0),
        email=entry.email,
        confirmed_at=encode_timestamp(entry.confirmed_at),
        opt_out=bool(entry.opt_out),
    )


def proto_to_entry(msg: mailing_list_pb2.EmailEntry) -> SubscriberEntry:
    """Wire -> domain. ``confirmed_at == 0`` decodes to ``None``."""
    return SubscriberEntry(
        id=int(msg.id) or None,
        email=msg.email,
        confirmed_at=decode_timestamp(msg.confirmed_at),
        opt_out=bool(msg.opt_out),
    )


def email_response(entry: Optional[SubscriberEntry]) -> mailing_list_pb2.EmailResponse:
    # Not found is a successful, empty response
    if entry is None:
        return mailing_list_pb2.EmailResponse()
    return mailing_list_pb2.EmailResponse(email_entry=entry_to_proto(entry))


def batch_response(entries: Iterable[SubscriberEntry]) -> mailing_list_pb2.GetEmailBatchResponse:
    return mailing_list_pb2.GetEmailBatchResponse(
        email_entries=[entry_to_proto(e) for e in entries],
    )
