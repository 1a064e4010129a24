from __future__ import annotations

from typing import Sequence
import grpc
from grpc_health.v1 import health, health_pb2_grpc, health_pb2

from application.ports.subscriber_store import SubscriberStore
from core.config import Settings, split_bind
from core.exceptions import ListenerBindError
from core.logging_config import get_logger
from grpc_app.interceptors.request_id import RequestIdInterceptor
from grpc_app.interceptors.logging import LoggingInterceptor
from grpc_app.interceptors.exceptions import ExceptionMappingInterceptor
from grpc_app.stubs import mailing_list_pb2, mailing_list_pb2_grpc
from grpc_app.services.mailing_list_service import MailingListService


logger = get_logger(__name__)


def grpc_address(bind: str) -> str:
    """``:8081`` -> ``[::]:8081``; explicit hosts are kept."""
    host, port = split_bind(bind, default_host="::")
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{port}"


def create_server(store: SubscriberStore, settings: Settings) -> tuple[grpc.aio.Server, int]:
    """Build the gRPC server and bind its port.

    Returns the server together with the bound port (useful when the
    configured port is 0). Raises ListenerBindError when the address is taken.
    """
    interceptors: Sequence[grpc.aio.ServerInterceptor] = (
        RequestIdInterceptor(),
        LoggingInterceptor(),
        ExceptionMappingInterceptor(),
    )

    options = [
        ("grpc.max_concurrent_streams", max(1, settings.grpc.max_concurrent_streams)),
        # Fail the bind instead of silently sharing the port with another process
        ("grpc.so_reuseport", 0),
    ]
    server = grpc.aio.server(interceptors=interceptors, options=options)

    mailing_list_pb2_grpc.add_MailingListServiceServicer_to_server(MailingListService(store), server)

    # Health service
    health_svc = health.HealthServicer()
    health_pb2_grpc.add_HealthServicer_to_server(health_svc, server)
    health_svc.set("", health_pb2.HealthCheckResponse.SERVING)
    health_svc.set(mailing_list_pb2.FULL_SERVICE_NAME, health_pb2.HealthCheckResponse.SERVING)

    address = grpc_address(settings.BIND_GRPC)
    try:
        port = server.add_insecure_port(address)
    except RuntimeError as exc:
        raise ListenerBindError("grpc", address, str(exc)) from exc
    if port == 0:
        # older grpcio releases report bind failures by returning 0
        raise ListenerBindError("grpc", address)
    logger.info("grpc_bound", address=address, port=port)
    return server, port
