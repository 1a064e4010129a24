"""
进程入口 - 同时运行 gRPC 与 HTTP/JSON 两个监听器

两个监听器共享同一个存储句柄；任一监听器绑定失败都会直接终止进程，
不存在只保留单个传输层的降级模式。
"""
import asyncio
import socket
import sys

import grpc
import uvicorn

from core.config import Settings, split_bind
from core.exceptions import ListenerBindError
from core.logging_config import configure_logging, get_logger
from grpc_app.server import create_server
from infrastructure.store import open_store
from main import create_app


logger = get_logger(__name__)


def bind_http_socket(bind: str) -> socket.socket:
    """在启动任何任务之前绑定 HTTP 监听端口，失败时抛出 ListenerBindError"""
    host, port = split_bind(bind)
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        raise ListenerBindError("json", bind, str(exc)) from exc
    sock.set_inheritable(True)
    return sock


async def _run_grpc(server: grpc.aio.Server, address: str, grace: float) -> None:
    await server.start()
    logger.info("listener_started", transport="grpc", address=address)
    try:
        await server.wait_for_termination()
    finally:
        await server.stop(grace)
        logger.info("listener_stopped", transport="grpc", address=address)


async def _run_http(server: uvicorn.Server, sock: socket.socket, address: str) -> None:
    logger.info("listener_started", transport="json", address=address)
    try:
        await server.serve(sockets=[sock])
    finally:
        sock.close()
        logger.info("listener_stopped", transport="json", address=address)


async def serve(settings: Settings) -> None:
    """打开存储、确保表结构存在，然后并发运行两个监听器直到二者都结束"""
    async with open_store(settings) as store:
        await store.create_if_absent()
        logger.info("schema_ready", db_path=settings.DB_PATH)

        grpc_server, _ = create_server(store, settings)
        try:
            http_socket = bind_http_socket(settings.BIND_JSON)
        except ListenerBindError:
            await grpc_server.stop(None)
            raise

        http_server = uvicorn.Server(
            uvicorn.Config(
                create_app(store, settings),
                log_config=None,
                access_log=False,
                lifespan="off",
            )
        )

        tasks = [
            asyncio.create_task(
                _run_grpc(grpc_server, settings.BIND_GRPC, settings.grpc.shutdown_grace),
                name="grpc-listener",
            ),
            asyncio.create_task(
                _run_http(http_server, http_socket, settings.BIND_JSON),
                name="json-listener",
            ),
        ]
        try:
            await asyncio.gather(*tasks)
        finally:
            # 任一监听器异常退出时取消另一个
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)


def run() -> None:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info(
        "mailing_list_starting",
        db_path=settings.DB_PATH,
        bind_grpc=settings.BIND_GRPC,
        bind_json=settings.BIND_JSON,
    )
    try:
        asyncio.run(serve(settings))
    except ListenerBindError as exc:
        logger.critical("listener_bind_failed", transport=exc.transport, address=exc.address, error=str(exc))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("mailing_list_interrupted")
    except Exception as exc:
        logger.critical("mailing_list_failed", error=str(exc), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
