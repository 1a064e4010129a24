"""
API依赖项 - 注入进程级共享的存储句柄
"""
from fastapi import Request

from application.ports.subscriber_store import SubscriberStore


async def get_store(request: Request) -> SubscriberStore:
    """由 create_app 挂载到 app.state 上的存储句柄"""
    return request.app.state.store
