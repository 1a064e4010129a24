"""
订阅者存储 - 两个传输层共享的唯一存储句柄

每次调用打开独立会话并运行在独立的工作单元中，因此同一个句柄可以被
gRPC 与 HTTP 两侧的并发请求同时使用，核心层无需自行加锁。
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from core.config import Settings
from core.logging_config import get_logger
from domain.subscriber.entity import SubscriberEntry
from infrastructure.database import create_engine, create_session_factory, create_tables
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


logger = get_logger(__name__)


class SQLAlchemySubscriberStore:
    """``SubscriberStore`` 的 SQLAlchemy 实现"""

    def __init__(self, engine: AsyncEngine, *, max_page_size: int = 100) -> None:
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._max_page_size = max_page_size

    def _uow(self, *, readonly: bool = False) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(self._session_factory, readonly=readonly)

    async def create_if_absent(self) -> None:
        await create_tables(self._engine)

    async def create(self, email: str) -> None:
        async with self._uow() as uow:
            await uow.subscriber_repository.create(SubscriberEntry(id=None, email=email))

    async def get_one(self, email: str) -> Optional[SubscriberEntry]:
        async with self._uow(readonly=True) as uow:
            return await uow.subscriber_repository.get_by_email(email)

    async def update(self, entry: SubscriberEntry) -> bool:
        async with self._uow() as uow:
            return await uow.subscriber_repository.update(entry)

    async def delete(self, email: str) -> bool:
        async with self._uow() as uow:
            return await uow.subscriber_repository.delete(email)

    async def get_page(self, page: int, count: int) -> List[SubscriberEntry]:
        """页码从 0 开始；负数按 0 处理，count 不超过 max_page_size"""
        page = max(0, int(page))
        count = min(max(0, int(count)), self._max_page_size)
        if count == 0:
            return []
        async with self._uow(readonly=True) as uow:
            return await uow.subscriber_repository.get_page(offset=page * count, limit=count)

    async def aclose(self) -> None:
        await self._engine.dispose()


@asynccontextmanager
async def open_store(settings: Settings) -> AsyncIterator[SQLAlchemySubscriberStore]:
    """打开存储句柄，退出时（包括异常路径）释放连接池"""
    engine = create_engine(settings.database_url)
    store = SQLAlchemySubscriberStore(engine, max_page_size=settings.MAX_PAGE_SIZE)
    logger.info("store_opened", db_path=settings.DB_PATH)
    try:
        yield store
    finally:
        await store.aclose()
        logger.info("store_closed", db_path=settings.DB_PATH)
