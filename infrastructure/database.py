"""
数据库配置和连接管理

引擎由进程入口创建并显式传递，不使用模块级全局引擎。
"""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from infrastructure.models import Base


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """创建异步引擎（连接池可被多个并发调用方安全共享）"""
    return create_async_engine(database_url, echo=echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """
    创建所有表（已存在则跳过）
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
