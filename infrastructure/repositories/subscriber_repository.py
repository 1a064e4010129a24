"""
订阅者仓储实现 - 使用SQLAlchemy实现数据访问
"""
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from domain.subscriber.entity import SubscriberEntry
from domain.subscriber.repository import SubscriberRepository
from domain.common.exceptions import EmailAlreadyExistsException
from infrastructure.models.subscriber import SubscriberModel
from core.logging_config import get_logger
from shared.epoch import decode_timestamp, encode_timestamp


logger = get_logger(__name__)


class SQLAlchemySubscriberRepository(SubscriberRepository):
    """订阅者仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: SubscriberModel) -> SubscriberEntry:
        """将数据库模型转换为领域实体"""
        return SubscriberEntry(
            id=model.id,
            email=model.email,
            confirmed_at=decode_timestamp(model.confirmed_at),
            opt_out=bool(model.opt_out),
        )

    @staticmethod
    def _confirmed_at_column(entry: SubscriberEntry) -> Optional[int]:
        if entry.confirmed_at is None:
            return None
        return encode_timestamp(entry.confirmed_at)

    async def create(self, entry: SubscriberEntry) -> SubscriberEntry:
        """创建订阅记录"""
        db_entry = SubscriberModel(
            email=entry.email,
            confirmed_at=self._confirmed_at_column(entry),
            opt_out=entry.opt_out,
        )
        try:
            self.session.add(db_entry)
            await self.session.flush()  # 获取生成的ID
        except IntegrityError as e:
            logger.warning("create_subscriber_conflict", field="email", email=entry.email)
            raise EmailAlreadyExistsException(entry.email) from e
        return self._to_entity(db_entry)

    async def get_by_email(self, email: str) -> Optional[SubscriberEntry]:
        """根据邮箱获取订阅记录"""
        result = await self.session.execute(
            select(SubscriberModel).where(SubscriberModel.email == email)
        )
        db_entry = result.scalar_one_or_none()
        return self._to_entity(db_entry) if db_entry else None

    async def get_page(self, offset: int, limit: int) -> List[SubscriberEntry]:
        """按 id 升序分页，保证跨页无重复"""
        query = (
            select(SubscriberModel)
            .order_by(SubscriberModel.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def update(self, entry: SubscriberEntry) -> bool:
        """更新订阅记录（email 仅作定位键，id 不可变）"""
        result = await self.session.execute(
            select(SubscriberModel).where(SubscriberModel.email == entry.email)
        )
        db_entry = result.scalar_one_or_none()

        if not db_entry:
            return False

        db_entry.confirmed_at = self._confirmed_at_column(entry)
        db_entry.opt_out = entry.opt_out
        await self.session.flush()
        return True

    async def delete(self, email: str) -> bool:
        """删除订阅记录"""
        result = await self.session.execute(
            delete(SubscriberModel).where(SubscriberModel.email == email)
        )
        return (result.rowcount or 0) > 0
