"""
订阅者仓储接口 - 定义数据访问的抽象接口
"""
from abc import ABC, abstractmethod
from typing import Optional, List
from .entity import SubscriberEntry


class SubscriberRepository(ABC):
    """订阅者仓储抽象接口 - 只定义能做什么，不管怎么做"""

    @abstractmethod
    async def create(self, entry: SubscriberEntry) -> SubscriberEntry:
        """创建订阅记录（id 由存储分配）"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[SubscriberEntry]:
        """根据邮箱获取订阅记录"""
        pass

    @abstractmethod
    async def get_page(self, offset: int, limit: int) -> List[SubscriberEntry]:
        """按 id 升序获取一页订阅记录"""
        pass

    @abstractmethod
    async def update(self, entry: SubscriberEntry) -> bool:
        """以 email 定位并更新可变字段；记录不存在时返回 False"""
        pass

    @abstractmethod
    async def delete(self, email: str) -> bool:
        """删除订阅记录；记录不存在时返回 False"""
        pass
