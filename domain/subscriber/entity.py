"""
订阅者领域实体 - 邮件列表中的一条订阅记录
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import re

from domain.common.exceptions import DomainValidationException
from shared.epoch import ensure_utc


EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


@dataclass
class SubscriberEntry:
    """订阅记录 - 领域核心

    - ``id`` 由存储分配，创建后不可变
    - ``email`` 唯一，是查询/更新/删除的自然键
    - ``confirmed_at`` 为 ``None`` 表示尚未确认
    - ``opt_out`` 为 True 表示保留记录但不再投递
    """

    id: Optional[int]
    email: str
    confirmed_at: Optional[datetime] = None
    opt_out: bool = False

    def __post_init__(self):
        """初始化后的业务规则验证"""
        self.validate_email()
        if self.confirmed_at is not None:
            self.confirmed_at = ensure_utc(self.confirmed_at)

    def validate_email(self) -> None:
        """业务规则：邮箱格式验证"""
        if not EMAIL_PATTERN.match(self.email or ""):
            raise DomainValidationException(f"Invalid email address: {self.email!r}", field="email")
