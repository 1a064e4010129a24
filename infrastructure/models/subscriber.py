"""
订阅者数据库模型 - SQLAlchemy ORM模型
注意：这是基础设施层的实现细节，不是领域模型
"""
from sqlalchemy import Column, Integer, String, Boolean

from .base import Base


class SubscriberModel(Base):
    """
    订阅者数据库模型

    confirmed_at 以 Unix 秒存储（NULL 表示未确认），与线上格式保持同一精度
    """
    __tablename__ = "emails"
    # AUTOINCREMENT：删除最大 id 的行后也不会复用该 id
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False, comment="邮箱")
    confirmed_at = Column(Integer, nullable=True, comment="确认时间（Unix 秒）")
    opt_out = Column(Boolean, default=False, nullable=False, comment="是否退订")

    def __repr__(self):
        return f"<SubscriberModel(id={self.id}, email='{self.email}', opt_out={self.opt_out})>"
