"""
数据库模型基类（SQLAlchemy 2.0 风格）
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# 元数据对象，create_if_absent 据此建表
metadata = Base.metadata
