"""
配置文件 - 项目配置管理

进程入口处构造一次 ``Settings`` 并显式传递给存储与两个传输层，不提供模块级全局实例。
"""
from typing import Tuple

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DB_PATH = "list.db"
DEFAULT_BIND_JSON = ":8080"
DEFAULT_BIND_GRPC = ":8081"


class GrpcSettings(BaseModel):
    # This maps to GRPC option grpc.max_concurrent_streams
    max_concurrent_streams: int = 100
    # Seconds granted to in-flight RPCs when the server is stopped
    shutdown_grace: float = 5.0


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(default="Mailing List Service", validation_alias=AliasChoices("PROJECT_NAME", "APP_NAME"))
    VERSION: str = Field(default="1.0.0", validation_alias=AliasChoices("VERSION", "APP_VERSION"))
    DEBUG: bool = Field(default=False, validation_alias="DEBUG")

    # 存储位置与两个监听地址；未设置或为空时使用默认值
    DB_PATH: str = Field(default=DEFAULT_DB_PATH, validation_alias="MAILING_LIST_DB")
    BIND_JSON: str = Field(default=DEFAULT_BIND_JSON, validation_alias="MAILINGLIST_BIND_JSON")
    BIND_GRPC: str = Field(default=DEFAULT_BIND_GRPC, validation_alias="MAILINGLIST_BIND_GRPC")

    # 分页配置
    DEFAULT_PAGE_SIZE: int = Field(default=20, validation_alias="DEFAULT_PAGE_SIZE")
    MAX_PAGE_SIZE: int = Field(default=100, validation_alias="MAX_PAGE_SIZE")

    # gRPC settings
    grpc: GrpcSettings = Field(default_factory=GrpcSettings)

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    @field_validator("DB_PATH", mode="before")
    @classmethod
    def _default_db_path(cls, v):
        return v or DEFAULT_DB_PATH

    @field_validator("BIND_JSON", mode="before")
    @classmethod
    def _default_bind_json(cls, v):
        return v or DEFAULT_BIND_JSON

    @field_validator("BIND_GRPC", mode="before")
    @classmethod
    def _default_bind_grpc(cls, v):
        return v or DEFAULT_BIND_GRPC

    @property
    def database_url(self) -> str:
        """SQLite 文件对应的异步驱动 URL"""
        return f"sqlite+aiosqlite:///{self.DB_PATH}"


def split_bind(bind: str, default_host: str = "0.0.0.0") -> Tuple[str, int]:
    """把 ``host:port`` / ``:port`` 形式的监听地址拆分为 (host, port)。

    省略 host 时监听所有网卡；IPv6 地址需使用方括号，例如 ``[::1]:8081``。
    """
    host, sep, port = bind.strip().rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid bind address: {bind!r}")
    host = host.strip("[]") or default_host
    return host, int(port)
