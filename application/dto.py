"""
数据传输对象（DTO）- HTTP 表现层与领域记录之间的数据传输

confirmed_at 在 JSON 中同样以 Unix 秒表示，0 表示未确认，与 gRPC 线上格式保持一致。
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.subscriber.entity import SubscriberEntry
from shared.epoch import decode_timestamp, encode_timestamp


class CreateEmailDTO(BaseModel):
    """订阅创建DTO"""
    email: str = Field(..., description="邮箱地址（原样存储，格式由领域实体校验）")


class EmailEntryDTO(BaseModel):
    """订阅记录DTO（请求与响应共用）"""
    id: int = Field(default=0, description="存储分配的ID；更新时忽略")
    email: str = Field(..., description="邮箱地址（更新时作为定位键）")
    confirmed_at: int = Field(default=0, description="确认时间（Unix 秒），0 表示未确认")
    opt_out: bool = Field(default=False, description="是否退订")

    model_config = ConfigDict(json_schema_extra={
        "example": {"id": 1, "email": "a@example.com", "confirmed_at": 0, "opt_out": False}
    })

    @classmethod
    def from_entity(cls, entry: SubscriberEntry) -> "EmailEntryDTO":
        return cls(
            id=int(entry.id or 0),
            email=entry.email,
            confirmed_at=encode_timestamp(entry.confirmed_at),
            opt_out=bool(entry.opt_out),
        )

    def to_entity(self) -> SubscriberEntry:
        return SubscriberEntry(
            id=self.id or None,
            email=self.email,
            confirmed_at=decode_timestamp(self.confirmed_at),
            opt_out=self.opt_out,
        )


def entry_to_dto(entry: Optional[SubscriberEntry]) -> Optional[EmailEntryDTO]:
    """None（未找到）原样返回"""
    return EmailEntryDTO.from_entity(entry) if entry is not None else None
