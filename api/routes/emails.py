"""
订阅 API 路由 - FastAPI表现层

与 gRPC 服务语义一致："未找到"返回 200 且 data 为 null，而不是 404。
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from application.dto import CreateEmailDTO, EmailEntryDTO, entry_to_dto
from application.ports.subscriber_store import SubscriberStore
from api.dependencies import get_store
from core.logging_config import get_logger
from core.response import success_response, Response as ApiResponse


logger = get_logger(__name__)

router = APIRouter(
    prefix="/emails",
    tags=["Emails"]
)


async def _entry_response(store: SubscriberStore, email: str, message: str) -> ApiResponse:
    entry = await store.get_one(email)
    return success_response(data=entry_to_dto(entry), message=message)


@router.post("", summary="创建订阅", response_model=ApiResponse[Optional[EmailEntryDTO]])
async def create_email(body: CreateEmailDTO, store: SubscriberStore = Depends(get_store)):
    """
    创建订阅记录

    - **email**: 邮箱地址；新记录为未确认、未退订状态
    """
    logger.info("json_create_email", email=body.email)
    await store.create(body.email)
    return await _entry_response(store, body.email, "Created")


@router.get("", summary="分页获取订阅", response_model=ApiResponse[List[EmailEntryDTO]])
async def get_email_batch(
    request: Request,
    page: int = Query(0, ge=0, description="页码（从 0 开始）"),
    count: Optional[int] = Query(None, ge=1, description="每页数量"),
    store: SubscriberStore = Depends(get_store),
):
    """按 id 升序返回一页订阅记录；超出范围的页返回空列表"""
    settings = request.app.state.settings
    size = min(count or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    logger.info("json_get_email_batch", page=page, count=size)
    entries = await store.get_page(page, size)
    return success_response(data=[EmailEntryDTO.from_entity(e) for e in entries])


@router.get("/{email}", summary="获取订阅", response_model=ApiResponse[Optional[EmailEntryDTO]])
async def get_email(email: str, store: SubscriberStore = Depends(get_store)):
    """根据邮箱获取订阅记录"""
    logger.info("json_get_email", email=email)
    return await _entry_response(store, email, "Success")


@router.put("", summary="更新订阅", response_model=ApiResponse[Optional[EmailEntryDTO]])
async def update_email(body: EmailEntryDTO, store: SubscriberStore = Depends(get_store)):
    """
    更新订阅记录

    以 **email** 定位记录，更新 **confirmed_at** 与 **opt_out**；记录不存在时不会新建。
    """
    logger.info("json_update_email", entry=body.model_dump())
    entry = body.to_entity()
    await store.update(entry)
    return await _entry_response(store, entry.email, "Updated")


@router.delete("/{email}", summary="删除订阅", response_model=ApiResponse[Optional[EmailEntryDTO]])
async def delete_email(email: str, store: SubscriberStore = Depends(get_store)):
    """删除订阅记录；返回删除后的查询结果（通常为 null）"""
    logger.info("json_delete_email", email=email)
    await store.delete(email)
    return await _entry_response(store, email, "Deleted")
