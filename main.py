"""
FastAPI应用主入口 - 邮件列表 HTTP/JSON 接口
"""
from fastapi import FastAPI

from api.routes import emails
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from application.ports.subscriber_store import SubscriberStore
from core.config import Settings
from core.exceptions import register_exception_handlers
from core.response import success_response


def create_app(store: SubscriberStore, settings: Settings) -> FastAPI:
    """构建 FastAPI 应用

    存储句柄由进程入口持有并注入；应用本身不负责打开或关闭存储。
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        description="Mailing list subscriber registry",
    )
    app.state.store = store
    app.state.settings = settings

    # 添加中间件（注意顺序：从下往上执行）
    # 1. 日志中间件（依赖request_id）
    app.add_middleware(LoggingMiddleware)
    # 2. Request ID中间件（最先执行，为后续中间件提供request_id）
    app.add_middleware(RequestIDMiddleware)

    # 注册全局异常处理器
    register_exception_handlers(app)

    # 注册路由
    app.include_router(emails.router, prefix="/api/v1")

    @app.get("/", tags=["Root"])
    async def root():
        """API根路径"""
        return success_response(
            data={
                "name": settings.PROJECT_NAME,
                "version": settings.VERSION,
                "docs": "/docs",
            },
        )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """健康检查端点"""
        return success_response(data={"status": "healthy"})

    return app
