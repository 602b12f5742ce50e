"""
FastAPI 应用入口。
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from waterline import __version__
from waterline.api import api_router
from waterline.core.config import settings
from waterline.core.storage import session_storage

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理器。

    关闭时停止所有仍在运行的会话时钟。
    """
    logger.info(f"Starting {settings.app_name}...")

    yield

    logger.info(f"Shutting down {settings.app_name}...")

    running_sessions = [
        session for session in session_storage.list_sessions() if session.clock_running
    ]
    if running_sessions:
        logger.info(f"Stopping {len(running_sessions)} session clocks...")
        for session in running_sessions:
            session.stop_requested = True
            session.clock_task.cancel()
        await asyncio.gather(
            *(session.clock_task for session in running_sessions),
            return_exceptions=True,
        )

    logger.info("Backend server shutdown complete.")


def create_app() -> FastAPI:
    """创建并配置 FastAPI 应用实例。"""
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Gerstner 波浪场、浮力与水面交互事件模拟后端服务",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 挂载 API 路由
    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["root"])
    async def root():
        """根路径。"""
        return {
            "message": f"{settings.app_name} API",
            "version": __version__,
            "docs": "/docs",
        }

    @app.get("/health", tags=["health"])
    async def health():
        """健康检查。"""
        return {"status": "healthy", "sessions": len(session_storage.list_sessions())}

    return app


app = create_app()
