"""
API 路由主文件。

统一管理所有 API 路由。
"""

from fastapi import APIRouter

from waterline.api import query, sessions

api_router = APIRouter()

# 挂载子路由
api_router.include_router(sessions.router)
api_router.include_router(query.router)  # query 路由，包含位移/事件/浮体/水面查询
