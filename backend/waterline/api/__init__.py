"""
HTTP API 模块。
"""

from waterline.api.router import api_router

__all__ = ["api_router"]
