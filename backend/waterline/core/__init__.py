"""
核心模块：配置、会话存储与会话管理。
"""

from waterline.core.config import Settings, settings

__all__ = ["Settings", "settings"]
