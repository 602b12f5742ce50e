"""
Pydantic Schema 模块。

包含请求/响应模型、配置模型、数据模型等。
"""

from waterline.schemas.api import (
    InteractionTriggerRequest,
    InteractionTriggerResponse,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
    TickRequest,
    TickResponse,
    WaveUpdateRequest,
)
from waterline.schemas.base import (
    BodyConfig,
    InteractionRingConfig,
    SurfaceGridConfig,
    SurfaceRegion,
    TimeConfig,
    WaveConfig,
    WaveFieldConfig,
)
from waterline.schemas.data import (
    BodyStateData,
    DisplacementData,
    EventSnapshotData,
    InteractionEventData,
    InteractionRequestData,
    SessionStatus,
    SurfaceSampleData,
    WaveParameterData,
)

__all__ = [
    # 基础配置
    "WaveConfig",
    "WaveFieldConfig",
    "InteractionRingConfig",
    "TimeConfig",
    "BodyConfig",
    "SurfaceRegion",
    "SurfaceGridConfig",
    # 数据模型
    "SessionStatus",
    "DisplacementData",
    "InteractionEventData",
    "EventSnapshotData",
    "InteractionRequestData",
    "BodyStateData",
    "WaveParameterData",
    "SurfaceSampleData",
    # API 请求/响应
    "SessionCreateRequest",
    "SessionResponse",
    "SessionListResponse",
    "WaveUpdateRequest",
    "TickRequest",
    "TickResponse",
    "InteractionTriggerRequest",
    "InteractionTriggerResponse",
]
