"""
API 请求/响应 Schema 定义。
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from waterline.schemas.base import (
    InteractionRingConfig,
    TimeConfig,
    Vector2,
    WaveFieldConfig,
)
from waterline.schemas.data import InteractionRequestData, SessionStatus


class SessionCreateRequest(BaseModel):
    """创建模拟会话请求体。"""

    waves: WaveFieldConfig = Field(default_factory=WaveFieldConfig)
    ring: InteractionRingConfig = Field(default_factory=InteractionRingConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    autostart: bool = Field(default=False, description="创建后是否立即启动外部时钟")


class SessionResponse(BaseModel):
    """会话基本信息。"""

    session_id: str = Field(..., description="会话唯一 ID")
    status: SessionStatus = Field(..., description="会话状态")
    time: float = Field(default=0.0, description="当前模拟时间（秒）")
    body_count: int = Field(default=0, description="已注册浮体数量")


class SessionListResponse(BaseModel):
    """会话列表。"""

    total: int
    count: int
    sessions: List[SessionResponse]


class WaveUpdateRequest(BaseModel):
    """单组波局部更新，未提供的字段保持原值。"""

    direction: Optional[Vector2] = None
    amplitude: Optional[float] = Field(default=None, ge=0)
    wavelength: Optional[float] = None
    speed: Optional[float] = None
    steepness: Optional[float] = None


class TickRequest(BaseModel):
    """手动步进请求体。"""

    steps: int = Field(default=1, ge=1, le=10000, description="步进次数")


class TickResponse(BaseModel):
    """手动步进结果。"""

    session_id: str
    time: float = Field(..., description="步进后的模拟时间（秒）")
    steps: int = Field(..., description="实际执行的步数")
    events_changed: bool = Field(..., description="最后一步事件快照是否变化")
    interactions: List[InteractionRequestData] = Field(
        default_factory=list, description="本次步进期间产生的交互请求"
    )


class InteractionTriggerRequest(BaseModel):
    """外部接触检测触发交互事件。"""

    x: float = Field(..., description="水面位置 x（米）")
    z: float = Field(..., description="水面位置 z（米）")
    radius: float = Field(default=1.0, ge=0, description="事件半径（米）")


class InteractionTriggerResponse(BaseModel):
    """外部触发结果。"""

    session_id: str
    slot: int = Field(..., description="写入的槽位索引")
    time: float

