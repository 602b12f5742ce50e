"""
数据 Schema 定义。

包含会话状态、波面位移、交互事件、浮体状态、水面采样等对外数据模型。
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from waterline.schemas.base import Vector2, Vector3


class SessionStatus(str, Enum):
    """模拟会话状态枚举。"""

    PENDING = "pending"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    COMPLETED = "completed"
    FAILED = "failed"


class DisplacementData(BaseModel):
    """某一时刻某一点的波面位移。"""

    x: float = Field(..., description="查询点 x（米）")
    z: float = Field(..., description="查询点 z（米）")
    time: float = Field(..., description="时间（秒）")
    height: float = Field(..., description="竖直位移（米）")
    offset_x: float = Field(..., description="水平位移 x 分量（米）")
    offset_z: float = Field(..., description="水平位移 z 分量（米）")
    surface_y: float = Field(..., description="水面高度（静水面 + 竖直位移）")


class InteractionEventData(BaseModel):
    """交互事件槽位数据。radius < 0 表示未使用或已过期。"""

    index: int = Field(..., description="槽位索引")
    x: float = Field(..., description="事件位置 x（米）")
    z: float = Field(..., description="事件位置 z（米）")
    radius: float = Field(..., description="事件半径（米），负值表示失效")
    age: float = Field(..., description="事件存活时间（秒），失效时为哨兵值")
    active: bool = Field(..., description="是否处于活动状态")


class EventSnapshotData(BaseModel):
    """交互事件快照。"""

    time: float = Field(..., description="快照对应的模拟时间（秒）")
    dirty: bool = Field(..., description="自上一帧以来是否有变化，未变化时可跳过下游同步")
    max_lifetime: float = Field(..., description="事件最大存活时间（秒）")
    events: List[InteractionEventData] = Field(..., description="全部槽位（固定容量）")


class InteractionRequestData(BaseModel):
    """交互触发请求。"""

    body_id: Optional[str] = Field(default=None, description="触发的浮体，外部触发时为空")
    x: float = Field(..., description="水面位置 x（含水平波动位移）")
    z: float = Field(..., description="水面位置 z（含水平波动位移）")
    surface_y: float = Field(..., description="触发点水面高度")
    radius: float = Field(..., description="事件半径（米）")
    time: float = Field(..., description="触发时间（秒）")
    strength: float = Field(..., description="归一化飞溅强度 [0, 1]")


class BodyStateData(BaseModel):
    """浮体当前物理状态与最近一次受力。"""

    body_id: str = Field(..., description="浮体标识")
    position: Vector3 = Field(..., description="质心位置")
    velocity: Vector3 = Field(..., description="线速度")
    angular_velocity: Vector3 = Field(..., description="角速度")
    sample_points: List[Vector3] = Field(..., description="世界坐标采样点")
    submerged_fraction: float = Field(..., description="平均浸没比例")
    drag: float = Field(..., description="当前线性阻尼")
    angular_drag: float = Field(..., description="当前角阻尼")
    force: Vector3 = Field(..., description="最近一步浮力合力")
    torque: Vector3 = Field(..., description="最近一步浮力力矩")


class WaveParameterData(BaseModel):
    """渲染端使用的单组波参数（与物理端公式一致）。"""

    amplitude: float
    wavenumber: float
    speed: float
    steepness: float
    direction: Vector2 = Field(..., description="归一化方向")


class SurfaceSampleData(BaseModel):
    """水面网格采样结果。"""

    time: float = Field(..., description="采样时间（秒）")
    origin: Vector3 = Field(..., description="波浪参考原点")
    water_base_level: float = Field(..., description="静水面高度")
    xs: List[float] = Field(..., description="x 方向采样坐标")
    zs: List[float] = Field(..., description="z 方向采样坐标")
    heights: List[List[float]] = Field(..., description="水面高度，shape: (len(zs), len(xs))")
    waves: List[WaveParameterData] = Field(..., description="波参数（渲染端同步用）")
