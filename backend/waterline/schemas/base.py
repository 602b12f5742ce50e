"""
基础配置 Schema 定义。

包含波浪组、波浪场、交互事件环、时间、浮体、采样区域等配置模型。
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from waterline.core.config import settings

Vector2 = Tuple[float, float]
Vector3 = Tuple[float, float, float]


class WaveConfig(BaseModel):
    """单组 Gerstner 波参数。"""

    direction: Vector2 = Field(
        default=(1.0, 0.0), description="传播方向（水平面 x/z 分量），任意长度，内部归一化"
    )
    amplitude: float = Field(default=0.0, ge=0, description="振幅（米）")
    wavelength: float = Field(
        default=1.0,
        description="波长（米），小于等于 0.001 时该组波不产生位移",
    )
    speed: float = Field(default=1.0, description="相位速度系数（弧度/秒）")
    steepness: float = Field(
        default=0.0, description="陡度 Q，超出 [0, 1] 时截断"
    )

    @field_validator("steepness")
    @classmethod
    def clamp_steepness(cls, v):
        """陡度截断到 [0, 1]。"""
        return min(max(v, 0.0), 1.0)


def _default_waves() -> List[WaveConfig]:
    """默认四组波（主涌浪 + 次涌浪 + 两组细碎波）。"""
    return [
        WaveConfig(direction=(1.0, 0.2), amplitude=0.4, wavelength=7.0, speed=1.2, steepness=0.8),
        WaveConfig(direction=(0.7, 0.7), amplitude=0.3, wavelength=3.5, speed=1.5, steepness=0.8),
        WaveConfig(direction=(1.0, -0.8), amplitude=0.08, wavelength=1.5, speed=2.0, steepness=0.9),
        WaveConfig(direction=(0.3, -0.5), amplitude=0.05, wavelength=0.9, speed=2.2, steepness=0.9),
    ]


class WaveFieldConfig(BaseModel):
    """波浪场配置（固定组数）。"""

    waves: List[WaveConfig] = Field(
        default_factory=_default_waves, description="波浪组列表（按顺序）"
    )
    origin: Vector3 = Field(
        default=(0.0, 0.0, 0.0), description="波浪参考原点（世界坐标）"
    )
    wave_count: Optional[int] = Field(
        default=None,
        ge=1,
        le=8,
        description="波浪组数量（构造后固定），None 表示与 waves 长度一致",
    )

    @model_validator(mode="after")
    def validate_wave_count(self):
        """验证波浪组数量不超过固定容量。"""
        if self.wave_count is not None and len(self.waves) > self.wave_count:
            raise ValueError("number of waves must not exceed wave_count")
        if self.wave_count is None and not self.waves:
            raise ValueError("at least one wave is required when wave_count is not set")
        return self


class InteractionRingConfig(BaseModel):
    """交互事件环形缓冲配置。"""

    capacity: int = Field(
        default=settings.event_ring_capacity,
        ge=1,
        le=64,
        description="同时跟踪的最大事件数",
    )
    max_lifetime: float = Field(
        default=settings.interaction_max_lifetime,
        gt=0,
        description="事件最大存活时间（秒），到达后事件失效",
    )


class TimeConfig(BaseModel):
    """时间与环境配置。"""

    dt: float = Field(
        default=settings.fixed_dt,
        gt=0,
        description="固定物理步长（秒），例如 0.02 表示 20ms",
    )
    gravity: float = Field(
        default=settings.gravity, ge=0, description="重力加速度大小（m/s²）"
    )
    water_base_level: float = Field(
        default=settings.water_base_level, description="静水面高度（米）"
    )
    T_total: Optional[float] = Field(
        default=None,
        description="时钟运行总时长（秒），None 或 -1 表示无限制持续运行",
    )

    @field_validator("T_total")
    @classmethod
    def validate_T_total(cls, v):
        """验证 T_total，-1 转换为 None 表示无限制。"""
        if v is None or v == -1:
            return None
        if v <= 0:
            raise ValueError("T_total must be greater than 0, or use -1/None for unlimited")
        return v


class BodyConfig(BaseModel):
    """浮体配置（物理状态 + 浮力参数 + 交互阈值）。"""

    body_id: str = Field(..., min_length=1, description="浮体唯一标识")
    position: Vector3 = Field(default=(0.0, 0.0, 0.0), description="质心位置（世界坐标）")
    velocity: Vector3 = Field(default=(0.0, 0.0, 0.0), description="线速度（m/s）")
    angular_velocity: Vector3 = Field(
        default=(0.0, 0.0, 0.0), description="角速度（rad/s）"
    )
    mass: float = Field(default=100.0, gt=0, description="质量（kg）")
    sample_offsets: List[Vector3] = Field(
        default_factory=lambda: [(0.0, 0.0, 0.0)],
        min_length=1,
        description="相对于质心的局部采样点偏移",
    )
    volume: float = Field(default=0.2, gt=0, description="近似排水体积（m³）")
    radius: float = Field(default=0.25, gt=0, description="浸没判定半径（米）")
    submerged_drag: float = Field(default=2.0, ge=0, description="完全浸没时的线性阻尼")
    submerged_angular_drag: float = Field(
        default=1.5, ge=0, description="完全浸没时的角阻尼"
    )
    force_multiplier: float = Field(default=1.0, ge=0, description="浮力倍率")
    interaction_depth_threshold: float = Field(
        default=0.15, description="触发交互的最小浸没深度（米）"
    )
    interaction_vertical_speed: float = Field(
        default=1.2, ge=0, description="触发交互的最小竖直速度（m/s）"
    )
    interaction_horizontal_speed: float = Field(
        default=1.8, ge=0, description="触发交互的最小水平速度（m/s）"
    )
    interaction_radius: float = Field(default=1.0, ge=0, description="交互事件半径（米）")
    interaction_cooldown: float = Field(default=0.3, ge=0, description="交互冷却时间（秒）")


class SurfaceRegion(BaseModel):
    """水面采样矩形区域（x/z 平面）。"""

    x_min: float = Field(..., description="最小 x（米）")
    z_min: float = Field(..., description="最小 z（米）")
    x_max: float = Field(..., description="最大 x（米）")
    z_max: float = Field(..., description="最大 z（米）")

    @field_validator("x_max")
    @classmethod
    def validate_x_range(cls, v, info):
        """验证 x 范围合理性。"""
        if "x_min" in info.data and v <= info.data["x_min"]:
            raise ValueError("x_max must be greater than x_min")
        return v

    @field_validator("z_max")
    @classmethod
    def validate_z_range(cls, v, info):
        """验证 z 范围合理性。"""
        if "z_min" in info.data and v <= info.data["z_min"]:
            raise ValueError("z_max must be greater than z_min")
        return v


class SurfaceGridConfig(BaseModel):
    """水面采样网格离散化配置。"""

    dx: float = Field(default=1.0, gt=0, description="x 方向采样间隔（米）")
    dz: float = Field(default=1.0, gt=0, description="z 方向采样间隔（米）")
    max_points: int = Field(
        default=5000,
        ge=1,
        description="最大采样点数量上限，用于控制性能和响应体积",
    )
