"""
浮体模型定义。

BuoyancyBody 根据采样点处的水面高度计算浸没比例、浮力、力矩与阻尼，
并判断是否需要向交互事件环发出触发请求。
物理状态（BodyState）由外部积分器持有和推进，这里只读取。
"""

import math
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Sequence, Tuple

import numpy as np

from waterline.utils.numerical import clamp01, linear_interpolation, submerged_fraction

# 体积与半径下限，避免浸没比例计算除零
MIN_VOLUME = 1e-4
MIN_RADIUS = 1e-2

# 浸没比例低于该值时视为出水
SUBMERGED_EPSILON = 1e-3

# 飞溅强度 = clamp01(速度 * 质量 * 系数)
SPLASH_STRENGTH_SCALE = 0.01

AIR_DRAG_DEFAULT = 0.05
AIR_ANGULAR_DRAG_DEFAULT = 0.05
WATER_DENSITY_DEFAULT = 1000.0

UP = np.array([0.0, 1.0, 0.0])


def _vector3(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3).copy()


class SurfaceSample(NamedTuple):
    """采样点处的水面信息。"""

    surface_y: float  # 水面高度（世界坐标）
    offset_x: float = 0.0  # 水平波动位移 x
    offset_z: float = 0.0  # 水平波动位移 z


@dataclass
class BodyState:
    """外部持有的刚体状态（y 轴向上，水面为 x/z 平面）。"""

    position: np.ndarray  # 质心位置，shape: (3,)
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: np.ndarray = field(default_factory=lambda: np.eye(3))  # 旋转矩阵
    mass: float = 1.0  # 质量（kg）
    sample_points: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 3))
    )  # 世界坐标采样点，shape: (n, 3)

    def __post_init__(self):
        self.position = _vector3(self.position)
        self.velocity = _vector3(self.velocity)
        self.angular_velocity = _vector3(self.angular_velocity)
        self.orientation = np.asarray(self.orientation, dtype=float).reshape(3, 3).copy()
        self.sample_points = np.asarray(self.sample_points, dtype=float).reshape(-1, 3).copy()


@dataclass
class InteractionRequest:
    """浮体发出的交互事件触发请求。"""

    body_id: Optional[str]  # 触发的浮体
    x: float  # 水面位置 x（含水平波动位移）
    z: float  # 水面位置 z（含水平波动位移）
    surface_y: float  # 水面高度
    radius: float  # 事件半径
    time: float  # 触发时间
    strength: float = 0.0  # 归一化飞溅强度


@dataclass
class BodyStepResult:
    """单步浮力计算结果。"""

    force: np.ndarray  # 浮力合力，shape: (3,)
    torque: np.ndarray  # 相对质心的力矩，shape: (3,)
    drag: float  # 线性阻尼
    angular_drag: float  # 角阻尼
    submerged_fraction: float  # 平均浸没比例
    sample_fractions: Tuple[float, ...] = ()  # 各采样点浸没比例
    interaction: Optional[InteractionRequest] = None  # 交互触发请求

    @property
    def triggered(self) -> bool:
        return self.interaction is not None


@dataclass(eq=False)
class BuoyancyBody:
    """
    浮体。

    按对象身份比较（注册列表只引用，不拷贝）。
    """

    body_id: str
    state: BodyState
    sample_offsets: np.ndarray = field(default_factory=lambda: np.zeros((1, 3)))
    volume: float = 0.1  # 近似排水体积（m³）
    radius: float = 0.1  # 浸没判定半径（米）
    submerged_drag: float = 2.0
    submerged_angular_drag: float = 1.5
    air_drag: float = AIR_DRAG_DEFAULT
    air_angular_drag: float = AIR_ANGULAR_DRAG_DEFAULT
    force_multiplier: float = 1.0
    water_density: float = WATER_DENSITY_DEFAULT
    interaction_depth_threshold: float = 0.15
    interaction_vertical_speed: float = 1.2
    interaction_horizontal_speed: float = 1.8
    interaction_radius: float = 1.0
    interaction_cooldown: float = 0.3
    last_interaction_time: float = -math.inf  # 初始为"很久以前"，首次接触必定触发

    def __post_init__(self):
        self.sample_offsets = np.asarray(self.sample_offsets, dtype=float).reshape(-1, 3).copy()
        self.volume = max(float(self.volume), MIN_VOLUME)
        self.radius = max(float(self.radius), MIN_RADIUS)

    @property
    def horizontal_speed_sqr(self) -> float:
        """水平速度阈值的平方。"""
        return self.interaction_horizontal_speed * self.interaction_horizontal_speed

    def apply_step(
        self, samples: Sequence[SurfaceSample], gravity: float, now: float
    ) -> BodyStepResult:
        """
        根据各采样点的水面信息计算本步受力。

        浮力作用在采样点而非质心，非对称浸没会产生力矩。
        排水体积在各采样点之间平均分配。

        Args:
            samples: 与 state.sample_points 一一对应的水面信息
            gravity: 重力加速度大小（m/s²）
            now: 当前模拟时间（秒）

        Returns:
            本步受力、阻尼与交互请求
        """
        points = self.state.sample_points
        if len(samples) != len(points):
            raise ValueError(
                f"expected {len(points)} surface samples for body {self.body_id}, got {len(samples)}"
            )

        force = np.zeros(3)
        torque = np.zeros(3)
        if len(points) == 0:
            return BodyStepResult(
                force=force,
                torque=torque,
                drag=self.air_drag,
                angular_drag=self.air_angular_drag,
                submerged_fraction=0.0,
            )

        volume_per_sample = self.volume / len(points)
        fractions = []
        for point, sample in zip(points, samples):
            depth = sample.surface_y - point[1]
            fraction = submerged_fraction(depth, self.radius)
            fractions.append(fraction)

            if fraction > SUBMERGED_EPSILON:
                displaced_mass = self.water_density * volume_per_sample * fraction
                lift = UP * (displaced_mass * gravity * self.force_multiplier)
                force += lift
                torque += np.cross(point - self.state.position, lift)

        mean_fraction = sum(fractions) / len(fractions)
        if mean_fraction > SUBMERGED_EPSILON:
            drag = linear_interpolation(self.air_drag, self.submerged_drag, mean_fraction)
            angular_drag = linear_interpolation(
                self.air_angular_drag, self.submerged_angular_drag, mean_fraction
            )
        else:
            drag = self.air_drag
            angular_drag = self.air_angular_drag

        return BodyStepResult(
            force=force,
            torque=torque,
            drag=drag,
            angular_drag=angular_drag,
            submerged_fraction=mean_fraction,
            sample_fractions=tuple(fractions),
            interaction=self._check_interaction(points, samples, now),
        )

    def can_interact(self, now: float) -> bool:
        """冷却时间是否已过。"""
        return now - self.last_interaction_time > self.interaction_cooldown

    def _check_interaction(
        self, points: np.ndarray, samples: Sequence[SurfaceSample], now: float
    ) -> Optional[InteractionRequest]:
        """
        判断是否触发交互事件。

        条件（同时满足）：
        1. 采样点浸没深度超过阈值
        2. 竖直速度超过阈值，或水平速度平方超过阈值平方
        3. 距上次触发超过冷却时间

        按顺序检查采样点，第一个满足深度条件的点触发；每步最多触发一次。
        """
        if not self.can_interact(now):
            return None

        vx, vy, vz = self.state.velocity
        fast_vertical = abs(vy) > self.interaction_vertical_speed
        fast_horizontal = vx * vx + vz * vz > self.horizontal_speed_sqr
        if not (fast_vertical or fast_horizontal):
            return None

        for point, sample in zip(points, samples):
            depth = sample.surface_y - point[1]
            if depth > self.interaction_depth_threshold:
                self.last_interaction_time = now
                speed = float(np.linalg.norm(self.state.velocity))
                return InteractionRequest(
                    body_id=self.body_id,
                    x=float(point[0] + sample.offset_x),
                    z=float(point[2] + sample.offset_z),
                    surface_y=float(sample.surface_y),
                    radius=self.interaction_radius,
                    time=now,
                    strength=clamp01(speed * self.state.mass * SPLASH_STRENGTH_SCALE),
                )
        return None
