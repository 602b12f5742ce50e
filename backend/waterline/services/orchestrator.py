"""
模拟编排服务。

SimulationOrchestrator 持有波浪场、已注册浮体列表与交互事件环，
按固定顺序驱动每一步：推进时钟 -> 逐个浮体采样波面并计算受力 ->
转发交互请求 -> 推进事件存活时间。
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from waterline.models.body import BodyStepResult, BuoyancyBody, InteractionRequest, SurfaceSample
from waterline.models.events import EventSnapshot, InteractionEventRing
from waterline.models.wave import WaveDescriptor, WaveDisplacement, WaveField

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """单步结果。"""

    time: float  # 步进后的模拟时间
    results: Dict[str, BodyStepResult] = field(default_factory=dict)  # 各浮体受力
    interactions: List[InteractionRequest] = field(default_factory=list)  # 本步交互请求
    events_changed: bool = False  # 事件快照是否变化


class SimulationOrchestrator:
    """
    模拟编排器。

    浮体由外部注册/注销，编排器只保存引用；每步按注册顺序遍历一次。
    """

    def __init__(
        self,
        wave_field: WaveField,
        event_ring: InteractionEventRing,
        water_base_level: float = 0.0,
        gravity: float = 9.81,
        start_time: float = 0.0,
    ):
        """
        初始化编排器。

        Args:
            wave_field: 波浪场
            event_ring: 交互事件环
            water_base_level: 静水面高度（米）
            gravity: 重力加速度大小（m/s²）
            start_time: 初始模拟时间（秒）
        """
        self.wave_field = wave_field
        self.event_ring = event_ring
        self.water_base_level = water_base_level
        self.gravity = gravity
        self._time = start_time
        self._bodies: List[BuoyancyBody] = []

    @property
    def time(self) -> float:
        """当前模拟时间（秒）。"""
        return self._time

    @property
    def bodies(self) -> Tuple[BuoyancyBody, ...]:
        return tuple(self._bodies)

    def configure_waves(self, descriptors: Sequence[WaveDescriptor]) -> None:
        """整体重配波浪组。"""
        self.wave_field.configure(descriptors)

    def displacement_at(
        self, x: float, z: float, time: Optional[float] = None
    ) -> WaveDisplacement:
        """查询波面位移，time 为 None 时使用当前模拟时间。"""
        return self.wave_field.displacement_at(x, z, self._time if time is None else time)

    def surface_sample(self, x: float, z: float, time: float) -> SurfaceSample:
        """查询 (x, z) 处的水面高度与水平位移。"""
        displacement = self.wave_field.displacement_at(x, z, time)
        return SurfaceSample(
            surface_y=self.water_base_level + displacement.height,
            offset_x=displacement.offset_x,
            offset_z=displacement.offset_z,
        )

    def register_body(self, body: BuoyancyBody) -> bool:
        """
        注册浮体。

        浮体标识在编排器内唯一，单步结果按标识索引；
        同一对象或同一标识的浮体重复注册都会被忽略。

        Returns:
            是否新注册（重复注册返回 False）
        """
        if body in self._bodies:
            return False
        if self.get_body(body.body_id) is not None:
            logger.warning(f"Body id {body.body_id} is already registered, ignoring")
            return False
        self._bodies.append(body)
        logger.debug(f"Registered body {body.body_id} ({len(self._bodies)} total)")
        return True

    def unregister_body(self, body: BuoyancyBody) -> bool:
        """
        注销浮体。

        Returns:
            是否确实移除（未注册的浮体返回 False）
        """
        if body not in self._bodies:
            return False
        self._bodies.remove(body)
        logger.debug(f"Unregistered body {body.body_id} ({len(self._bodies)} total)")
        return True

    def get_body(self, body_id: str) -> Optional[BuoyancyBody]:
        """按标识查找浮体。"""
        for body in self._bodies:
            if body.body_id == body_id:
                return body
        return None

    def trigger_interaction(self, x: float, z: float, radius: float) -> int:
        """外部接触检测直接触发交互事件，返回写入的槽位。"""
        return self.event_ring.trigger(x, z, radius, self._time)

    def tick(self, dt: float) -> TickReport:
        """
        执行一个固定步长。

        Args:
            dt: 步长（秒），必须为正

        Returns:
            本步各浮体受力、交互请求与事件变化标记
        """
        if dt <= 0:
            raise ValueError(f"tick dt must be positive, got {dt}")

        # 1. 推进时钟
        self._time += dt
        now = self._time
        report = TickReport(time=now)

        # 2. 逐个浮体：采样波面 -> 受力 -> 交互请求
        for body in self._bodies:
            samples = [
                self.surface_sample(point[0], point[2], now)
                for point in body.state.sample_points
            ]
            result = body.apply_step(samples, self.gravity, now)
            report.results[body.body_id] = result

            if result.interaction is not None:
                request = result.interaction
                self.event_ring.trigger(request.x, request.z, request.radius, now)
                report.interactions.append(request)
                logger.debug(
                    f"Body {body.body_id} triggered interaction at "
                    f"({request.x:.2f}, {request.z:.2f})"
                )

        # 3. 推进事件（每步一次）
        report.events_changed = self.event_ring.advance(now)
        return report

    def event_snapshot(self) -> EventSnapshot:
        """返回交互事件快照。"""
        return self.event_ring.snapshot()
