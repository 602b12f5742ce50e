"""
对象构建服务。

把经过校验的配置 Schema 转换为核心模型对象。
退化配置（波长过小、方向为零向量等）不会报错，只在这里记录一次警告。
"""

import logging
from typing import List

from waterline.core.config import settings
from waterline.models.body import BodyState, BuoyancyBody, MIN_RADIUS, MIN_VOLUME
from waterline.models.events import InteractionEventRing
from waterline.models.wave import WAVELENGTH_EPSILON, WaveDescriptor, WaveField
from waterline.schemas.base import (
    BodyConfig,
    InteractionRingConfig,
    TimeConfig,
    WaveConfig,
    WaveFieldConfig,
)
from waterline.services.integrator import update_sample_points
from waterline.services.orchestrator import SimulationOrchestrator
from waterline.utils.numerical import DIRECTION_EPSILON_SQR

logger = logging.getLogger(__name__)


def create_wave_descriptor(config: WaveConfig) -> WaveDescriptor:
    """
    创建单组波参数。

    Args:
        config: 波浪组配置

    Returns:
        波参数对象
    """
    return WaveDescriptor(
        direction=config.direction,
        amplitude=config.amplitude,
        wavelength=config.wavelength,
        speed=config.speed,
        steepness=config.steepness,
    )


def warn_if_degenerate(descriptor: WaveDescriptor, index: int) -> None:
    """
    对退化的波参数记录警告（不报错，该组波按退化规则处理）。

    Args:
        descriptor: 波参数
        index: 波浪组索引
    """
    dir_x, dir_z = descriptor.direction
    if dir_x * dir_x + dir_z * dir_z <= DIRECTION_EPSILON_SQR:
        logger.warning(f"Wave {index} has a zero direction, falling back to +x")
    if descriptor.wavelength <= WAVELENGTH_EPSILON:
        logger.warning(
            f"Wave {index} has wavelength {descriptor.wavelength:.4g} <= "
            f"{WAVELENGTH_EPSILON:.4g} and will not displace the surface"
        )


def create_wave_descriptors(configs: List[WaveConfig]) -> List[WaveDescriptor]:
    """批量创建波参数，并对退化配置记录警告。"""
    descriptors = []
    for index, config in enumerate(configs):
        descriptor = create_wave_descriptor(config)
        warn_if_degenerate(descriptor, index)
        descriptors.append(descriptor)
    return descriptors


def create_wave_field(config: WaveFieldConfig) -> WaveField:
    """
    创建波浪场。

    Args:
        config: 波浪场配置

    Returns:
        波浪场对象
    """
    return WaveField(
        descriptors=create_wave_descriptors(config.waves),
        origin=config.origin,
        wave_count=config.wave_count,
    )


def create_event_ring(config: InteractionRingConfig) -> InteractionEventRing:
    """创建交互事件环。"""
    return InteractionEventRing(
        capacity=config.capacity, max_lifetime=config.max_lifetime
    )


def create_body(config: BodyConfig) -> BuoyancyBody:
    """
    创建浮体并初始化世界坐标采样点。

    Args:
        config: 浮体配置

    Returns:
        浮体对象
    """
    if config.volume < MIN_VOLUME:
        logger.warning(
            f"Body {config.body_id} volume {config.volume:.4g} clamped to {MIN_VOLUME:.4g}"
        )
    if config.radius < MIN_RADIUS:
        logger.warning(
            f"Body {config.body_id} radius {config.radius:.4g} clamped to {MIN_RADIUS:.4g}"
        )

    state = BodyState(
        position=config.position,
        velocity=config.velocity,
        angular_velocity=config.angular_velocity,
        mass=config.mass,
    )
    body = BuoyancyBody(
        body_id=config.body_id,
        state=state,
        sample_offsets=config.sample_offsets,
        volume=config.volume,
        radius=config.radius,
        submerged_drag=config.submerged_drag,
        submerged_angular_drag=config.submerged_angular_drag,
        air_drag=settings.air_drag,
        air_angular_drag=settings.air_angular_drag,
        force_multiplier=config.force_multiplier,
        water_density=settings.water_density,
        interaction_depth_threshold=config.interaction_depth_threshold,
        interaction_vertical_speed=config.interaction_vertical_speed,
        interaction_horizontal_speed=config.interaction_horizontal_speed,
        interaction_radius=config.interaction_radius,
        interaction_cooldown=config.interaction_cooldown,
    )
    update_sample_points(body)
    return body


def create_orchestrator(
    wave_config: WaveFieldConfig,
    ring_config: InteractionRingConfig,
    time_config: TimeConfig,
) -> SimulationOrchestrator:
    """
    创建模拟编排器。

    Args:
        wave_config: 波浪场配置
        ring_config: 事件环配置
        time_config: 时间配置

    Returns:
        编排器对象
    """
    return SimulationOrchestrator(
        wave_field=create_wave_field(wave_config),
        event_ring=create_event_ring(ring_config),
        water_base_level=time_config.water_base_level,
        gravity=time_config.gravity,
    )
