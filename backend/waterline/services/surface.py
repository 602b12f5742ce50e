"""
水面采样服务。

使用与 WaveField.displacement_at 相同的公式，对一批点做向量化计算，
供渲染端生成网格或校验着色器结果；同时提供渲染端需要上传的波参数。
"""

from typing import List, Tuple

import numpy as np

from waterline.models.wave import WaveField
from waterline.schemas.base import SurfaceGridConfig, SurfaceRegion
from waterline.schemas.data import SurfaceSampleData, WaveParameterData
from waterline.utils.coordinate import create_surface_grid


def sample_displacements(
    wave_field: WaveField, xs: np.ndarray, zs: np.ndarray, time: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    向量化计算一批点的波面位移。

    Args:
        wave_field: 波浪场
        xs: x 坐标数组（任意形状）
        zs: z 坐标数组（与 xs 可广播）
        time: 时间（秒）

    Returns:
        (height, offset_x, offset_z)，形状为 xs/zs 广播后的形状
    """
    rel_x, rel_z = np.broadcast_arrays(
        np.asarray(xs, dtype=float) - wave_field.origin[0],
        np.asarray(zs, dtype=float) - wave_field.origin[2],
    )

    height = np.zeros(rel_x.shape)
    offset_x = np.zeros(rel_x.shape)
    offset_z = np.zeros(rel_x.shape)

    for wave in wave_field.descriptors:
        if wave.is_degenerate:
            continue

        dir_x, dir_z = wave.normalized_direction
        phase = wave.wavenumber * (dir_x * rel_x + dir_z * rel_z) + time * wave.speed
        cos_phase = np.cos(phase)

        height += wave.amplitude * np.sin(phase)
        q_amp = wave.steepness * wave.amplitude
        offset_x += q_amp * dir_x * cos_phase
        offset_z += q_amp * dir_z * cos_phase

    return height, offset_x, offset_z


def wave_parameters(wave_field: WaveField) -> List[WaveParameterData]:
    """导出渲染端使用的波参数（amplitude, wavenumber, speed, steepness, direction）。"""
    return [
        WaveParameterData(
            amplitude=wave.amplitude,
            wavenumber=wave.wavenumber,
            speed=wave.speed,
            steepness=wave.steepness,
            direction=wave.normalized_direction,
        )
        for wave in wave_field.descriptors
    ]


def sample_surface_grid(
    wave_field: WaveField,
    region: SurfaceRegion,
    config: SurfaceGridConfig,
    time: float,
    water_base_level: float = 0.0,
) -> SurfaceSampleData:
    """
    在规则网格上采样水面高度。

    Args:
        wave_field: 波浪场
        region: 采样区域
        config: 离散化配置
        time: 采样时间（秒）
        water_base_level: 静水面高度

    Returns:
        水面采样结果，heights 的 shape 为 (len(zs), len(xs))
    """
    xs, zs = create_surface_grid(region, config)
    grid_x, grid_z = np.meshgrid(xs, zs)
    height, _, _ = sample_displacements(wave_field, grid_x, grid_z, time)

    return SurfaceSampleData(
        time=time,
        origin=wave_field.origin,
        water_base_level=water_base_level,
        xs=xs.tolist(),
        zs=zs.tolist(),
        heights=(height + water_base_level).tolist(),
        waves=wave_parameters(wave_field),
    )
