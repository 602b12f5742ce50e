"""
坐标与网格工具。

提供水面采样网格生成功能（x/z 平面）。
"""

import math
from typing import Tuple

import numpy as np

from waterline.schemas.base import SurfaceGridConfig, SurfaceRegion


def create_surface_grid(
    region: SurfaceRegion, config: SurfaceGridConfig
) -> Tuple[np.ndarray, np.ndarray]:
    """
    创建水面采样网格坐标。

    点数超过上限时按比例缩小两个方向的采样数。

    Args:
        region: 采样区域
        config: 离散化配置

    Returns:
        (xs, zs) 两个方向的一维坐标数组
    """
    x_range = region.x_max - region.x_min
    z_range = region.z_max - region.z_min

    # 计算网格数量
    n_x = max(1, int(x_range / config.dx) + 1)
    n_z = max(1, int(z_range / config.dz) + 1)
    total_points = n_x * n_z

    # 检查点数上限
    if total_points > config.max_points:
        scale = math.sqrt(config.max_points / total_points)
        n_x = max(1, int(n_x * scale))
        n_z = max(1, int(n_z * scale))

    xs = np.linspace(region.x_min, region.x_max, n_x)
    zs = np.linspace(region.z_min, region.z_max, n_z)
    return xs, zs
