"""
数值计算工具。

提供截断、线性插值、浸没比例等小型数值函数。
"""

import math
from typing import Tuple

# 方向向量长度平方低于该值时视为零向量
DIRECTION_EPSILON_SQR = 1e-4

# 零向量时使用的默认方向（x 轴正向）
CANONICAL_DIRECTION = (1.0, 0.0)


def clamp01(value: float) -> float:
    """将数值截断到 [0, 1]。"""
    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value


def linear_interpolation(a: float, b: float, alpha: float) -> float:
    """
    线性插值。

    alpha 会先截断到 [0, 1]，与物理引擎中的 Lerp 行为一致。

    Args:
        a: 起点值
        b: 终点值
        alpha: 插值系数

    Returns:
        插值结果
    """
    alpha = clamp01(alpha)
    return a + alpha * (b - a)


def submerged_fraction(depth: float, radius: float) -> float:
    """
    计算采样点的浸没比例。

    在以水面为中心、宽度为 2·radius 的带内线性过渡，
    避免在水面处出现力的跳变：

        fraction = clamp01((depth + radius) / (2 * radius))

    Args:
        depth: 浸没深度（米），水面高度减采样点高度，正值表示在水下
        radius: 浸没判定半径（米），必须为正

    Returns:
        浸没比例，范围 [0, 1]
    """
    return clamp01((depth + radius) / (2.0 * radius))


def normalize_direction(x: float, y: float) -> Tuple[float, float]:
    """
    归一化二维方向向量。

    长度接近 0 时返回默认方向 (1, 0)。
    """
    length_sqr = x * x + y * y
    if length_sqr <= DIRECTION_EPSILON_SQR:
        return CANONICAL_DIRECTION
    length = math.sqrt(length_sqr)
    return x / length, y / length
