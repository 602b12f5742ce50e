"""
通用工具函数模块。
"""

from waterline.utils.coordinate import create_surface_grid
from waterline.utils.numerical import (
    clamp01,
    linear_interpolation,
    normalize_direction,
    submerged_fraction,
)

__all__ = [
    "clamp01",
    "linear_interpolation",
    "submerged_fraction",
    "normalize_direction",
    "create_surface_grid",
]
