"""
Gerstner 波浪场模型定义。

波面位移为各组波的叠加：

    phase  = k * (d · (p - origin)) + t * speed
    height += A * sin(phase)
    offset += Q * A * d * cos(phase)

其中 d 为归一化方向，k = 2π / wavelength。渲染端必须使用同一公式，
保证视觉与物理一致。
"""

import math
from dataclasses import dataclass, field, replace
from typing import List, NamedTuple, Optional, Sequence, Tuple

from waterline.utils.numerical import clamp01, normalize_direction

# 波长低于该值时视为退化波，不产生位移
WAVELENGTH_EPSILON = 1e-3


class WaveDisplacement(NamedTuple):
    """某点的波面位移。"""

    height: float  # 竖直位移（米）
    offset_x: float  # 水平位移 x 分量（米）
    offset_z: float  # 水平位移 z 分量（米）


@dataclass(frozen=True)
class WaveDescriptor:
    """
    单组 Gerstner 波参数。

    不可变对象：normalized_direction 与 wavenumber 在构造时派生，
    修改参数只能通过 updated() 生成新对象，派生量随之重新计算。
    """

    direction: Tuple[float, float] = (1.0, 0.0)  # 传播方向（x, z），任意长度
    amplitude: float = 0.0  # 振幅（米），>= 0
    wavelength: float = 1.0  # 波长（米）
    speed: float = 1.0  # 相位速度系数（弧度/秒）
    steepness: float = 0.0  # 陡度 Q，[0, 1]
    normalized_direction: Tuple[float, float] = field(init=False)
    wavenumber: float = field(init=False)

    def __post_init__(self):
        direction = (float(self.direction[0]), float(self.direction[1]))
        wavelength = float(self.wavelength)
        object.__setattr__(self, "direction", direction)
        object.__setattr__(self, "amplitude", max(0.0, float(self.amplitude)))
        object.__setattr__(self, "wavelength", wavelength)
        object.__setattr__(self, "speed", float(self.speed))
        object.__setattr__(self, "steepness", clamp01(float(self.steepness)))
        object.__setattr__(
            self, "normalized_direction", normalize_direction(*direction)
        )
        object.__setattr__(
            self,
            "wavenumber",
            0.0 if wavelength <= WAVELENGTH_EPSILON else 2.0 * math.pi / wavelength,
        )

    @property
    def is_degenerate(self) -> bool:
        """振幅或波数为 0 时该组波不产生任何位移。"""
        return self.amplitude == 0.0 or self.wavenumber == 0.0

    def updated(self, **values) -> "WaveDescriptor":
        """返回修改了部分参数的新对象（派生量重新计算）。"""
        return replace(self, **values)


class WaveField:
    """
    固定组数的 Gerstner 波浪场。

    组数在构造时确定；运行时可整体重配或单组修改参数。
    位移计算是 (位置, 时间) 的纯函数，不修改任何状态。
    """

    def __init__(
        self,
        descriptors: Sequence[WaveDescriptor],
        origin: Tuple[float, float, float] = (0.0, 0.0, 0.0),
        wave_count: Optional[int] = None,
    ):
        """
        初始化波浪场。

        Args:
            descriptors: 波浪组参数
            origin: 参考原点（世界坐标），仅 x/z 分量参与相位计算
            wave_count: 固定组数，None 表示与 descriptors 数量一致
        """
        count = len(descriptors) if wave_count is None else wave_count
        if count < 1:
            raise ValueError("wave field requires at least one wave descriptor slot")
        self._descriptors: List[WaveDescriptor] = [WaveDescriptor() for _ in range(count)]
        self._origin = (float(origin[0]), float(origin[1]), float(origin[2]))
        self.configure(descriptors)

    @property
    def wave_count(self) -> int:
        """波浪组数量（固定）。"""
        return len(self._descriptors)

    @property
    def descriptors(self) -> Tuple[WaveDescriptor, ...]:
        return tuple(self._descriptors)

    @property
    def origin(self) -> Tuple[float, float, float]:
        return self._origin

    @origin.setter
    def origin(self, value: Tuple[float, float, float]) -> None:
        self._origin = (float(value[0]), float(value[1]), float(value[2]))

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._descriptors):
            raise IndexError(
                f"wave descriptor index {index} out of range [0, {len(self._descriptors)})"
            )

    def descriptor(self, index: int) -> WaveDescriptor:
        """获取指定组的参数。"""
        self._check_index(index)
        return self._descriptors[index]

    def set_descriptor(
        self, index: int, descriptor: Optional[WaveDescriptor] = None, **values
    ) -> WaveDescriptor:
        """
        修改指定组的参数。

        可以传入完整的新参数对象，也可以只传需要修改的字段。

        Args:
            index: 波浪组索引
            descriptor: 新的参数对象
            **values: 需要修改的字段（direction/amplitude/wavelength/speed/steepness）

        Returns:
            修改后的参数对象

        Raises:
            IndexError: 索引越界
        """
        self._check_index(index)
        if descriptor is None:
            descriptor = self._descriptors[index]
        if values:
            descriptor = descriptor.updated(**values)
        self._descriptors[index] = descriptor
        return descriptor

    def configure(self, descriptors: Sequence[WaveDescriptor]) -> None:
        """
        整体重配所有波浪组。

        数量少于固定组数时，剩余组置为零振幅；多于固定组数视为越界。
        """
        if len(descriptors) > len(self._descriptors):
            raise IndexError(
                f"{len(descriptors)} wave descriptors exceed the fixed wave count "
                f"{len(self._descriptors)}"
            )
        for i in range(len(self._descriptors)):
            self._descriptors[i] = descriptors[i] if i < len(descriptors) else WaveDescriptor()

    def displacement_at(self, x: float, z: float, time: float) -> WaveDisplacement:
        """
        计算世界坐标 (x, z) 处在时刻 time 的波面位移。

        Args:
            x: 世界坐标 x（米）
            z: 世界坐标 z（米）
            time: 时间（秒）

        Returns:
            竖直位移与水平位移
        """
        rel_x = x - self._origin[0]
        rel_z = z - self._origin[2]

        height = 0.0
        offset_x = 0.0
        offset_z = 0.0
        for wave in self._descriptors:
            if wave.is_degenerate:
                continue

            dir_x, dir_z = wave.normalized_direction
            phase = wave.wavenumber * (dir_x * rel_x + dir_z * rel_z) + time * wave.speed

            height += wave.amplitude * math.sin(phase)

            q_amp = wave.steepness * wave.amplitude
            cos_phase = math.cos(phase)
            offset_x += q_amp * dir_x * cos_phase
            offset_z += q_amp * dir_z * cos_phase

        return WaveDisplacement(height, offset_x, offset_z)
