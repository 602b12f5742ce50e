"""
交互事件环形缓冲定义。

固定容量，插入总是覆盖 next_index 指向的槽位（最旧的槽位），
事件存活时间达到上限后失效。失效槽位用负半径和哨兵存活时间表示，
消费端只需检查半径符号即可区分活动与失效。
"""

from dataclasses import dataclass, replace
from typing import Tuple

INACTIVE_RADIUS = -1.0
INACTIVE_AGE = 999.0


@dataclass
class InteractionEvent:
    """单个交互事件槽位。"""

    x: float = 0.0  # 水面位置 x
    z: float = 0.0  # 水面位置 z
    radius: float = INACTIVE_RADIUS  # 半径，负值表示失效
    age: float = INACTIVE_AGE  # 存活时间（秒）
    start_time: float = 0.0  # 触发时间（秒）

    @property
    def is_active(self) -> bool:
        """半径非负即为活动事件。"""
        return self.radius >= 0.0


@dataclass(frozen=True)
class EventSnapshot:
    """事件快照，dirty 为 False 时消费端可跳过同步。"""

    events: Tuple[InteractionEvent, ...]
    dirty: bool
    time: float

    @property
    def active_count(self) -> int:
        return sum(1 for event in self.events if event.is_active)


class InteractionEventRing:
    """
    交互事件环形缓冲。

    - trigger(): 写入 next_index 槽位并前移，总是成功（覆盖最旧事件）
    - advance(): 每帧调用一次，更新活动事件的存活时间并处理过期
    - snapshot(): 返回全部槽位的拷贝和 dirty 标记
    """

    def __init__(self, capacity: int = 2, max_lifetime: float = 1.5):
        """
        初始化事件环。

        Args:
            capacity: 槽位数量（固定）
            max_lifetime: 事件最大存活时间（秒）
        """
        if capacity < 1:
            raise ValueError("interaction event ring capacity must be at least 1")
        self._slots = [InteractionEvent() for _ in range(capacity)]
        self._next_index = 0
        self.max_lifetime = max_lifetime
        self._time = 0.0
        # 初始为 dirty，保证初始的全失效状态至少同步一次
        self._dirty = True
        self._changed = False

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def next_index(self) -> int:
        return self._next_index

    @property
    def max_lifetime(self) -> float:
        return self._max_lifetime

    @max_lifetime.setter
    def max_lifetime(self, value: float) -> None:
        self._max_lifetime = max(float(value), 1e-3)

    @property
    def active_count(self) -> int:
        return sum(1 for slot in self._slots if slot.is_active)

    @property
    def dirty(self) -> bool:
        """当前快照是否与上一帧同步的内容不同。"""
        return self._changed or self._dirty

    def slot(self, index: int) -> InteractionEvent:
        """
        获取指定槽位的拷贝。

        Raises:
            IndexError: 索引越界
        """
        if not 0 <= index < len(self._slots):
            raise IndexError(
                f"interaction event slot {index} out of range [0, {len(self._slots)})"
            )
        return replace(self._slots[index])

    def trigger(self, x: float, z: float, radius: float, now: float) -> int:
        """
        写入一个新事件。

        Args:
            x: 水面位置 x
            z: 水面位置 z
            radius: 事件半径，负值截断为 0
            now: 当前时间（秒）

        Returns:
            写入的槽位索引
        """
        index = self._next_index
        slot = self._slots[index]
        slot.x = float(x)
        slot.z = float(z)
        slot.radius = max(float(radius), 0.0)
        slot.age = 0.0
        slot.start_time = float(now)

        self._dirty = True
        self._next_index = (index + 1) % len(self._slots)
        return index

    def advance(self, now: float) -> bool:
        """
        推进事件存活时间。

        活动事件 age = now - start_time；age >= max_lifetime 时失效。
        失效槽位在重新触发前不再更新。

        Args:
            now: 当前时间（秒）

        Returns:
            本次调用后快照是否发生变化
        """
        any_active = False
        for slot in self._slots:
            if not slot.is_active:
                continue

            slot.age = now - slot.start_time
            if slot.age >= self._max_lifetime:
                slot.radius = INACTIVE_RADIUS
                slot.age = INACTIVE_AGE
            else:
                any_active = True
            self._dirty = True

        changed = self._dirty
        self._changed = changed
        # 仍有活动事件时下一帧继续同步，全部失效后停止推送
        self._dirty = any_active
        self._time = now
        return changed

    def snapshot(self) -> EventSnapshot:
        """返回全部槽位的快照。"""
        return EventSnapshot(
            events=tuple(replace(slot) for slot in self._slots),
            dirty=self.dirty,
            time=self._time,
        )
