"""
交互事件环测试。

测试槽位覆盖、存活时间、过期与 dirty 标记。
"""

import pytest

from waterline.models.events import INACTIVE_AGE, INACTIVE_RADIUS, InteractionEventRing


def test_initial_state():
    """测试初始全部槽位失效，且初始为 dirty。"""
    ring = InteractionEventRing(capacity=3)

    snapshot = ring.snapshot()
    assert len(snapshot.events) == 3
    assert snapshot.active_count == 0
    assert snapshot.dirty
    for event in snapshot.events:
        assert event.radius == INACTIVE_RADIUS
        assert event.age == INACTIVE_AGE


def test_two_events_lifetime():
    """测试两个事件的存活时间与先后过期。"""
    ring = InteractionEventRing(capacity=2, max_lifetime=1.5)
    ring.trigger(1.0, 2.0, 0.5, now=0.0)
    ring.trigger(3.0, 4.0, 0.5, now=0.1)

    ring.advance(1.0)
    first, second = ring.snapshot().events
    assert first.is_active and second.is_active
    assert first.age == pytest.approx(1.0)
    assert second.age == pytest.approx(0.9)

    ring.advance(1.55)
    first, second = ring.snapshot().events
    assert not first.is_active
    assert first.age == INACTIVE_AGE
    assert second.is_active
    assert second.age == pytest.approx(1.45)


def test_expires_exactly_at_max_lifetime():
    """测试存活时间达到上限即失效。"""
    ring = InteractionEventRing(capacity=1, max_lifetime=1.0)
    ring.trigger(0.0, 0.0, 1.0, now=0.0)

    ring.advance(1.0)

    assert not ring.slot(0).is_active


def test_trigger_overwrites_oldest():
    """测试容量已满时覆盖最旧事件。"""
    ring = InteractionEventRing(capacity=2)

    assert ring.trigger(1.0, 0.0, 1.0, now=0.0) == 0
    assert ring.trigger(2.0, 0.0, 1.0, now=0.1) == 1
    assert ring.trigger(3.0, 0.0, 1.0, now=0.2) == 0
    assert ring.next_index == 1

    assert ring.slot(0).x == 3.0
    assert ring.slot(0).start_time == 0.2
    assert ring.slot(1).x == 2.0


def test_age_strictly_increases():
    """测试活动事件的存活时间随时间单调递增。"""
    ring = InteractionEventRing(capacity=1, max_lifetime=5.0)
    ring.trigger(0.0, 0.0, 1.0, now=0.0)

    ages = []
    for step in range(1, 6):
        ring.advance(step * 0.02)
        ages.append(ring.slot(0).age)

    assert all(b > a for a, b in zip(ages, ages[1:]))


def test_dirty_lifecycle():
    """测试 dirty 标记：有活动事件时持续为 True，全部失效后的下一帧变为 False。"""
    ring = InteractionEventRing(capacity=1, max_lifetime=0.5)

    # 初始状态同步一次后不再 dirty
    assert ring.advance(0.1)
    assert not ring.advance(0.2)
    assert not ring.snapshot().dirty

    ring.trigger(0.0, 0.0, 1.0, now=0.2)
    assert ring.snapshot().dirty

    assert ring.advance(0.4)
    # 事件在本帧过期，快照仍需同步一次
    assert ring.advance(0.8)
    assert not ring.slot(0).is_active
    assert ring.snapshot().dirty

    assert not ring.advance(1.0)
    assert not ring.snapshot().dirty


def test_negative_radius_is_clamped():
    """测试负半径截断为 0，半径为 0 的事件仍为活动状态。"""
    ring = InteractionEventRing(capacity=1)

    ring.trigger(0.0, 0.0, -2.0, now=0.0)

    assert ring.slot(0).radius == 0.0
    assert ring.slot(0).is_active


def test_slot_returns_copy():
    """测试 slot() 返回拷贝，修改不影响内部状态。"""
    ring = InteractionEventRing(capacity=1)
    ring.trigger(1.0, 1.0, 1.0, now=0.0)

    event = ring.slot(0)
    event.radius = -1.0

    assert ring.slot(0).is_active
    with pytest.raises(IndexError):
        ring.slot(1)


def test_invalid_capacity():
    """测试容量必须为正。"""
    with pytest.raises(ValueError):
        InteractionEventRing(capacity=0)
