"""
浮力与交互触发测试。

测试浸没比例、浮力/力矩、阻尼插值与交互冷却。
"""

import logging
import math

import numpy as np
import pytest

from waterline.models.body import (
    AIR_DRAG_DEFAULT,
    MIN_RADIUS,
    MIN_VOLUME,
    BodyState,
    BuoyancyBody,
    SurfaceSample,
)
from waterline.schemas.base import BodyConfig
from waterline.services.factory import create_body
from waterline.services.integrator import integrate_body, rotation_matrix
from waterline.utils.numerical import linear_interpolation, submerged_fraction

GRAVITY = 9.81


def _make_body(points=((0.0, 0.0, 0.0),), velocity=(0.0, 0.0, 0.0), mass=100.0, **kwargs):
    state = BodyState(
        position=(0.0, 0.0, 0.0),
        velocity=velocity,
        mass=mass,
        sample_points=np.array(points, dtype=float),
    )
    kwargs.setdefault("volume", 0.2)
    kwargs.setdefault("radius", 0.5)
    return BuoyancyBody(body_id="b1", state=state, **kwargs)


@pytest.mark.parametrize(
    "depth, expected",
    [
        (0.5, 1.0),
        (-0.5, 0.0),
        (0.0, 0.5),
        (2.0, 1.0),
        (-2.0, 0.0),
    ],
)
def test_submerged_fraction(depth, expected):
    """测试浸没比例在水面附近线性过渡。"""
    assert submerged_fraction(depth, 0.5) == pytest.approx(expected)


def test_buoyancy_monotonic_in_depth():
    """测试浮力随浸没深度单调不减且非负。"""
    body = _make_body()

    lifts = []
    for surface_y in np.linspace(-1.0, 1.0, 21):
        result = body.apply_step([SurfaceSample(surface_y)], GRAVITY, now=0.0)
        assert result.force[1] >= 0.0
        lifts.append(result.force[1])

    assert all(b >= a for a, b in zip(lifts, lifts[1:]))
    # 完全浸没：ρ * V * g
    assert lifts[-1] == pytest.approx(1000.0 * 0.2 * GRAVITY)


def test_body_in_air_uses_air_drag():
    """测试出水时无浮力，阻尼为空气阻尼。"""
    body = _make_body()

    result = body.apply_step([SurfaceSample(-5.0)], GRAVITY, now=0.0)

    assert np.allclose(result.force, 0.0)
    assert result.submerged_fraction == 0.0
    assert result.drag == AIR_DRAG_DEFAULT


def test_drag_blends_with_submerged_fraction():
    """测试阻尼按平均浸没比例在空气与水中阻尼之间插值。"""
    body = _make_body(submerged_drag=2.0, submerged_angular_drag=1.5)

    result = body.apply_step([SurfaceSample(0.0)], GRAVITY, now=0.0)

    assert result.submerged_fraction == pytest.approx(0.5)
    assert result.drag == pytest.approx(linear_interpolation(AIR_DRAG_DEFAULT, 2.0, 0.5))
    assert result.angular_drag == pytest.approx(linear_interpolation(0.05, 1.5, 0.5))


def test_asymmetric_submersion_produces_torque():
    """测试只有一侧浸没时产生力矩。"""
    body = _make_body(points=((1.0, 0.0, 0.0), (-1.0, 0.0, 0.0)))

    # 右侧采样点完全浸没，左侧出水
    result = body.apply_step([SurfaceSample(1.0), SurfaceSample(-1.0)], GRAVITY, now=0.0)

    lift = 1000.0 * 0.1 * GRAVITY
    assert result.force[1] == pytest.approx(lift)
    assert result.torque[2] == pytest.approx(lift)
    assert result.sample_fractions == (1.0, 0.0)


def test_symmetric_submersion_has_no_torque():
    """测试对称浸没时力矩为零。"""
    body = _make_body(points=((1.0, 0.0, 0.0), (-1.0, 0.0, 0.0)))

    result = body.apply_step([SurfaceSample(0.2), SurfaceSample(0.2)], GRAVITY, now=0.0)

    assert np.allclose(result.torque, 0.0)


def test_sample_count_mismatch():
    """测试水面采样数量与采样点数量不一致时报错。"""
    body = _make_body()

    with pytest.raises(ValueError):
        body.apply_step([SurfaceSample(0.0), SurfaceSample(0.0)], GRAVITY, now=0.0)


def test_volume_and_radius_floors():
    """测试体积与半径下限。"""
    body = _make_body(volume=0.0, radius=0.0)

    assert body.volume == MIN_VOLUME
    assert body.radius == MIN_RADIUS

    result = body.apply_step([SurfaceSample(0.0)], GRAVITY, now=0.0)
    assert math.isfinite(result.submerged_fraction)


def test_interaction_triggers_on_fast_entry():
    """测试快速入水时触发交互，位置包含水平波动位移。"""
    body = _make_body(points=((0.0, -0.5, 0.0),), velocity=(0.0, -2.0, 0.0), mass=1.0)

    result = body.apply_step([SurfaceSample(0.0, 0.3, -0.2)], GRAVITY, now=1.0)

    assert result.triggered
    request = result.interaction
    assert request.body_id == "b1"
    assert request.x == pytest.approx(0.3)
    assert request.z == pytest.approx(-0.2)
    assert request.radius == body.interaction_radius
    assert request.strength == pytest.approx(0.02)
    assert body.last_interaction_time == 1.0


def test_interaction_requires_speed():
    """测试速度不足时不触发。"""
    body = _make_body(points=((0.0, -0.5, 0.0),), velocity=(0.5, -0.5, 0.5))

    result = body.apply_step([SurfaceSample(0.0)], GRAVITY, now=1.0)

    assert not result.triggered


def test_interaction_horizontal_speed():
    """测试水平速度超过阈值时触发。"""
    body = _make_body(points=((0.0, -0.5, 0.0),), velocity=(1.5, 0.0, 1.5))

    result = body.apply_step([SurfaceSample(0.0)], GRAVITY, now=1.0)

    assert result.triggered
    assert result.interaction.strength == 1.0


def test_interaction_uses_first_deep_sample():
    """测试按顺序检查采样点，第一个满足深度条件的点触发。"""
    body = _make_body(
        points=((5.0, 0.0, 0.0), (1.0, -0.5, 0.0), (2.0, -0.5, 0.0)),
        velocity=(0.0, -2.0, 0.0),
    )
    samples = [SurfaceSample(0.0), SurfaceSample(0.0), SurfaceSample(0.0)]

    result = body.apply_step(samples, GRAVITY, now=1.0)

    assert result.interaction.x == pytest.approx(1.0)


@pytest.mark.parametrize("elapsed, expected", [(0.29, False), (0.31, True)])
def test_interaction_cooldown(elapsed, expected):
    """测试冷却时间内不会重复触发。"""
    body = _make_body(
        points=((0.0, -0.5, 0.0),), velocity=(0.0, -2.0, 0.0), interaction_cooldown=0.3
    )
    now = 10.0
    body.last_interaction_time = now - elapsed

    result = body.apply_step([SurfaceSample(0.0)], GRAVITY, now=now)

    assert result.triggered is expected


def test_create_body_places_samples():
    """测试创建浮体时采样点变换到世界坐标。"""
    config = BodyConfig(
        body_id="boat",
        position=(1.0, 2.0, 3.0),
        sample_offsets=[(0.5, 0.0, 0.0), (-0.5, 0.0, 0.0)],
    )

    body = create_body(config)

    assert np.allclose(body.state.sample_points, [[1.5, 2.0, 3.0], [0.5, 2.0, 3.0]])


def test_free_fall_integration():
    """测试空中的浮体在重力作用下加速下落。"""
    body = create_body(BodyConfig(body_id="rock", position=(0.0, 10.0, 0.0)))
    result = body.apply_step([SurfaceSample(0.0)], GRAVITY, now=0.02)

    integrate_body(body, result, 0.02, GRAVITY)

    expected_vy = -GRAVITY * 0.02 * (1.0 - AIR_DRAG_DEFAULT * 0.02)
    assert body.state.velocity[1] == pytest.approx(expected_vy)
    assert body.state.position[1] == pytest.approx(10.0 + expected_vy * 0.02)
    assert body.state.sample_points[0][1] == pytest.approx(body.state.position[1])


def test_rotation_matrix_is_orthonormal():
    """测试旋转矩阵正交。"""
    matrix = rotation_matrix(np.array([0.3, -0.2, 0.9]))

    assert np.allclose(matrix @ matrix.T, np.eye(3))
    assert np.allclose(rotation_matrix(np.zeros(3)), np.eye(3))


def test_create_body_logs_clamps(caplog):
    """测试体积与半径被截断时记录警告。"""
    config = BodyConfig(body_id="tiny", volume=1e-5, radius=1e-3)

    with caplog.at_level(logging.WARNING, logger="waterline.services.factory"):
        body = create_body(config)

    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("Body tiny volume" in m for m in messages)
    assert any("Body tiny radius" in m for m in messages)
    assert body.volume == MIN_VOLUME
    assert body.radius == MIN_RADIUS
