"""
刚体积分服务。

作为外部物理积分器的参考实现：把浮力步的结果作用到 BodyState 上，
并把局部采样偏移变换到世界坐标。

采用半隐式（辛）欧拉：先用加速度更新速度，再用新速度更新位置。
阻尼按 v *= max(0, 1 - drag * dt) 施加。
"""

import numpy as np

from waterline.models.body import BodyState, BodyStepResult, BuoyancyBody

# 实心球转动惯量系数 I = 2/5 * m * r²
SPHERE_INERTIA_FACTOR = 0.4


def world_sample_points(state: BodyState, offsets: np.ndarray) -> np.ndarray:
    """
    将局部采样偏移变换到世界坐标。

    Args:
        state: 刚体状态
        offsets: 局部偏移，shape: (n, 3)

    Returns:
        世界坐标采样点，shape: (n, 3)
    """
    return state.position + offsets @ state.orientation.T


def update_sample_points(body: BuoyancyBody) -> None:
    """根据当前位姿刷新浮体的世界坐标采样点。"""
    body.state.sample_points = world_sample_points(body.state, body.sample_offsets)


def rotation_matrix(rotation_vector: np.ndarray) -> np.ndarray:
    """
    旋转向量转旋转矩阵（Rodrigues 公式）。

    Args:
        rotation_vector: 旋转轴 * 旋转角（弧度）

    Returns:
        3x3 旋转矩阵
    """
    angle = float(np.linalg.norm(rotation_vector))
    if angle < 1e-12:
        return np.eye(3)

    kx, ky, kz = rotation_vector / angle
    K = np.array(
        [
            [0.0, -kz, ky],
            [kz, 0.0, -kx],
            [-ky, kx, 0.0],
        ]
    )
    return np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * (K @ K)


def integrate_body(
    body: BuoyancyBody, result: BodyStepResult, dt: float, gravity: float
) -> None:
    """
    推进一个浮体的刚体状态。

    Args:
        body: 浮体（其 state 会被原地修改）
        result: 本步浮力计算结果
        dt: 步长（秒）
        gravity: 重力加速度大小（m/s²）
    """
    state = body.state

    # 线运动：重力 + 浮力，随后施加阻尼
    acceleration = result.force / state.mass
    acceleration[1] -= gravity
    state.velocity += acceleration * dt
    state.velocity *= max(0.0, 1.0 - result.drag * dt)

    # 角运动：浮力力矩，转动惯量按实心球近似
    inertia = SPHERE_INERTIA_FACTOR * state.mass * body.radius * body.radius
    state.angular_velocity += result.torque / inertia * dt
    state.angular_velocity *= max(0.0, 1.0 - result.angular_drag * dt)

    # 位置与姿态使用更新后的速度
    state.position += state.velocity * dt
    state.orientation = rotation_matrix(state.angular_velocity * dt) @ state.orientation

    update_sample_points(body)
