"""
数据转换模块。

将核心模型对象转换为 API 响应所需的 Schema。
"""

from typing import Optional

from waterline.models.body import BodyStepResult, BuoyancyBody, InteractionRequest
from waterline.models.events import EventSnapshot
from waterline.models.wave import WaveDisplacement
from waterline.schemas.data import (
    BodyStateData,
    DisplacementData,
    EventSnapshotData,
    InteractionEventData,
    InteractionRequestData,
)


def _tuple3(vector) -> tuple:
    return (float(vector[0]), float(vector[1]), float(vector[2]))


def body_to_state_data(
    body: BuoyancyBody, result: Optional[BodyStepResult] = None
) -> BodyStateData:
    """
    浮体状态转换为响应数据。

    Args:
        body: 浮体
        result: 最近一步浮力结果，尚未步进时为 None

    Returns:
        浮体状态数据
    """
    state = body.state
    if result is None:
        # 尚未步进：按出水状态返回
        return BodyStateData(
            body_id=body.body_id,
            position=_tuple3(state.position),
            velocity=_tuple3(state.velocity),
            angular_velocity=_tuple3(state.angular_velocity),
            sample_points=[_tuple3(p) for p in state.sample_points],
            submerged_fraction=0.0,
            drag=body.air_drag,
            angular_drag=body.air_angular_drag,
            force=(0.0, 0.0, 0.0),
            torque=(0.0, 0.0, 0.0),
        )

    data = body_to_state_data(body)
    data.submerged_fraction = result.submerged_fraction
    data.drag = result.drag
    data.angular_drag = result.angular_drag
    data.force = _tuple3(result.force)
    data.torque = _tuple3(result.torque)
    return data


def snapshot_to_data(snapshot: EventSnapshot, max_lifetime: float) -> EventSnapshotData:
    """事件快照转换为响应数据。"""
    return EventSnapshotData(
        time=snapshot.time,
        dirty=snapshot.dirty,
        max_lifetime=max_lifetime,
        events=[
            InteractionEventData(
                index=i,
                x=event.x,
                z=event.z,
                radius=event.radius,
                age=event.age,
                active=event.is_active,
            )
            for i, event in enumerate(snapshot.events)
        ],
    )


def request_to_data(request: InteractionRequest) -> InteractionRequestData:
    """交互请求转换为响应数据。"""
    return InteractionRequestData(
        body_id=request.body_id,
        x=request.x,
        z=request.z,
        surface_y=request.surface_y,
        radius=request.radius,
        time=request.time,
        strength=request.strength,
    )


def displacement_to_data(
    x: float, z: float, time: float, displacement: WaveDisplacement, water_base_level: float
) -> DisplacementData:
    """波面位移转换为响应数据。"""
    return DisplacementData(
        x=x,
        z=z,
        time=time,
        height=displacement.height,
        offset_x=displacement.offset_x,
        offset_z=displacement.offset_z,
        surface_y=water_base_level + displacement.height,
    )
