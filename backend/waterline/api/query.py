"""
查询相关 API 路由。
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from waterline.core.session_manager import get_session
from waterline.schemas.base import SurfaceGridConfig, SurfaceRegion
from waterline.schemas.data import (
    BodyStateData,
    DisplacementData,
    EventSnapshotData,
    SurfaceSampleData,
    WaveParameterData,
)
from waterline.services.surface import sample_surface_grid, wave_parameters
from waterline.utils.data_converter import (
    body_to_state_data,
    displacement_to_data,
    snapshot_to_data,
)

router = APIRouter(prefix="/query", tags=["query"])


def _get_session(session_id: str):
    session = get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=404, detail=f"Session {session_id} not found"
        )
    return session


@router.get(
    "/{session_id}/displacement",
    response_model=DisplacementData,
    summary="查询单点波面位移",
)
async def query_displacement(
    session_id: str,
    x: float = Query(..., description="查询点 x（米）"),
    z: float = Query(..., description="查询点 z（米）"),
    time: Optional[float] = Query(None, description="查询时间（秒），缺省为当前模拟时间"),
) -> DisplacementData:
    """
    查询指定点、指定时刻的波面位移。

    与物理步进使用同一公式，渲染端可用于校验着色器结果。
    """
    orchestrator = _get_session(session_id).orchestrator
    query_time = orchestrator.time if time is None else time
    displacement = orchestrator.displacement_at(x, z, query_time)
    return displacement_to_data(
        x, z, query_time, displacement, orchestrator.water_base_level
    )


@router.get(
    "/{session_id}/events",
    response_model=EventSnapshotData,
    summary="查询交互事件快照",
)
async def query_events(session_id: str) -> EventSnapshotData:
    """
    获取交互事件环的当前快照。

    dirty 为 False 时客户端可以跳过本次同步。
    """
    orchestrator = _get_session(session_id).orchestrator
    ring = orchestrator.event_ring
    return snapshot_to_data(ring.snapshot(), ring.max_lifetime)


@router.get(
    "/{session_id}/bodies",
    response_model=List[BodyStateData],
    summary="查询浮体状态",
)
async def query_bodies(session_id: str) -> List[BodyStateData]:
    """按注册顺序返回所有浮体的状态与最近一步受力。"""
    session = _get_session(session_id)
    return [
        body_to_state_data(body, session.last_results.get(body.body_id))
        for body in session.orchestrator.bodies
    ]


@router.get(
    "/{session_id}/waves",
    response_model=List[WaveParameterData],
    summary="查询波参数",
)
async def query_waves(session_id: str) -> List[WaveParameterData]:
    """返回渲染端需要上传的全部波参数。"""
    return wave_parameters(_get_session(session_id).orchestrator.wave_field)


@router.get(
    "/{session_id}/surface",
    response_model=SurfaceSampleData,
    summary="查询水面网格",
)
async def query_surface(
    session_id: str,
    x_min: float = Query(..., description="最小 x（米）"),
    z_min: float = Query(..., description="最小 z（米）"),
    x_max: float = Query(..., description="最大 x（米）"),
    z_max: float = Query(..., description="最大 z（米）"),
    dx: float = Query(1.0, gt=0, description="x 方向采样间隔（米）"),
    dz: float = Query(1.0, gt=0, description="z 方向采样间隔（米）"),
    max_points: int = Query(5000, ge=1, description="最大采样点数量"),
    time: Optional[float] = Query(None, description="采样时间（秒），缺省为当前模拟时间"),
) -> SurfaceSampleData:
    """
    在矩形区域内按规则网格采样水面高度。

    采样点数量超过 max_points 时自动放大间隔。
    """
    orchestrator = _get_session(session_id).orchestrator
    try:
        region = SurfaceRegion(x_min=x_min, z_min=z_min, x_max=x_max, z_max=z_max)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    config = SurfaceGridConfig(dx=dx, dz=dz, max_points=max_points)

    return sample_surface_grid(
        orchestrator.wave_field,
        region,
        config,
        orchestrator.time if time is None else time,
        orchestrator.water_base_level,
    )
