"""
会话相关 API 路由。

会话的创建/删除、波浪重配、浮体注册、手动步进、外部触发与时钟控制。
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from waterline.core.session_manager import (
    create_session,
    get_session,
    remove_session,
    update_session_status,
)
from waterline.core.storage import session_storage
from waterline.models.session import SimulationSession
from waterline.schemas.api import (
    InteractionTriggerRequest,
    InteractionTriggerResponse,
    SessionCreateRequest,
    SessionListResponse,
    SessionResponse,
    TickRequest,
    TickResponse,
    WaveUpdateRequest,
)
from waterline.schemas.base import BodyConfig, WaveFieldConfig
from waterline.schemas.data import BodyStateData, SessionStatus, WaveParameterData
from waterline.services.factory import create_body, create_wave_descriptors, warn_if_degenerate
from waterline.services.session_stream import SessionStepper, collect_interactions
from waterline.services.surface import wave_parameters
from waterline.utils.data_converter import body_to_state_data, request_to_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

FINISHED_STATUSES = {
    SessionStatus.COMPLETED,
    SessionStatus.FAILED,
    SessionStatus.STOPPED,
}


def _session_response(session: SimulationSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        status=session.status,
        time=session.orchestrator.time,
        body_count=len(session.orchestrator.bodies),
    )


def _ensure_session(session_id: str) -> SimulationSession:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=404, detail=f"Session {session_id} not found"
        )
    return session


async def _run_session_clock(session_id: str) -> None:
    """
    后台任务：外部时钟按固定步长驱动会话。

    每个周期调用一次 step()，计算耗时小于 dt 时等待剩余时间，
    使模拟时间与真实时间保持 1:1。

    Args:
        session_id: 会话 ID
    """
    try:
        loop = asyncio.get_running_loop()

        session = get_session(session_id)
        if session is None:
            return

        stepper = SessionStepper(session)
        dt = stepper.dt

        while True:
            session = get_session(session_id)
            if session is None:
                break

            # 若请求停止，立即终止
            if session.stop_requested:
                update_session_status(session_id, SessionStatus.STOPPED)
                break

            # 若暂停，则短暂休眠后继续检查（保留全部状态）
            if session.clock_paused:
                await asyncio.sleep(min(dt, 0.1))
                continue

            step_start_time = loop.time()
            report = stepper.step()
            if report is None:
                update_session_status(session_id, SessionStatus.COMPLETED)
                logger.info(f"Session {session_id[:8]} reached its time limit")
                break

            step_elapsed = loop.time() - step_start_time
            if step_elapsed < dt:
                await asyncio.sleep(dt - step_elapsed)

    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception(f"Session clock failed for {session_id}")
        update_session_status(session_id, SessionStatus.FAILED)


def _ensure_clock_running(session: SimulationSession) -> None:
    """暂停/恢复前检查：时钟必须在运行且未请求停止。"""
    if session.stop_requested or session.status in FINISHED_STATUSES:
        raise HTTPException(
            status_code=400, detail=f"Session {session.session_id} is {session.status.value}"
        )
    if not session.clock_running:
        raise HTTPException(status_code=400, detail="Session clock is not running")


def _start_clock(session: SimulationSession) -> None:
    session.stop_requested = False
    session.clock_paused = False
    session.status = SessionStatus.RUNNING
    session.clock_task = asyncio.create_task(_run_session_clock(session.session_id))


@router.post(
    "",
    response_model=SessionResponse,
    status_code=201,
    summary="创建模拟会话",
)
async def create_simulation_session(
    request: Optional[SessionCreateRequest] = None,
) -> SessionResponse:
    """
    创建模拟会话。

    会话持有独立的波浪场、事件环与浮体列表；autostart 为 True 时立即启动外部时钟。
    """
    if request is None:
        request = SessionCreateRequest()

    session = create_session(
        wave_config=request.waves,
        ring_config=request.ring,
        time_config=request.time,
    )
    if request.autostart:
        _start_clock(session)
    return _session_response(session)


@router.get("", response_model=SessionListResponse, summary="获取会话列表")
async def list_simulation_sessions(
    status: Optional[SessionStatus] = Query(None, description="按状态过滤"),
) -> SessionListResponse:
    """获取所有会话，可按状态过滤。"""
    all_sessions = session_storage.list_sessions()
    if status is not None:
        filtered = [s for s in all_sessions if s.status == status]
    else:
        filtered = all_sessions

    return SessionListResponse(
        total=len(all_sessions),
        count=len(filtered),
        sessions=[_session_response(s) for s in filtered],
    )


@router.get("/{session_id}", response_model=SessionResponse, summary="获取会话信息")
async def get_simulation_session(session_id: str) -> SessionResponse:
    """获取单个会话的状态、时间与浮体数量。"""
    return _session_response(_ensure_session(session_id))


@router.delete("/{session_id}", response_model=SessionResponse, summary="删除会话")
async def delete_simulation_session(session_id: str) -> SessionResponse:
    """停止时钟并删除会话，删除后无法恢复。"""
    session = remove_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=404, detail=f"Session {session_id} not found"
        )
    session.status = SessionStatus.STOPPED
    return _session_response(session)


@router.put(
    "/{session_id}/waves",
    response_model=List[WaveParameterData],
    summary="整体重配波浪组",
)
async def configure_session_waves(
    session_id: str, config: WaveFieldConfig
) -> List[WaveParameterData]:
    """
    整体替换波浪组参数与参考原点。

    波浪组数量在会话创建时固定，超出数量返回 422，不足的组置为零振幅。
    """
    session = _ensure_session(session_id)
    wave_field = session.orchestrator.wave_field
    if len(config.waves) > wave_field.wave_count:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Session {session_id} has {wave_field.wave_count} wave sets, "
                f"got {len(config.waves)}"
            ),
        )

    session.orchestrator.configure_waves(create_wave_descriptors(config.waves))
    wave_field.origin = config.origin
    return wave_parameters(wave_field)


@router.patch(
    "/{session_id}/waves/{index}",
    response_model=WaveParameterData,
    summary="修改单组波参数",
)
async def update_session_wave(
    session_id: str, index: int, update: WaveUpdateRequest
) -> WaveParameterData:
    """修改指定组的部分参数，派生量（波数、归一化方向）立即重新计算。"""
    session = _ensure_session(session_id)
    wave_field = session.orchestrator.wave_field
    values = update.model_dump(exclude_none=True)
    try:
        descriptor = wave_field.set_descriptor(index, **values)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    warn_if_degenerate(descriptor, index)
    return wave_parameters(wave_field)[index]


@router.post(
    "/{session_id}/bodies",
    response_model=BodyStateData,
    status_code=201,
    summary="注册浮体",
)
async def register_session_body(session_id: str, config: BodyConfig) -> BodyStateData:
    """创建并注册浮体，浮体标识在会话内必须唯一。"""
    session = _ensure_session(session_id)
    orchestrator = session.orchestrator
    if orchestrator.get_body(config.body_id) is not None:
        raise HTTPException(
            status_code=409,
            detail=f"Body {config.body_id} already registered in session {session_id}",
        )

    body = create_body(config)
    orchestrator.register_body(body)
    return body_to_state_data(body)


@router.delete(
    "/{session_id}/bodies/{body_id}",
    response_model=SessionResponse,
    summary="注销浮体",
)
async def unregister_session_body(session_id: str, body_id: str) -> SessionResponse:
    """注销浮体，之后该浮体不再参与步进。"""
    session = _ensure_session(session_id)
    body = session.orchestrator.get_body(body_id)
    if body is None:
        raise HTTPException(
            status_code=404,
            detail=f"Body {body_id} not found in session {session_id}",
        )

    session.orchestrator.unregister_body(body)
    session.last_results.pop(body_id, None)
    return _session_response(session)


@router.post("/{session_id}/tick", response_model=TickResponse, summary="手动步进")
async def tick_session(
    session_id: str, request: Optional[TickRequest] = None
) -> TickResponse:
    """
    手动推进若干固定步长。

    外部时钟运行中时拒绝手动步进（409），避免两个写入方同时推进同一会话。
    """
    if request is None:
        request = TickRequest()

    session = _ensure_session(session_id)
    if session.clock_running:
        raise HTTPException(
            status_code=409,
            detail=f"Session {session_id} clock is running; pause or stop it first",
        )
    if session.status in FINISHED_STATUSES:
        raise HTTPException(
            status_code=400, detail=f"Session {session_id} is {session.status.value}"
        )

    stepper = SessionStepper(session)
    reports = stepper.run(request.steps)
    if stepper.is_completed:
        update_session_status(session_id, SessionStatus.COMPLETED)

    return TickResponse(
        session_id=session_id,
        time=session.orchestrator.time,
        steps=len(reports),
        events_changed=reports[-1].events_changed if reports else False,
        interactions=[request_to_data(r) for r in collect_interactions(reports)],
    )


@router.post(
    "/{session_id}/interactions",
    response_model=InteractionTriggerResponse,
    status_code=201,
    summary="外部触发交互事件",
)
async def trigger_session_interaction(
    session_id: str, request: InteractionTriggerRequest
) -> InteractionTriggerResponse:
    """由外部接触检测直接写入一个交互事件（覆盖最旧槽位）。"""
    session = _ensure_session(session_id)
    slot = session.orchestrator.trigger_interaction(request.x, request.z, request.radius)
    return InteractionTriggerResponse(
        session_id=session_id, slot=slot, time=session.orchestrator.time
    )


@router.post(
    "/{session_id}/clock/start",
    response_model=SessionResponse,
    summary="启动外部时钟",
)
async def start_session_clock(session_id: str) -> SessionResponse:
    """启动外部时钟，按 dt 的真实时间间隔持续步进。"""
    session = _ensure_session(session_id)
    if session.status in FINISHED_STATUSES:
        raise HTTPException(
            status_code=400, detail=f"Session {session_id} is {session.status.value}"
        )
    if not session.clock_running:
        _start_clock(session)
    return _session_response(session)


@router.post(
    "/{session_id}/clock/pause",
    response_model=SessionResponse,
    summary="暂停外部时钟",
)
async def pause_session_clock(session_id: str) -> SessionResponse:
    """
    暂停外部时钟。

    暂停保留全部状态，可以通过恢复继续；暂停期间允许手动步进之外的全部操作。
    """
    session = _ensure_session(session_id)
    _ensure_clock_running(session)

    if not session.clock_paused:
        session.clock_paused = True
        update_session_status(session_id, SessionStatus.PAUSED)
    return _session_response(session)


@router.post(
    "/{session_id}/clock/resume",
    response_model=SessionResponse,
    summary="恢复外部时钟",
)
async def resume_session_clock(session_id: str) -> SessionResponse:
    """恢复已暂停的外部时钟，从暂停时的状态继续。"""
    session = _ensure_session(session_id)
    _ensure_clock_running(session)

    if session.clock_paused:
        session.clock_paused = False
        update_session_status(session_id, SessionStatus.RUNNING)
    return _session_response(session)


@router.post(
    "/{session_id}/clock/stop",
    response_model=SessionResponse,
    summary="停止外部时钟",
)
async def stop_session_clock(session_id: str) -> SessionResponse:
    """
    停止外部时钟。

    停止后会话保留在存储中，仍可查询状态与事件，但不能再启动或步进。
    """
    session = _ensure_session(session_id)
    if session.status in FINISHED_STATUSES:
        return _session_response(session)

    session.stop_requested = True
    session.clock_paused = False
    update_session_status(session_id, SessionStatus.STOPPED)
    return _session_response(session)
