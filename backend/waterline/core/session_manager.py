"""
会话管理器。

提供会话的创建、获取、状态更新、删除等功能。
"""

import logging
import uuid
from typing import Optional

from waterline.core.storage import session_storage
from waterline.models.session import SimulationSession
from waterline.schemas.base import InteractionRingConfig, TimeConfig, WaveFieldConfig
from waterline.schemas.data import SessionStatus
from waterline.services.factory import create_orchestrator

logger = logging.getLogger(__name__)


def create_session(
    wave_config: WaveFieldConfig,
    ring_config: InteractionRingConfig,
    time_config: TimeConfig,
) -> SimulationSession:
    """
    创建模拟会话。

    Args:
        wave_config: 波浪场配置
        ring_config: 事件环配置
        time_config: 时间配置

    Returns:
        新建的会话
    """
    session = SimulationSession(
        session_id=str(uuid.uuid4()),
        status=SessionStatus.PENDING,
        orchestrator=create_orchestrator(wave_config, ring_config, time_config),
        wave_config=wave_config,
        ring_config=ring_config,
        time_config=time_config,
    )
    session_storage.add_session(session)
    logger.info(
        f"Created session {session.session_id[:8]} "
        f"({session.orchestrator.wave_field.wave_count} wave sets, "
        f"ring capacity {ring_config.capacity})"
    )
    return session


def get_session(session_id: str) -> Optional[SimulationSession]:
    """
    获取模拟会话。

    Args:
        session_id: 会话 ID

    Returns:
        会话对象，如果不存在则返回 None
    """
    return session_storage.get_session(session_id)


def update_session_status(session_id: str, status: SessionStatus) -> bool:
    """
    更新会话状态。

    Args:
        session_id: 会话 ID
        status: 新状态

    Returns:
        是否更新成功
    """
    session = session_storage.get_session(session_id)
    if session is None:
        return False

    session.status = status
    return True


def remove_session(session_id: str) -> Optional[SimulationSession]:
    """
    删除会话并请求停止其时钟。

    Returns:
        被删除的会话，不存在时返回 None
    """
    session = session_storage.remove_session(session_id)
    if session is None:
        return None

    session.stop_requested = True
    if session.clock_running:
        session.clock_task.cancel()
    logger.info(f"Removed session {session_id[:8]}")
    return session
