"""
模拟会话模型定义。
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from waterline.models.body import BodyStepResult
from waterline.schemas.base import InteractionRingConfig, TimeConfig, WaveFieldConfig
from waterline.schemas.data import SessionStatus
from waterline.services.orchestrator import SimulationOrchestrator


@dataclass
class SimulationSession:
    """模拟会话：显式持有一个编排器及其外部物理状态。"""

    session_id: str  # 会话 ID
    status: SessionStatus  # 会话状态
    orchestrator: SimulationOrchestrator  # 波浪场 + 浮体 + 事件环
    wave_config: WaveFieldConfig  # 波浪场配置
    ring_config: InteractionRingConfig  # 事件环配置
    time_config: TimeConfig  # 时间配置
    last_results: Dict[str, BodyStepResult] = field(default_factory=dict)  # 最近一步各浮体受力
    clock_task: Optional[asyncio.Task] = None  # 外部时钟后台任务
    clock_paused: bool = False  # 是否暂停外部时钟
    stop_requested: bool = False  # 是否请求停止时钟
    created_at: float = field(default_factory=time.time)  # 创建时间（Unix 时间戳）

    @property
    def clock_running(self) -> bool:
        return self.clock_task is not None and not self.clock_task.done()
