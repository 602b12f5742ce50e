"""
业务服务模块。

包含模拟编排、刚体积分、水面采样与对象工厂等服务。
"""

from waterline.services.factory import (
    create_body,
    create_event_ring,
    create_orchestrator,
    create_wave_field,
)
from waterline.services.integrator import integrate_body
from waterline.services.orchestrator import SimulationOrchestrator, TickReport
from waterline.services.surface import sample_displacements, sample_surface_grid

__all__ = [
    "SimulationOrchestrator",
    "TickReport",
    "create_wave_field",
    "create_event_ring",
    "create_body",
    "create_orchestrator",
    "integrate_body",
    "sample_displacements",
    "sample_surface_grid",
]
