"""
会话步进服务。

SessionStepper 每次 step() 推进一个固定步长：编排器计算受力与事件，
随后由参考积分器推进各浮体的刚体状态。外部时钟负责定期调用 step()。
"""

from typing import List, Optional

from waterline.models.body import InteractionRequest
from waterline.models.session import SimulationSession
from waterline.services.integrator import integrate_body
from waterline.services.orchestrator import TickReport


class SessionStepper:
    """
    会话步进器。

    会话本身保存全部状态，步进器只负责按固定步长推进并记录是否到达时间上限。
    """

    def __init__(self, session: SimulationSession):
        """
        初始化会话步进器。

        Args:
            session: 模拟会话
        """
        self.session = session
        self.dt = session.time_config.dt
        self.time_limit = session.time_config.T_total  # None 表示无限制
        self.is_completed = False

    def step(self) -> Optional[TickReport]:
        """
        执行一个时间步进。

        Returns:
            本步结果，如果已达到时间上限则返回 None
        """
        if self.is_completed:
            return None

        orchestrator = self.session.orchestrator
        if self.time_limit is not None and orchestrator.time + self.dt > self.time_limit + 1e-9:
            self.is_completed = True
            return None

        report = orchestrator.tick(self.dt)
        for body in orchestrator.bodies:
            result = report.results.get(body.body_id)
            if result is not None:
                integrate_body(body, result, self.dt, orchestrator.gravity)
        self.session.last_results = report.results

        if self.time_limit is not None and report.time >= self.time_limit - 1e-9:
            self.is_completed = True
        return report

    def run(self, steps: int) -> List[TickReport]:
        """连续执行 steps 步，到达时间上限时提前结束。"""
        reports = []
        for _ in range(steps):
            report = self.step()
            if report is None:
                break
            reports.append(report)
        return reports


def collect_interactions(reports: List[TickReport]) -> List[InteractionRequest]:
    """汇总多步产生的交互请求。"""
    return [request for report in reports for request in report.interactions]
