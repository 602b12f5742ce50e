"""
会话存储模块。

使用内存存储模拟会话。每个会话显式持有自己的编排器，互不共享状态。
"""

from typing import Dict, List, Optional

from waterline.models.session import SimulationSession


class SessionStorage:
    """会话存储（内存）。"""

    def __init__(self):
        self._sessions: Dict[str, SimulationSession] = {}

    def add_session(self, session: SimulationSession) -> None:
        """添加会话。"""
        self._sessions[session.session_id] = session

    def get_session(self, session_id: str) -> Optional[SimulationSession]:
        """获取会话。"""
        return self._sessions.get(session_id)

    def remove_session(self, session_id: str) -> Optional[SimulationSession]:
        """删除会话，返回被删除的会话。"""
        return self._sessions.pop(session_id, None)

    def list_sessions(self) -> List[SimulationSession]:
        """列出所有会话。"""
        return list(self._sessions.values())


# 全局会话存储实例
session_storage = SessionStorage()
