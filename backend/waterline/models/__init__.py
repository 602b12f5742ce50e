"""
内部数据模型模块。

包含波浪场、浮体、交互事件环等内部数据结构。
"""

from waterline.models.body import (
    BodyState,
    BodyStepResult,
    BuoyancyBody,
    InteractionRequest,
    SurfaceSample,
)
from waterline.models.events import EventSnapshot, InteractionEvent, InteractionEventRing
from waterline.models.wave import WaveDescriptor, WaveDisplacement, WaveField

__all__ = [
    "WaveDescriptor",
    "WaveDisplacement",
    "WaveField",
    "BodyState",
    "BodyStepResult",
    "BuoyancyBody",
    "InteractionRequest",
    "SurfaceSample",
    "InteractionEvent",
    "EventSnapshot",
    "InteractionEventRing",
]
