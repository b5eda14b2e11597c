"""
BPMN models consumed by the X-Klaim generator.
"""

from bpmn2klaim.models.diagram import ProcessModel
from bpmn2klaim.models.elements import (
    START_EVENT_TYPES,
    BpmnElement,
    Collaboration,
    ElementType,
    EndEvent,
    EventSubProcess,
    Gateway,
    MessageStartEvent,
    Pool,
    SequenceFlow,
    SignalStartEvent,
    StartEvent,
    Task,
)

__all__ = [
    "ProcessModel",
    "START_EVENT_TYPES",
    "BpmnElement",
    "Collaboration",
    "ElementType",
    "EndEvent",
    "EventSubProcess",
    "Gateway",
    "MessageStartEvent",
    "Pool",
    "SequenceFlow",
    "SignalStartEvent",
    "StartEvent",
    "Task",
]
