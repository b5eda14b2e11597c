"""
BPMN Element Model

Pydantic models for the BPMN elements the X-Klaim generator understands.
Every element is a node of the process graph: events, activities, gateways,
sequence flows (connectors), event sub-processes, collaborations and pools.

Elements are frozen once built; the generator only ever reads them.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ElementType(str, Enum):
    """BPMN element variants."""

    NONE_START_EVENT = "noneStartEvent"
    MESSAGE_START_EVENT = "messageStartEvent"
    SIGNAL_START_EVENT = "signalStartEvent"
    EVENT_SUB_PROCESS = "eventSubProcess"
    TASK = "task"
    END_EVENT = "endEvent"
    EXCLUSIVE_GATEWAY = "exclusiveGateway"
    PARALLEL_GATEWAY = "parallelGateway"
    SEQUENCE_FLOW = "sequenceFlow"
    COLLABORATION = "collaboration"
    POOL = "participant"


START_EVENT_TYPES = (
    ElementType.NONE_START_EVENT,
    ElementType.MESSAGE_START_EVENT,
    ElementType.SIGNAL_START_EVENT,
)


class BpmnElement(BaseModel):
    """Base class for all BPMN elements."""

    id: str = Field(..., description="Unique element ID")
    name: Optional[str] = Field(None, description="Element name/label")
    element_type: ElementType = Field(..., description="Element variant")
    process_id: Optional[str] = Field(None, description="ID of the owning process")
    outgoing: Optional[str] = Field(None, description="Designated outgoing sequence flow ID")

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        """Name if present, otherwise the ID."""
        return self.name or self.id


class StartEvent(BpmnElement):
    """Start event with no trigger."""

    element_type: ElementType = Field(default=ElementType.NONE_START_EVENT)


class MessageStartEvent(StartEvent):
    """Start event triggered by an incoming message."""

    element_type: ElementType = Field(default=ElementType.MESSAGE_START_EVENT)
    message_ref: Optional[str] = Field(None, description="Referenced message name/ID")


class SignalStartEvent(StartEvent):
    """Start event triggered by a broadcast signal."""

    element_type: ElementType = Field(default=ElementType.SIGNAL_START_EVENT)
    signal_ref: Optional[str] = Field(None, description="Referenced signal name/ID")


class EventSubProcess(BpmnElement):
    """Event sub-process, translated as one self-contained unit."""

    element_type: ElementType = Field(default=ElementType.EVENT_SUB_PROCESS)
    trigger: str = Field("none", description="Trigger of the inner start event")
    trigger_ref: Optional[str] = Field(None, description="Message/signal referenced by the trigger")
    is_interrupting: bool = Field(True, description="Whether the sub-process interrupts its parent")
    activities: List[str] = Field(
        default_factory=list, description="Names of the contained activities, in flow order"
    )


class Task(BpmnElement):
    """Generic flow node (activity)."""

    element_type: ElementType = Field(default=ElementType.TASK)
    task_kind: str = Field("task", description="BPMN tag: task, userTask, serviceTask, ...")


class EndEvent(BpmnElement):
    """End event."""

    element_type: ElementType = Field(default=ElementType.END_EVENT)


class Gateway(BpmnElement):
    """Exclusive or parallel gateway."""

    element_type: ElementType = Field(default=ElementType.EXCLUSIVE_GATEWAY)


class SequenceFlow(BpmnElement):
    """Connector between two flow nodes."""

    element_type: ElementType = Field(default=ElementType.SEQUENCE_FLOW)
    source_ref: str = Field(..., description="Source element ID")
    target_ref: str = Field(..., description="Target element ID")
    condition: Optional[str] = Field(None, description="Condition expression")


class Pool(BpmnElement):
    """Collaboration participant."""

    element_type: ElementType = Field(default=ElementType.POOL)
    process_ref: Optional[str] = Field(None, description="ID of the process the pool runs")


class Collaboration(BpmnElement):
    """Top-level collaboration grouping pools."""

    element_type: ElementType = Field(default=ElementType.COLLABORATION)
    participant_refs: List[str] = Field(default_factory=list, description="Pool IDs")


__all__ = [
    "ElementType",
    "START_EVENT_TYPES",
    "BpmnElement",
    "StartEvent",
    "MessageStartEvent",
    "SignalStartEvent",
    "EventSubProcess",
    "Task",
    "EndEvent",
    "Gateway",
    "SequenceFlow",
    "Pool",
    "Collaboration",
]
