"""
BPMN 2.0 XML Loader

Reads a BPMN 2.0 XML document with lxml and builds the ProcessModel the
generator works on.

Supports:
- start events (none, message, signal), tasks of every kind, intermediate
  events, end events, gateways and sequence flows of each process
- event sub-processes (``subProcess`` with ``triggeredByEvent="true"``),
  loaded as one element; their content is not added to the model
- collaborations and their participants (pools)

Only the first outgoing sequence flow of a node is kept.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from lxml import etree

from bpmn2klaim.core import log_execution
from bpmn2klaim.errors import BpmnParseError
from bpmn2klaim.models.diagram import ProcessModel
from bpmn2klaim.models.elements import (
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

logger = logging.getLogger(__name__)

# BPMN 2.0 Namespace
BPMN_NAMESPACE = "http://www.omg.org/spec/BPMN/20100524/MODEL"
NS = {"bpmn": BPMN_NAMESPACE}

TASK_TAGS = {
    "task",
    "userTask",
    "serviceTask",
    "manualTask",
    "scriptTask",
    "sendTask",
    "receiveTask",
    "businessRuleTask",
    "callActivity",
    "subProcess",
    "intermediateCatchEvent",
    "intermediateThrowEvent",
}

GATEWAY_TYPES = {
    "exclusiveGateway": ElementType.EXCLUSIVE_GATEWAY,
    "inclusiveGateway": ElementType.EXCLUSIVE_GATEWAY,
    "eventBasedGateway": ElementType.EXCLUSIVE_GATEWAY,
    "parallelGateway": ElementType.PARALLEL_GATEWAY,
}


def _local_name(node: etree._Element) -> str:
    return etree.QName(node).localname


def _is_bpmn(node: etree._Element) -> bool:
    return isinstance(node.tag, str) and etree.QName(node).namespace == BPMN_NAMESPACE


class BpmnXmlLoader:
    """Builds a ProcessModel from BPMN 2.0 XML."""

    def __init__(self):
        self.messages: Dict[str, str] = {}
        self.signals: Dict[str, str] = {}

    def load(self, path: Union[str, Path]) -> ProcessModel:
        """Load a ``.bpmn`` file."""
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise BpmnParseError(f"Cannot read {path}: {e}") from e
        return self.parse(content, name=path.stem)

    def parse(self, content: Union[str, bytes], name: Optional[str] = None) -> ProcessModel:
        """Parse BPMN XML content.

        Raises:
            BpmnParseError: If the content is not well-formed XML or holds
                no BPMN definitions
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        try:
            root = etree.fromstring(content)
        except etree.XMLSyntaxError as e:
            raise BpmnParseError(f"Malformed BPMN XML: {e}") from e

        if not _is_bpmn(root) or _local_name(root) != "definitions":
            raise BpmnParseError("Root element is not bpmn:definitions")

        self.messages = self._named_refs(root, "message")
        self.signals = self._named_refs(root, "signal")

        elements: List[BpmnElement] = []
        try:
            for collaboration in root.findall("bpmn:collaboration", NS):
                elements.extend(self._convert_collaboration(collaboration))
            for process in root.findall("bpmn:process", NS):
                elements.extend(self._convert_process(process))
            model = ProcessModel(name=name, elements=elements)
        except ValueError as e:
            # pydantic ValidationError is a ValueError
            raise BpmnParseError(f"Invalid BPMN content: {e}") from e

        logger.info(f"Loaded {len(model)} BPMN elements from '{name or 'document'}'")
        return model

    # ==================
    # Collaboration
    # ==================

    def _convert_collaboration(self, node: etree._Element) -> List[BpmnElement]:
        pools: List[BpmnElement] = [
            Pool(
                id=participant.get("id"),
                name=participant.get("name"),
                process_ref=participant.get("processRef"),
            )
            for participant in node.findall("bpmn:participant", NS)
        ]
        collaboration = Collaboration(
            id=node.get("id"),
            name=node.get("name"),
            participant_refs=[p.id for p in pools],
        )
        return [collaboration, *pools]

    # ==================
    # Process
    # ==================

    def _convert_process(self, process: etree._Element) -> List[BpmnElement]:
        process_id = process.get("id")
        flow_sources = self._first_flow_by_source(process)
        elements: List[BpmnElement] = []

        for child in process:
            if not _is_bpmn(child):
                continue
            tag = _local_name(child)
            element = self._convert_node(child, tag, process_id, flow_sources)
            if element is None:
                logger.debug(f"Ignoring <{tag}> '{child.get('id')}'")
                continue
            elements.append(element)

        return elements

    def _convert_node(
        self,
        node: etree._Element,
        tag: str,
        process_id: str,
        flow_sources: Dict[str, str],
    ) -> Optional[BpmnElement]:
        common = {
            "id": node.get("id"),
            "name": node.get("name"),
            "process_id": process_id,
        }
        outgoing = self._outgoing(node, flow_sources)

        if tag == "startEvent":
            return self._convert_start_event(node, outgoing=outgoing, **common)
        if tag == "subProcess" and node.get("triggeredByEvent") == "true":
            return self._convert_event_sub_process(node, **common)
        if tag in TASK_TAGS:
            return Task(task_kind=tag, outgoing=outgoing, **common)
        if tag == "endEvent":
            return EndEvent(outgoing=outgoing, **common)
        if tag in GATEWAY_TYPES:
            return Gateway(element_type=GATEWAY_TYPES[tag], outgoing=outgoing, **common)
        if tag == "sequenceFlow":
            expression = node.find("bpmn:conditionExpression", NS)
            condition = None
            if expression is not None and expression.text:
                condition = expression.text.strip() or None
            return SequenceFlow(
                source_ref=node.get("sourceRef"),
                target_ref=node.get("targetRef"),
                condition=condition,
                **common,
            )
        return None

    def _convert_start_event(self, node: etree._Element, **fields) -> BpmnElement:
        trigger, ref = self._trigger(node)
        if trigger == "message":
            return MessageStartEvent(message_ref=ref, **fields)
        if trigger == "signal":
            return SignalStartEvent(signal_ref=ref, **fields)
        return StartEvent(**fields)

    def _convert_event_sub_process(self, node: etree._Element, **fields) -> EventSubProcess:
        """Collapse an event sub-process into one element.

        Activities are listed in document order.
        """
        trigger, trigger_ref = "none", None
        is_interrupting = True
        inner_start = node.find("bpmn:startEvent", NS)
        if inner_start is not None:
            trigger, trigger_ref = self._trigger(inner_start)
            is_interrupting = inner_start.get("isInterrupting", "true") != "false"

        activities = [
            child.get("name") or child.get("id")
            for child in node
            if _is_bpmn(child) and _local_name(child) in TASK_TAGS
        ]
        return EventSubProcess(
            trigger=trigger,
            trigger_ref=trigger_ref,
            is_interrupting=is_interrupting,
            activities=activities,
            **fields,
        )

    # ==================
    # Helper Functions
    # ==================

    def _named_refs(self, root: etree._Element, tag: str) -> Dict[str, str]:
        """Map message/signal IDs to their names."""
        return {
            node.get("id"): node.get("name") or node.get("id")
            for node in root.findall(f"bpmn:{tag}", NS)
        }

    def _trigger(self, event: etree._Element) -> tuple:
        """Return (trigger, referenced name) from an event definition."""
        message = event.find("bpmn:messageEventDefinition", NS)
        if message is not None:
            ref = message.get("messageRef")
            return "message", self.messages.get(ref, ref)

        signal = event.find("bpmn:signalEventDefinition", NS)
        if signal is not None:
            ref = signal.get("signalRef")
            return "signal", self.signals.get(ref, ref)

        return "none", None

    def _first_flow_by_source(self, process: etree._Element) -> Dict[str, str]:
        flows: Dict[str, str] = {}
        for flow in process.findall("bpmn:sequenceFlow", NS):
            flows.setdefault(flow.get("sourceRef"), flow.get("id"))
        return flows

    def _outgoing(self, node: etree._Element, flow_sources: Dict[str, str]) -> Optional[str]:
        """First <outgoing> child, else the first flow whose source is the node."""
        outgoing = node.find("bpmn:outgoing", NS)
        if outgoing is not None and outgoing.text:
            return outgoing.text.strip()
        return flow_sources.get(node.get("id"))


@log_execution()
def load_bpmn(path: Union[str, Path]) -> ProcessModel:
    """Load a ProcessModel from a ``.bpmn`` file."""
    return BpmnXmlLoader().load(path)


def parse_bpmn(content: Union[str, bytes], name: Optional[str] = None) -> ProcessModel:
    """Build a ProcessModel from BPMN XML content."""
    return BpmnXmlLoader().parse(content, name=name)


__all__ = ["BpmnXmlLoader", "load_bpmn", "parse_bpmn", "BPMN_NAMESPACE"]
