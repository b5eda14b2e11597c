"""
X-Klaim Fragment Emitter

One translation routine per supported BPMN variant. Each routine turns a
single element into a self-contained X-Klaim fragment; sequencing the
fragments is the job of the traversal engine and the process assembler.

Gateways deliberately have no routine: the single-successor walk cannot
express branching, so they go through the unhandled-variant path.
"""

import re
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional

from bpmn2klaim.config import GeneratorConfig
from bpmn2klaim.models.diagram import ProcessModel
from bpmn2klaim.models.elements import (
    BpmnElement,
    Collaboration,
    ElementType,
    EndEvent,
    EventSubProcess,
    MessageStartEvent,
    Pool,
    SequenceFlow,
    SignalStartEvent,
    StartEvent,
    Task,
)

Handler = Callable[[BpmnElement], str]

INDENT = "\t"


def klaim_identifier(text: Optional[str], fallback: str = "unnamed") -> str:
    """Turn a BPMN name or ID into a valid X-Klaim identifier."""
    if not text:
        return fallback
    s = re.sub(r"\W+", "_", text.strip()).strip("_")
    if not s:
        return fallback
    if s[0].isdigit():
        s = "p" + s
    return s


def _comment_text(text: Optional[str]) -> str:
    """Collapse line breaks and runs of whitespace so the text fits on one comment line."""
    return " ".join((text or "").split())


def unique_identifiers(elements: Iterable[BpmnElement]) -> Dict[str, str]:
    """Map element IDs to X-Klaim identifiers that do not collide.

    Elements whose names sanitise to the same identifier get their ID
    appended.
    """
    elements = list(elements)
    base = {e.id: klaim_identifier(e.name, fallback=klaim_identifier(e.id)) for e in elements}
    counts = Counter(base.values())
    return {
        element_id: name if counts[name] == 1 else f"{name}_{klaim_identifier(element_id)}"
        for element_id, name in base.items()
    }


def _indent(lines: List[str], depth: int = 1) -> List[str]:
    return [INDENT * depth + line for line in lines]


class KlaimTranslator:
    """Emits X-Klaim fragments for BPMN elements.

    Args:
        model: Process model, needed to resolve the pools of a collaboration
        config: Generator configuration (net name and address)
    """

    def __init__(self, model: Optional[ProcessModel] = None, config: Optional[GeneratorConfig] = None):
        self.model = model
        self.config = config or GeneratorConfig()

    def handlers(self) -> Dict[ElementType, Handler]:
        """Routine table keyed by variant."""
        return {
            ElementType.NONE_START_EVENT: self.visit_start_event,
            ElementType.MESSAGE_START_EVENT: self.visit_message_start_event,
            ElementType.SIGNAL_START_EVENT: self.visit_signal_start_event,
            ElementType.EVENT_SUB_PROCESS: self.visit_event_sub_process,
            ElementType.TASK: self.visit_task,
            ElementType.END_EVENT: self.visit_end_event,
            ElementType.SEQUENCE_FLOW: self.visit_sequence_flow,
            ElementType.COLLABORATION: self.visit_collaboration,
        }

    # ==================
    # Events
    # ==================

    def visit_start_event(self, element: StartEvent) -> str:
        return f"// start {_comment_text(element.label)}"

    def visit_message_start_event(self, element: MessageStartEvent) -> str:
        message = klaim_identifier(element.message_ref or element.name, fallback=element.id)
        return f'in("{message}")@self'

    def visit_signal_start_event(self, element: SignalStartEvent) -> str:
        signal = klaim_identifier(element.signal_ref or element.name, fallback=element.id)
        return f'read("{signal}")@self'

    def visit_end_event(self, element: EndEvent) -> str:
        return f"// end {_comment_text(element.label)}"

    # ==================
    # Activities and flows
    # ==================

    def visit_task(self, element: Task) -> str:
        comment = f"// {_comment_text(element.task_kind)} {_comment_text(element.label)}"
        return f'{comment}\nout("{element.id}", "done")@self'

    def visit_sequence_flow(self, element: SequenceFlow) -> str:
        statement = f'out("{element.id}")@self'
        if element.condition:
            return f"// when {_comment_text(element.condition)}\n{statement}"
        return statement

    # ==================
    # Containers
    # ==================

    def visit_event_sub_process(self, element: EventSubProcess) -> str:
        """Emit the event sub-process as a standalone proc."""
        body: List[str] = []
        kind = "interrupting" if element.is_interrupting else "non-interrupting"
        body.append(f"// {kind} {element.trigger} event sub-process")

        trigger = klaim_identifier(element.trigger_ref, fallback=element.id)
        if element.trigger == "message":
            body.append(f'in("{trigger}")@self')
        elif element.trigger == "signal":
            body.append(f'read("{trigger}")@self')

        for activity in element.activities:
            body.append(f'out("{klaim_identifier(activity)}", "done")@self')

        name = self._proc_names().get(element.id) or klaim_identifier(
            element.name, fallback=klaim_identifier(element.id)
        )
        return "\n".join([f"proc {name}() {{", *_indent(body), "}"])

    def visit_collaboration(self, element: Collaboration) -> str:
        """Emit the net with one node per participant pool."""
        net_name = klaim_identifier(element.name, fallback=self.config.net_name)
        lines = [f'net {net_name} physical "{self.config.net_address}" {{']

        pools = self._participants(element)
        node_names = unique_identifiers(pools)
        for pool in pools:
            node_lines = [f"node {node_names[pool.id]} {{"]
            if pool.process_ref:
                node_lines.append(f"{INDENT}// runs {pool.process_ref}")
            node_lines.append("}")
            lines.extend(_indent(node_lines))

        lines.append("}")
        return "\n".join(lines)

    def _proc_names(self) -> Dict[str, str]:
        if self.model is None:
            return {}
        return unique_identifiers(self.model.get_event_sub_processes())

    def _participants(self, element: Collaboration) -> List[Pool]:
        if self.model is None:
            return []
        pools: List[Pool] = []
        for ref in element.participant_refs:
            pool = self.model.get_element_by_id(ref)
            if isinstance(pool, Pool):
                pools.append(pool)
        return pools


__all__ = ["KlaimTranslator", "Handler", "klaim_identifier", "unique_identifiers"]
