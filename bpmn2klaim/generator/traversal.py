"""
Traversal Engine

Depth-first walk of the process graph from one element. Each handled element
contributes its fragment, then the walk continues with its outgoing sequence
flow and the element that flow targets. Elements already in the visited set
are never translated twice, which is what stops the walk on cyclic graphs.

The walk uses an explicit stack, so large diagrams do not grow the call
stack.
"""

import logging
from typing import List, Optional, Set, Tuple

from bpmn2klaim.config import UnhandledVariantPolicy
from bpmn2klaim.errors import UnresolvedVariantError
from bpmn2klaim.generator.dispatcher import DispatchOutcome, TranslationDispatcher
from bpmn2klaim.models.diagram import ProcessModel
from bpmn2klaim.models.elements import BpmnElement

logger = logging.getLogger(__name__)


def apply_unhandled_policy(
    outcome: DispatchOutcome,
    policy: UnhandledVariantPolicy,
    process_id: Optional[str] = None,
) -> None:
    """Raise for an unhandled outcome when the policy says abort."""
    if outcome.handled:
        return
    if policy == UnhandledVariantPolicy.ABORT:
        raise UnresolvedVariantError(
            outcome.element_id, outcome.element_type.value, process_id=process_id
        )
    logger.debug(f"Skipping {outcome.element_type.value} '{outcome.element_id}'")


class TraversalEngine:
    """Walks the process graph and collects fragments in traversal order."""

    def __init__(
        self,
        model: ProcessModel,
        dispatcher: TranslationDispatcher,
        policy: UnhandledVariantPolicy = UnhandledVariantPolicy.SKIP,
    ):
        self.model = model
        self.dispatcher = dispatcher
        self.policy = policy

    def trace(self, start: BpmnElement, visited: Optional[Set[str]] = None) -> List[str]:
        """Translate everything reachable from ``start``.

        Args:
            start: Element to start from
            visited: IDs already translated in this walk; updated in place

        Returns:
            Fragments in traversal order
        """
        if visited is None:
            visited = set()

        fragments: List[str] = []
        pending: List[BpmnElement] = [start]

        while pending:
            element = pending.pop()
            if element.id in visited:
                continue

            outcome = self.dispatcher.dispatch(element)
            if not outcome.handled:
                apply_unhandled_policy(outcome, self.policy, process_id=element.process_id)
                continue

            visited.add(element.id)
            fragments.append(outcome.fragment)

            connector, successor = self._resolve_successor(element)
            if successor is None:
                continue

            # Stack order: the connector is walked before its target
            if successor.id not in visited:
                pending.append(successor)
            if connector.id not in visited:
                pending.append(connector)

        return fragments

    def _resolve_successor(
        self, element: BpmnElement
    ) -> Tuple[Optional[BpmnElement], Optional[BpmnElement]]:
        """Return (sequence flow, flow target) for the element's outgoing flow."""
        if element.outgoing is None:
            return None, None

        successor = self.model.get_next_element_by_id(element.outgoing)
        if successor is None:
            logger.debug(f"Outgoing flow '{element.outgoing}' of '{element.id}' does not resolve")
            return None, None

        return self.model.get_element_by_id(element.outgoing), successor


__all__ = ["TraversalEngine", "apply_unhandled_policy"]
