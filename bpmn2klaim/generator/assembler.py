"""
Process Assembler

Builds the per-process fragment lists: event sub-processes of a process come
first, followed by the trace of each of its start events.
"""

import logging
from typing import Dict, List

from bpmn2klaim.config import UnhandledVariantPolicy
from bpmn2klaim.errors import MissingProcessContextError
from bpmn2klaim.generator.dispatcher import TranslationDispatcher
from bpmn2klaim.generator.traversal import TraversalEngine, apply_unhandled_policy
from bpmn2klaim.models.diagram import ProcessModel

logger = logging.getLogger(__name__)


class ProcessAssembler:
    """Assembles translated fragments per process ID."""

    def __init__(
        self,
        dispatcher: TranslationDispatcher,
        policy: UnhandledVariantPolicy = UnhandledVariantPolicy.SKIP,
    ):
        self.dispatcher = dispatcher
        self.policy = policy

    def assemble_all(self, model: ProcessModel) -> Dict[str, List[str]]:
        """Translate every process of the model.

        Args:
            model: Process model to translate

        Returns:
            Mapping of process ID to fragments, in assembly order

        Raises:
            MissingProcessContextError: If a start event has no process ID
            UnresolvedVariantError: If the policy is abort and an element
                has no translation routine
        """
        start_events = model.get_start_events()
        for start_event in start_events:
            if start_event.process_id is None:
                raise MissingProcessContextError(start_event.id)

        sub_process_fragments = self.translate_event_sub_processes(model)
        engine = TraversalEngine(model, self.dispatcher, self.policy)

        result: Dict[str, List[str]] = {}
        for start_event in start_events:
            process_id = start_event.process_id
            combined = result.get(process_id, [])
            combined.extend(sub_process_fragments.get(process_id, []))
            combined.extend(engine.trace(start_event, set()))
            result[process_id] = combined

        logger.info(
            f"Assembled {len(result)} process(es) from {len(start_events)} start event(s)"
        )
        return result

    def translate_event_sub_processes(self, model: ProcessModel) -> Dict[str, List[str]]:
        """Translate each event sub-process as one unit, grouped by process ID."""
        grouped: Dict[str, List[str]] = {}

        for sub_process in model.get_event_sub_processes():
            if sub_process.process_id is None:
                logger.warning(f"Event sub-process '{sub_process.id}' has no process ID, ignored")
                continue

            outcome = self.dispatcher.dispatch(sub_process)
            if not outcome.handled:
                apply_unhandled_policy(outcome, self.policy, process_id=sub_process.process_id)
                continue

            grouped.setdefault(sub_process.process_id, []).append(outcome.fragment)

        return grouped


__all__ = ["ProcessAssembler"]
