"""
Process Model

Identifier-keyed store of the BPMN elements of one diagram, with a
type index and successor resolution used by the X-Klaim generator.

The model is built once (by the XML loader or by hand) and is read-only
afterwards; every query returns fresh lists so callers cannot disturb
the indexes.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from bpmn2klaim.models.elements import (
    START_EVENT_TYPES,
    BpmnElement,
    ElementType,
    SequenceFlow,
)


class ProcessModel(BaseModel):
    """All elements of a BPMN diagram with O(1) lookups."""

    name: Optional[str] = Field(None, description="Diagram name (usually the source file)")
    elements: List[BpmnElement] = Field(default_factory=list, description="All elements")

    # Internal indexes (not serialized)
    _element_index: Dict[str, BpmnElement] = {}
    _type_index: Dict[ElementType, List[BpmnElement]] = {}

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __init__(self, **data):
        """Initialize model and build indexes."""
        super().__init__(**data)
        self._build_indexes()

    def _build_indexes(self) -> None:
        """Build the identifier and type indexes, rejecting duplicate IDs."""
        self._element_index = {}
        self._type_index = {}

        for element in self.elements:
            if element.id in self._element_index:
                raise ValueError(f"Duplicate element ID: {element.id}")
            self._element_index[element.id] = element
            self._type_index.setdefault(element.element_type, []).append(element)

    def __len__(self) -> int:
        return len(self._element_index)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._element_index

    # Lookups
    def get_element_by_id(self, element_id: Optional[str]) -> Optional[BpmnElement]:
        """Get element by ID - O(1) lookup."""
        if element_id is None:
            return None
        return self._element_index.get(element_id)

    def get_next_element_by_id(self, connector_id: Optional[str]) -> Optional[BpmnElement]:
        """Resolve a sequence flow ID to the element the flow targets.

        Returns None when the flow is unknown, is not a sequence flow, or
        points at an element that is not part of the model.
        """
        connector = self.get_element_by_id(connector_id)
        if not isinstance(connector, SequenceFlow):
            return None
        return self._element_index.get(connector.target_ref)

    def get_elements_by_type(self, element_type: ElementType) -> List[BpmnElement]:
        """Get all elements of a variant, in insertion order."""
        return list(self._type_index.get(element_type, []))

    def get_start_events(self) -> List[BpmnElement]:
        """None, message and signal start events, in that order."""
        start_events: List[BpmnElement] = []
        for element_type in START_EVENT_TYPES:
            start_events.extend(self.get_elements_by_type(element_type))
        return start_events

    def get_event_sub_processes(self) -> List[BpmnElement]:
        return self.get_elements_by_type(ElementType.EVENT_SUB_PROCESS)

    def get_collaborations(self) -> List[BpmnElement]:
        """Collaboration elements in store order."""
        return [e for e in self.elements if e.element_type == ElementType.COLLABORATION]

    def get_pools(self) -> List[BpmnElement]:
        return self.get_elements_by_type(ElementType.POOL)

    def get_process_ids(self) -> List[str]:
        """Distinct process IDs, in the order they first appear."""
        seen: Dict[str, None] = {}
        for element in self.elements:
            if element.process_id is not None:
                seen.setdefault(element.process_id, None)
        return list(seen)


__all__ = ["ProcessModel"]
