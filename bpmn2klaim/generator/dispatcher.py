"""
Translation Dispatcher

Selects the translation routine for an element by its variant. The routine
table is fixed when the dispatcher is built; an element whose variant is not
in the table comes back as an unhandled outcome rather than an error, and the
caller decides whether to skip it or abort.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from bpmn2klaim.generator.klaim import Handler
from bpmn2klaim.models.elements import BpmnElement, ElementType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of dispatching one element."""

    element_id: str
    element_type: ElementType
    fragment: Optional[str] = None

    @property
    def handled(self) -> bool:
        return self.fragment is not None


class TranslationDispatcher:
    """Maps element variants to translation routines."""

    def __init__(self, handlers: Mapping[ElementType, Handler]):
        """Initialize dispatcher.

        Args:
            handlers: Routine per variant, e.g. ``KlaimTranslator(model).handlers()``
        """
        self._handlers: Dict[ElementType, Handler] = dict(handlers)

    @property
    def variants(self) -> List[ElementType]:
        """Variants with a registered routine."""
        return list(self._handlers)

    def can_handle(self, element_type: ElementType) -> bool:
        return element_type in self._handlers

    def missing_handlers(self, variants: Iterable[ElementType]) -> List[ElementType]:
        """Report which of the given variants have no routine."""
        return [v for v in variants if v not in self._handlers]

    def dispatch(self, element: BpmnElement) -> DispatchOutcome:
        """Translate one element.

        Exceptions raised by the routine propagate to the caller.
        """
        handler = self._handlers.get(element.element_type)
        if handler is None:
            logger.debug(f"No routine for {element.element_type.value} '{element.id}'")
            return DispatchOutcome(element_id=element.id, element_type=element.element_type)

        fragment = handler(element)
        return DispatchOutcome(
            element_id=element.id, element_type=element.element_type, fragment=fragment
        )


__all__ = ["DispatchOutcome", "TranslationDispatcher"]
