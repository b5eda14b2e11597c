"""
Errors raised by the X-Klaim generator and the BPMN loader.

Every error identifies the offending element and/or process so the caller
can report a single structured failure.
"""

from typing import Optional


class TranslationError(Exception):
    """Base class for translation failures."""

    def __init__(
        self,
        message: str,
        element_id: Optional[str] = None,
        process_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.element_id = element_id
        self.process_id = process_id

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "message": str(self),
            "element_id": self.element_id,
            "process_id": self.process_id,
        }


class MissingProcessContextError(TranslationError):
    """A start event has no owning process ID."""

    def __init__(self, element_id: str):
        super().__init__(
            f"Process ID is missing for start event '{element_id}'", element_id=element_id
        )


class UnresolvedVariantError(TranslationError):
    """No translation routine is registered for an element's variant."""

    def __init__(self, element_id: str, element_type: str, process_id: Optional[str] = None):
        super().__init__(
            f"No translation routine for element '{element_id}' of type '{element_type}'",
            element_id=element_id,
            process_id=process_id,
        )
        self.element_type = element_type


class BpmnParseError(Exception):
    """The BPMN XML input could not be read."""
