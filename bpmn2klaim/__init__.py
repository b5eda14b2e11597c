"""
bpmn2klaim: Translate BPMN 2.0 Diagrams to X-Klaim

Walks the process graph of a BPMN model from each start event and emits
the X-Klaim fragments of every reachable element, grouped per process,
plus the network declaration of the collaboration layer.
"""

from bpmn2klaim.config import GeneratorConfig, OutputFormat, UnhandledVariantPolicy
from bpmn2klaim.errors import (
    BpmnParseError,
    MissingProcessContextError,
    TranslationError,
    UnresolvedVariantError,
)
from bpmn2klaim.generator import (
    DispatchOutcome,
    Generator,
    KlaimTranslator,
    ProcessAssembler,
    TranslationDispatcher,
    TranslationResult,
    TraversalEngine,
)
from bpmn2klaim.loaders import load_bpmn, parse_bpmn
from bpmn2klaim.models import ElementType, ProcessModel

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Config
    "GeneratorConfig",
    "OutputFormat",
    "UnhandledVariantPolicy",
    # Errors
    "BpmnParseError",
    "MissingProcessContextError",
    "TranslationError",
    "UnresolvedVariantError",
    # Generator
    "DispatchOutcome",
    "Generator",
    "KlaimTranslator",
    "ProcessAssembler",
    "TranslationDispatcher",
    "TranslationResult",
    "TraversalEngine",
    # Loading
    "load_bpmn",
    "parse_bpmn",
    # Models
    "ElementType",
    "ProcessModel",
]
