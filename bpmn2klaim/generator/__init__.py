"""
X-Klaim generation: dispatch, traversal and assembly of translated fragments.
"""

from bpmn2klaim.generator.assembler import ProcessAssembler
from bpmn2klaim.generator.collaboration import CollaborationTranslator
from bpmn2klaim.generator.dispatcher import DispatchOutcome, TranslationDispatcher
from bpmn2klaim.generator.generator import Generator, TranslationResult
from bpmn2klaim.generator.klaim import KlaimTranslator, klaim_identifier
from bpmn2klaim.generator.traversal import TraversalEngine

__all__ = [
    "CollaborationTranslator",
    "DispatchOutcome",
    "Generator",
    "KlaimTranslator",
    "ProcessAssembler",
    "TranslationDispatcher",
    "TranslationResult",
    "TraversalEngine",
    "klaim_identifier",
]
