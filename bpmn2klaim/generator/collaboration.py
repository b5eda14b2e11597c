"""
Collaboration Translator

Translates the top-level collaboration elements. Pools are consumed by the
collaboration routine and are not emitted on their own.
"""

import logging
from typing import List

from bpmn2klaim.config import UnhandledVariantPolicy
from bpmn2klaim.generator.dispatcher import TranslationDispatcher
from bpmn2klaim.generator.traversal import apply_unhandled_policy
from bpmn2klaim.models.diagram import ProcessModel

logger = logging.getLogger(__name__)


class CollaborationTranslator:
    """Emits one fragment per collaboration, in store order."""

    def __init__(
        self,
        dispatcher: TranslationDispatcher,
        policy: UnhandledVariantPolicy = UnhandledVariantPolicy.SKIP,
    ):
        self.dispatcher = dispatcher
        self.policy = policy

    def translate_collaborations(self, model: ProcessModel) -> List[str]:
        translations: List[str] = []
        for collaboration in model.get_collaborations():
            outcome = self.dispatcher.dispatch(collaboration)
            if not outcome.handled:
                apply_unhandled_policy(outcome, self.policy)
                continue
            translations.append(outcome.fragment)

        logger.debug(
            f"Translated {len(translations)} collaboration(s), {len(model.get_pools())} pool(s)"
        )
        return translations


__all__ = ["CollaborationTranslator"]
