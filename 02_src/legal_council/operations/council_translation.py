"""Scanned-document translation through the Model Council."""

import logging
from typing import Optional

from .base import BaseOperation
from ..core.status import StatusSink
from ..schemas.common import CouncilVerdict

logger = logging.getLogger(__name__)

RESULT_NAME = "council_translation"


class CouncilTranslationOperation(BaseOperation):
    """Translate every page of the processor's document with the council."""

    def execute(
        self,
        target_language: Optional[str] = None,
        status_sink: Optional[StatusSink] = None,
    ) -> CouncilVerdict:
        """Run the council over all pages.

        Args:
            target_language: Translation target (processor default if None)
            status_sink: Optional progress callback

        Returns:
            Document-level CouncilVerdict
        """
        target_language = target_language or self.processor.config.target_language
        logger.info(
            f"Starting CouncilTranslationOperation "
            f"({self.processor.num_pages} pages -> {target_language})"
        )

        council = self.processor.build_council()
        verdict = council.run(self.processor.pages, target_language, status_sink)

        if self.processor.config.auto_save:
            result = verdict.to_dict()
            result["target_language"] = target_language
            self.processor.state_manager.save_operation_result(RESULT_NAME, result)

        return verdict
