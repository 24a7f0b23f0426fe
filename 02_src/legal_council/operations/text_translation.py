"""Plain-text legal translation for documents with a text layer."""

import logging
from typing import Optional

from .base import BaseOperation
from ..schemas.languages import AUTO_DETECT

logger = logging.getLogger(__name__)

PROMPT_TRANSLATE = (
    "Translate the following legal text into {target_language}. "
    "Maintain strict legal formatting, terminology, and structural integrity.\n\n"
    "Text:\n{text}"
)

PROMPT_TRANSLATE_FROM = (
    "Translate the following legal text from {source_language} into {target_language}. "
    "Maintain strict legal formatting, terminology, and structural integrity.\n\n"
    "Text:\n{text}"
)


class TextTranslationOperation(BaseOperation):
    """Single-call translation of extracted text, without the council."""

    def execute(
        self,
        target_language: Optional[str] = None,
        source_language: str = AUTO_DETECT.code,
        text: Optional[str] = None,
    ) -> str:
        """Translate text (the processor's text layer by default).

        Args:
            target_language: Translation target (processor default if None)
            source_language: Source language, "auto" to let the model detect it
            text: Text to translate instead of the processor's text layer

        Returns:
            Translated text ("" if the provider returned nothing)

        Raises:
            ValueError: If there is no text to translate
        """
        target_language = target_language or self.processor.config.target_language
        text = text if text is not None else self.processor.text

        if not text or not text.strip():
            raise ValueError("No text to translate (document has no text layer)")

        if source_language and source_language != AUTO_DETECT.code:
            prompt = PROMPT_TRANSLATE_FROM.format(
                source_language=source_language, target_language=target_language, text=text
            )
        else:
            prompt = PROMPT_TRANSLATE.format(target_language=target_language, text=text)

        client = self.processor.vlm_client
        model = self.processor.vlm_config.flash_model

        logger.info(f"Translating {len(text)} characters -> {target_language}")
        response = self._call_with_retry(
            lambda: client.invoke(prompt, [], model=model),
            description="Text translation",
        )

        translation = response.get("text") or ""
        if self.processor.config.auto_save:
            self.processor.state_manager.save_operation_result(
                "text_translation",
                {"target_language": target_language, "translation": translation},
            )
        return translation
