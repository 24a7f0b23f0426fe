"""High-level operations over a loaded document."""

from .base import BaseOperation
from .council_translation import CouncilTranslationOperation
from .legal_analysis import AnalysisError, LegalAnalysisOperation
from .text_translation import TextTranslationOperation

__all__ = [
    "BaseOperation",
    "CouncilTranslationOperation",
    "TextTranslationOperation",
    "LegalAnalysisOperation",
    "AnalysisError",
]
