"""
Legal Council - Legal document translation via a council of Vision Language Models.

Each page goes through a cheap triage tier (Agent Flash); complex pages are
escalated to a deep-review tier (Agent Pro) and reconciled by a Judge.
Verdicts are cached by page content and target language.
"""

__version__ = "0.1.0"

# Core classes
from .core.processor import DocumentProcessor
from .core.vlm_client import BaseVLMClient, GeminiVLMClient, InferenceError
from .core.council import ModelCouncil, run_council
from .core.cache import VerdictCache, compute_cache_key

# Operations
from .operations.base import BaseOperation
from .operations.council_translation import CouncilTranslationOperation
from .operations.text_translation import TextTranslationOperation
from .operations.legal_analysis import LegalAnalysisOperation

# Schemas
from .schemas.config import CouncilConfig, ProcessorConfig, VLMConfig
from .schemas.common import AgentResult, AnalysisResult, CouncilVerdict, PageImage
from .preprocessing.renderer import RenderConfig

__all__ = [
    # Version
    "__version__",

    # Core classes
    "DocumentProcessor",
    "BaseVLMClient",
    "GeminiVLMClient",
    "InferenceError",
    "ModelCouncil",
    "run_council",
    "VerdictCache",
    "compute_cache_key",

    # Operations
    "BaseOperation",
    "CouncilTranslationOperation",
    "TextTranslationOperation",
    "LegalAnalysisOperation",

    # Schemas - Config
    "CouncilConfig",
    "ProcessorConfig",
    "VLMConfig",
    "RenderConfig",

    # Schemas - Data
    "AgentResult",
    "AnalysisResult",
    "CouncilVerdict",
    "PageImage",
]
