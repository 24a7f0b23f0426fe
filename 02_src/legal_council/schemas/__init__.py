"""Data schemas for Legal Council."""

from .common import (
    AgentResult,
    AnalysisResult,
    ClauseInfo,
    CouncilVerdict,
    PageImage,
    RiskLevel,
)
from .config import CouncilConfig, ProcessorConfig, VLMConfig
from .languages import AUTO_DETECT, SUPPORTED_LANGUAGES, LanguageOption, find_language

__all__ = [
    "AgentResult",
    "AnalysisResult",
    "ClauseInfo",
    "CouncilVerdict",
    "PageImage",
    "RiskLevel",
    "CouncilConfig",
    "ProcessorConfig",
    "VLMConfig",
    "AUTO_DETECT",
    "SUPPORTED_LANGUAGES",
    "LanguageOption",
    "find_language",
]
