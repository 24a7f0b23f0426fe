"""Common data schemas shared by agents, orchestrator and cache."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class PageImage:
    """One rendered document page.

    Attributes:
        index: Page number (1-based, dense)
        image: Page image bytes (PNG or JPEG)
    """
    index: int
    image: bytes


@dataclass(frozen=True)
class AgentResult:
    """Output of one inference tier for one page.

    Attributes:
        agent_name: Tier identity ("Agent Flash", "Agent Pro")
        model: Model identifier used for the call
        extracted_text: Source text read from the page
        translation: Translation produced by the tier
        confidence: Static quality estimate for the tier (0-100)
        notes: Free-text notes from the tier
        is_complex: Complexity triage flag (Flash only, None otherwise)
    """
    agent_name: str
    model: str
    extracted_text: str
    translation: str
    confidence: int
    notes: str
    is_complex: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentResult":
        return cls(
            agent_name=str(data["agent_name"]),
            model=str(data["model"]),
            extracted_text=str(data.get("extracted_text", "")),
            translation=str(data.get("translation", "")),
            confidence=int(data.get("confidence", 0)),
            notes=str(data.get("notes", "")),
            is_complex=data.get("is_complex"),
        )


@dataclass(frozen=True)
class CouncilVerdict:
    """Resolved outcome for one page or, after aggregation, a whole document.

    Attributes:
        final_translation: Final translation text (empty string on failure, never None)
        agent_results: Contributing agent results, always exactly two
        judge_reasoning: Synthesis reasoning text
        confidence_score: Confidence in [0, 100]
    """
    final_translation: str
    agent_results: Tuple[AgentResult, AgentResult]
    judge_reasoning: str
    confidence_score: int

    def __post_init__(self) -> None:
        if self.final_translation is None:
            object.__setattr__(self, "final_translation", "")
        if len(self.agent_results) != 2:
            raise ValueError(
                f"CouncilVerdict requires exactly 2 agent results, got {len(self.agent_results)}"
            )
        if not 0 <= self.confidence_score <= 100:
            raise ValueError(f"Confidence out of range: {self.confidence_score}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict for the cache store."""
        data = asdict(self)
        data["agent_results"] = [asdict(r) for r in self.agent_results]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CouncilVerdict":
        """Rebuild a verdict from its serialized form.

        Raises:
            KeyError, TypeError, ValueError: If the record is incomplete or invalid
        """
        results = tuple(AgentResult.from_dict(r) for r in data["agent_results"])
        return cls(
            final_translation=str(data["final_translation"]),
            agent_results=results,
            judge_reasoning=str(data.get("judge_reasoning", "")),
            confidence_score=int(data["confidence_score"]),
        )


class RiskLevel(str, Enum):
    """Risk grade of an analyzed clause."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class ClauseInfo:
    """A clause extracted during legal risk analysis.

    Attributes:
        original: Exact clause text
        explanation: Plain-English explanation
        risk_level: Risk grade
    """
    original: str
    explanation: str
    risk_level: RiskLevel


@dataclass
class AnalysisResult:
    """Result of legal risk analysis.

    Attributes:
        summary: Headnote style summary
        risks: High-level risks found in the document
        clauses: Key clauses with risk grading
    """
    summary: str = ""
    risks: List[str] = field(default_factory=list)
    clauses: List[ClauseInfo] = field(default_factory=list)
