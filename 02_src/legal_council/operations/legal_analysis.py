"""Legal risk analysis and headnote summaries of document text."""

import logging
from typing import Any, Dict, List, Optional

from .base import BaseOperation
from ..core.vlm_client import InferenceError
from ..schemas.common import AnalysisResult, ClauseInfo, RiskLevel
from ..utils.json_output import clean_json_fence, get_str, get_str_list, parse_json_object

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Could not generate summary."
SUMMARY_ERROR = "Error generating summary."

PROMPT_SUMMARY = (
    "You are a legal expert. Generate a concise 'Headnote' style executive summary "
    "(under 250 words) of the following legal document. Focus specifically on Parties, "
    "Term, Termination Rights, and Key Obligations.\n\nDocument:\n{text}"
)

PROMPT_ANALYSIS = """Analyze this legal document acting as a senior legal consultant.
1. Executive Summary: Provide a 'Headnote' style summary (Parties, Term, Termination).
2. Risk Analysis: Identify high-risk clauses based on standard legal playbooks (e.g., Uncapped Liability, Unilateral Termination, vague Indemnity, Dispute Resolution issues).
3. Clause Breakdown: Extract key clauses, grade their risk (HIGH/MEDIUM/LOW), and provide a 'Plain English' explanation for a layperson.

Document:
{text}"""

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "STRING",
            "description": "A brief 'Headnote' style summary of the document.",
        },
        "risks": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "High-level potential risks based on standard legal playbooks.",
        },
        "clauses": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "original": {"type": "STRING", "description": "The exact clause text."},
                    "explanation": {"type": "STRING", "description": "Plain English explanation."},
                    "riskLevel": {"type": "STRING", "enum": ["LOW", "MEDIUM", "HIGH"]},
                },
            },
        },
    },
}


class AnalysisError(RuntimeError):
    """Raised when risk analysis cannot be obtained from the provider."""


def parse_clauses(raw: Any) -> List[ClauseInfo]:
    """Convert raw clause dicts to ClauseInfo, dropping malformed entries."""
    if not isinstance(raw, list):
        return []

    clauses = []
    for item in raw:
        if not isinstance(item, dict):
            logger.warning(f"Invalid clause format: {item}")
            continue
        original = get_str(item, "original")
        try:
            risk_level = RiskLevel(str(item.get("riskLevel", "")).upper())
        except ValueError:
            logger.warning(f"Invalid clause risk level: {item.get('riskLevel')}")
            continue
        if not original:
            continue
        clauses.append(ClauseInfo(
            original=original,
            explanation=get_str(item, "explanation"),
            risk_level=risk_level,
        ))
    return clauses


def analysis_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Plain-dict form of an AnalysisResult for YAML results."""
    return {
        "summary": result.summary,
        "risks": list(result.risks),
        "clauses": [
            {
                "original": c.original,
                "explanation": c.explanation,
                "risk_level": c.risk_level.value,
            }
            for c in result.clauses
        ],
    }


class LegalAnalysisOperation(BaseOperation):
    """Risk analysis and summaries over the document's text."""

    def _resolve_text(self, text: Optional[str]) -> str:
        text = text if text is not None else self.processor.text
        if not text or not text.strip():
            raise ValueError("No text to analyze (document has no text layer)")
        return text

    def summarize(self, text: Optional[str] = None) -> str:
        """Headnote summary.

        An empty reply gives SUMMARY_FALLBACK, a provider failure SUMMARY_ERROR.
        """
        prompt = PROMPT_SUMMARY.format(text=self._resolve_text(text))
        client = self.processor.vlm_client
        model = self.processor.vlm_config.flash_model

        try:
            response = self._call_with_retry(
                lambda: client.invoke(prompt, [], model=model),
                description="Summary",
            )
        except InferenceError as e:
            logger.error(f"Summarization error: {e}")
            return SUMMARY_ERROR

        return response.get("text") or SUMMARY_FALLBACK

    def analyze_risks(self, text: Optional[str] = None) -> AnalysisResult:
        """Structured risk analysis.

        An empty reply gives an empty AnalysisResult.

        Raises:
            AnalysisError: If the provider call fails or the reply is not a JSON object
        """
        prompt = PROMPT_ANALYSIS.format(text=self._resolve_text(text))
        client = self.processor.vlm_client
        model = self.processor.vlm_config.pro_model
        thinking_budget = self.processor.council_config.pro_thinking_budget

        try:
            response = self._call_with_retry(
                lambda: client.invoke(
                    prompt,
                    [],
                    model=model,
                    response_schema=ANALYSIS_SCHEMA,
                    thinking_budget=thinking_budget,
                ),
                description="Risk analysis",
            )
        except InferenceError as e:
            logger.error(f"Analysis error: {e}")
            raise AnalysisError("Failed to analyze document.") from e

        raw_text = response.get("text") or ""
        data = parse_json_object(raw_text)
        if not data and raw_text.strip() and clean_json_fence(raw_text) != "{}":
            logger.error(f"Analysis reply is not a JSON object: {raw_text[:200]}")
            raise AnalysisError("Failed to analyze document.")

        result = AnalysisResult(
            summary=get_str(data, "summary"),
            risks=get_str_list(data, "risks"),
            clauses=parse_clauses(data.get("clauses")),
        )
        logger.info(
            f"Risk analysis: {len(result.risks)} risks, {len(result.clauses)} clauses"
        )
        return result

    def execute(self, mode: str = "analyze", text: Optional[str] = None) -> Any:
        """Run "analyze" (AnalysisResult) or "summarize" (str) and save the result."""
        if mode == "analyze":
            result = self.analyze_risks(text)
            saved: Any = analysis_to_dict(result)
        elif mode == "summarize":
            result = self.summarize(text)
            saved = {"summary": result}
        else:
            raise ValueError(f"Unknown analysis mode: {mode}")

        if self.processor.config.auto_save:
            self.processor.state_manager.save_operation_result(f"legal_{mode}", saved)
        return result
