"""Council agents: Flash (triage), Pro (deep review) and the Judge (synthesis)."""

import logging
from typing import Any, Dict, Optional

from ..schemas.common import AgentResult, CouncilVerdict
from ..schemas.config import CouncilConfig
from ..utils.json_output import get_bool, get_score, get_str, parse_json_object
from .retry import with_retry
from .vlm_client import BaseVLMClient, MalformedResponseError

logger = logging.getLogger(__name__)

FLASH_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "extractedText": {"type": "STRING"},
        "translation": {"type": "STRING"},
        "notes": {"type": "STRING"},
        "isComplex": {"type": "BOOLEAN"},
    },
}

PRO_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "extractedText": {"type": "STRING"},
        "translation": {"type": "STRING"},
        "notes": {"type": "STRING"},
    },
}

JUDGE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "finalTranslation": {"type": "STRING"},
        "judgeReasoning": {"type": "STRING"},
        "confidenceScore": {"type": "NUMBER"},
    },
}

FLASH_PROMPT = """You are AGENT FLASH, a fast and efficient OCR and translation specialist.

CRITICAL INSTRUCTIONS:
- Extract ALL text from this page image. Do NOT skip any content.
- If the text is ROTATED or UPSIDE DOWN, correct the orientation before reading.
- If the page contains HANDWRITTEN text or annotations, extract them with best-effort OCR and prefix them with [Handwritten].
- If the page contains MULTIPLE LANGUAGES, translate ALL of them into {target_language}.
- Include text found in STAMPS, SEALS or WATERMARKS.
- If text is partially obscured or blurry, infer it from context and mark it as [Uncertain: ...]. Never drop or invent it silently.

This is {page_label}.

Task:
1. Extract ALL text from the page image: printed, handwritten, stamps, everything.
2. Provide a complete translation to {target_language}. Do NOT summarize; translate EVERY line.
3. Complexity triage: set "isComplex" to true if the page has dense legal jargon, highly ambiguous clauses, or mixed handwritten and printed content that needs expert review. Set it to false for standard text.

Output strictly in JSON."""

PRO_PROMPT = """You are AGENT PRO, an expert legal translation specialist with deep reasoning capabilities.

CRITICAL INSTRUCTIONS:
- Extract and translate EVERY piece of text on this page, without exception.
- Correct for ROTATION: if the page or a section is upside-down or sideways, orient it before reading.
- HANDWRITTEN annotations: read carefully and cross-reference nearby printed text for context. Mark them with [Handwritten].
- MIXED LANGUAGES: if several languages appear (for example bilingual contracts), translate ALL content into {target_language}.
- STAMPS/SEALS: describe and translate any text inside official stamps, seals or watermarks.
- OBSCURED TEXT: if text is partially hidden or blurry, infer it from the legal context and flag it as [Inferred: ...].
- Preserve legal register distinctions (e.g. 'shall' vs 'may', 'indemnify' vs 'hold harmless').

This is {page_label}.

Task:
1. OCR the page with extreme attention to legal scripts, diacritics, faint stamps and margin notes.
2. Translate to {target_language} by carrying over the legal meaning, not just the words. Translate EVERY line; do NOT summarize.
3. Note any ambiguities, translation risks or uncertain readings.

Output strictly in JSON."""

JUDGE_PROMPT = """You are THE JUDGE. You have received TWO independent analyses of {page_label}.

--- REPORT: AGENT FLASH (Paralegal) ---
Extracted Text: "{flash_text}"
Translation: "{flash_translation}"

--- REPORT: AGENT PRO (Legal Scholar) ---
Extracted Text: "{pro_text}"
Translation: "{pro_translation}"
Notes: "{pro_notes}"

Your Task:
1. Compare both reports against the visual content of the page image.
2. Resolve discrepancies (e.g. if Flash missed handwritten text that Pro caught).
3. Make sure EVERY line on the page is accounted for in the final translation.
4. Produce the final, most accurate and COMPLETE legal translation in {target_language}.
5. Explain the reasoning behind your choices.
6. Assign a confidence score (0-100).

CRITICAL: The final translation must cover ALL text on the page. Do NOT skip or summarize."""


class BaseAgent:
    """Shared call path: retry-wrapped structured request, tolerant parsing."""

    agent_name = "Agent"

    def __init__(
        self,
        vlm_client: BaseVLMClient,
        model: str,
        config: Optional[CouncilConfig] = None,
    ):
        """Initialize agent.

        Args:
            vlm_client: Shared VLM client
            model: Model identifier for this tier
            config: Council configuration (retry budget, scores)
        """
        self.vlm_client = vlm_client
        self.model = model
        self.config = config or CouncilConfig()

    def _request(
        self,
        prompt: str,
        image: bytes,
        schema: Dict[str, Any],
        page_label: str,
        thinking_budget: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Send one structured request and return the decoded object.

        Malformed responses yield {} so the caller falls back to defaults.
        Retryable failures are retried; exhausted or fatal failures propagate.
        """
        def call_api() -> Dict[str, Any]:
            return self.vlm_client.invoke(
                prompt,
                [image],
                model=self.model,
                response_schema=schema,
                thinking_budget=thinking_budget,
            )

        try:
            response = with_retry(
                call_api,
                retries=self.config.max_retries,
                base_delay_s=self.config.retry_base_delay_s,
                description=f"{self.agent_name} ({page_label})",
            )
        except MalformedResponseError as e:
            logger.warning(f"{self.agent_name} got malformed response for {page_label}: {e}")
            return {}

        return parse_json_object(response.get("text"))


class AgentFlash(BaseAgent):
    """Fast, cheap tier: OCR, draft translation and complexity triage."""

    agent_name = "Agent Flash"
    default_notes = "Initial OCR and translation complete."

    def run(self, image: bytes, target_language: str, page_label: str) -> AgentResult:
        """Scan one page.

        Returns:
            AgentResult with is_complex set; is_complex gates escalation
        """
        prompt = FLASH_PROMPT.format(target_language=target_language, page_label=page_label)
        data = self._request(prompt, image, FLASH_SCHEMA, page_label)

        result = AgentResult(
            agent_name=self.agent_name,
            model=self.model,
            extracted_text=get_str(data, "extractedText"),
            translation=get_str(data, "translation"),
            confidence=self.config.flash_confidence,
            notes=get_str(data, "notes", self.default_notes),
            is_complex=get_bool(data, "isComplex"),
        )
        logger.info(f"{self.agent_name} finished {page_label} (complex={result.is_complex})")
        return result


class AgentPro(BaseAgent):
    """Slow, expensive tier: exhaustive extraction and legally precise translation."""

    agent_name = "Agent Pro"

    def run(self, image: bytes, target_language: str, page_label: str) -> AgentResult:
        prompt = PRO_PROMPT.format(target_language=target_language, page_label=page_label)
        data = self._request(
            prompt,
            image,
            PRO_SCHEMA,
            page_label,
            thinking_budget=self.config.pro_thinking_budget,
        )

        return AgentResult(
            agent_name=self.agent_name,
            model=self.model,
            extracted_text=get_str(data, "extractedText"),
            translation=get_str(data, "translation"),
            confidence=self.config.pro_confidence,
            notes=get_str(data, "notes"),
        )


class Judge(BaseAgent):
    """Synthesis tier: reconciles Flash and Pro against the page image."""

    agent_name = "The Judge"

    def run(
        self,
        image: bytes,
        flash: AgentResult,
        pro: AgentResult,
        target_language: str,
        page_label: str,
    ) -> CouncilVerdict:
        """Adjudicate one page.

        Returns:
            CouncilVerdict carrying (flash, pro) as provenance
        """
        prompt = JUDGE_PROMPT.format(
            page_label=page_label,
            flash_text=flash.extracted_text,
            flash_translation=flash.translation,
            pro_text=pro.extracted_text,
            pro_translation=pro.translation,
            pro_notes=pro.notes,
            target_language=target_language,
        )
        data = self._request(prompt, image, JUDGE_SCHEMA, page_label)

        return CouncilVerdict(
            final_translation=get_str(data, "finalTranslation"),
            agent_results=(flash, pro),
            judge_reasoning=get_str(data, "judgeReasoning"),
            confidence_score=get_score(
                data, "confidenceScore", self.config.judge_default_confidence
            ),
        )
