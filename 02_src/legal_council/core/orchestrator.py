"""Per-page escalation state machine of the Model Council."""

import logging
from enum import Enum
from typing import Optional

from ..schemas.common import CouncilVerdict, PageImage
from ..schemas.config import CouncilConfig
from .agents import AgentFlash, AgentPro, Judge
from .cache import VerdictCache, compute_cache_key
from .status import StatusReporter

logger = logging.getLogger(__name__)

FAST_ACCEPT_REASONING = "Flash translation approved for standard content."


class PageState(Enum):
    CACHE_LOOKUP = "cache_lookup"
    FLASH = "flash"
    FAST_ACCEPT = "fast_accept"
    ESCALATE = "escalate"
    PRO = "pro"
    JUDGE = "judge"
    CACHE_WRITE = "cache_write"
    DONE = "done"


def page_label(page_number: int, total_pages: int) -> str:
    return f"Page {page_number} of {total_pages}"


class PageOrchestrator:
    """Runs one page through the council.

    CACHE_LOOKUP -> FLASH -> {FAST_ACCEPT | ESCALATE -> PRO -> JUDGE}
    -> CACHE_WRITE -> DONE, with a cache hit going straight to DONE.
    """

    def __init__(
        self,
        flash: AgentFlash,
        pro: AgentPro,
        judge: Judge,
        cache: VerdictCache,
        config: Optional[CouncilConfig] = None,
    ):
        self.flash = flash
        self.pro = pro
        self.judge = judge
        self.cache = cache
        self.config = config or CouncilConfig()

    def _enter(self, state: PageState, label: str) -> None:
        logger.debug(f"{label}: -> {state.name}")

    def process_page(
        self,
        page: PageImage,
        target_language: str,
        label: str,
        reporter: Optional[StatusReporter] = None,
    ) -> CouncilVerdict:
        """Produce the verdict for one page.

        Args:
            page: Page to translate
            target_language: Translation target
            label: Human-readable page label ("Page 2 of 5")
            reporter: Status channel (silent if None)

        Returns:
            Cached or freshly computed CouncilVerdict

        Raises:
            InferenceError: Fatal provider failure or exhausted retries
        """
        reporter = reporter or StatusReporter()

        self._enter(PageState.CACHE_LOOKUP, label)
        cache_key = compute_cache_key(page.image, target_language)
        cached = self.cache.get(cache_key)
        if cached is not None:
            reporter.emit(f"{label} - Served from cache (instant)")
            self._enter(PageState.DONE, label)
            return cached

        self._enter(PageState.FLASH, label)
        reporter.emit(f"{label} - Agent Flash scanning...")
        flash = self.flash.run(page.image, target_language, label)

        if flash.is_complex:
            self._enter(PageState.ESCALATE, label)
            self._enter(PageState.PRO, label)
            reporter.emit(f"{label} - Complex content detected. Agent Pro analyzing...")
            pro = self.pro.run(page.image, target_language, label)

            self._enter(PageState.JUDGE, label)
            reporter.emit(f"{label} - Judicial review...")
            verdict = self.judge.run(page.image, flash, pro, target_language, label)
        else:
            self._enter(PageState.FAST_ACCEPT, label)
            verdict = CouncilVerdict(
                final_translation=flash.translation,
                agent_results=(flash, flash),
                judge_reasoning=FAST_ACCEPT_REASONING,
                confidence_score=self.config.fast_accept_confidence,
            )

        reporter.emit(f"{label} - Translation complete")

        self._enter(PageState.CACHE_WRITE, label)
        if not self.cache.put(cache_key, verdict):
            logger.warning(f"{label}: verdict not cached, continuing with computed result")

        self._enter(PageState.DONE, label)
        return verdict
