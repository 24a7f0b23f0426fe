"""Document-level Model Council: sequential page processing and aggregation."""

import logging
import math
import time
from typing import List, Optional, Sequence, Union

from ..schemas.common import CouncilVerdict, PageImage
from ..schemas.config import CouncilConfig, VLMConfig
from .agents import AgentFlash, AgentPro, Judge
from .cache import VerdictCache
from .orchestrator import PageOrchestrator, page_label
from .state import MemoryStorage
from .status import StatusReporter, StatusSink
from .vlm_client import BaseVLMClient

logger = logging.getLogger(__name__)

PageInput = Union[bytes, PageImage]


def to_page_images(pages: Sequence[PageInput]) -> List[PageImage]:
    """Normalize raw image bytes or PageImage objects to dense 1-based PageImages.

    Raises:
        ValueError: If a PageImage index breaks the 1..N sequence
        TypeError: For unsupported page types
    """
    result: List[PageImage] = []
    for position, page in enumerate(pages, start=1):
        if isinstance(page, PageImage):
            if page.index != position:
                raise ValueError(
                    f"Page indices must be dense and 1-based: expected {position}, got {page.index}"
                )
            result.append(page)
        elif isinstance(page, (bytes, bytearray)):
            result.append(PageImage(index=position, image=bytes(page)))
        else:
            raise TypeError(f"Unsupported page type: {type(page)}")
    return result


def mean_confidence(verdicts: Sequence[CouncilVerdict]) -> int:
    """Arithmetic mean of page confidences, rounded half up."""
    total = sum(v.confidence_score for v in verdicts)
    return int(math.floor(total / len(verdicts) + 0.5))


def aggregate_verdicts(verdicts: Sequence[CouncilVerdict]) -> CouncilVerdict:
    """Assemble per-page verdicts into one document verdict.

    Translations and reasoning are joined in page order with page markers;
    provenance is the first page's agent pair.
    """
    total_pages = len(verdicts)

    final_translation = "\n\n".join(
        f"--- Page {idx} of {total_pages} ---\n{v.final_translation}"
        for idx, v in enumerate(verdicts, start=1)
    )
    judge_reasoning = "\n\n".join(
        f"[Page {idx}]: {v.judge_reasoning}"
        for idx, v in enumerate(verdicts, start=1)
    )

    return CouncilVerdict(
        final_translation=final_translation,
        agent_results=verdicts[0].agent_results,
        judge_reasoning=judge_reasoning,
        confidence_score=mean_confidence(verdicts),
    )


class ModelCouncil:
    """Drives the page orchestrator over a document, strictly in page order."""

    def __init__(
        self,
        orchestrator: PageOrchestrator,
        config: Optional[CouncilConfig] = None,
    ):
        self.orchestrator = orchestrator
        self.config = config or CouncilConfig()

    @classmethod
    def create(
        cls,
        vlm_client: BaseVLMClient,
        vlm_config: VLMConfig,
        cache: Optional[VerdictCache] = None,
        config: Optional[CouncilConfig] = None,
    ) -> "ModelCouncil":
        """Wire agents, cache and orchestrator around one shared client.

        Args:
            vlm_client: Provider client shared by all tiers
            vlm_config: Supplies the flash and pro model identifiers
            cache: Verdict cache (in-memory if None)
            config: Council configuration
        """
        config = config or CouncilConfig()
        cache = cache or VerdictCache(MemoryStorage())

        orchestrator = PageOrchestrator(
            flash=AgentFlash(vlm_client, vlm_config.flash_model, config),
            pro=AgentPro(vlm_client, vlm_config.pro_model, config),
            judge=Judge(vlm_client, vlm_config.pro_model, config),
            cache=cache,
            config=config,
        )
        return cls(orchestrator, config)

    def run(
        self,
        pages: Sequence[PageInput],
        target_language: str,
        status_sink: Optional[StatusSink] = None,
    ) -> CouncilVerdict:
        """Translate a whole document.

        Args:
            pages: Page images in document order
            target_language: Translation target
            status_sink: Optional callback receiving progress strings

        Returns:
            Document-level CouncilVerdict

        Raises:
            ValueError: If there are no pages
            InferenceError: First page failure aborts the whole run
        """
        page_images = to_page_images(pages)
        if not page_images:
            raise ValueError("Cannot run council on a document with no pages")

        reporter = StatusReporter(status_sink)
        total_pages = len(page_images)
        verdicts: List[CouncilVerdict] = []

        logger.info(f"Council started: {total_pages} pages -> {target_language}")

        for page in page_images:
            label = page_label(page.index, total_pages)
            verdicts.append(
                self.orchestrator.process_page(page, target_language, label, reporter)
            )

            if page.index < total_pages and self.config.page_cooldown_s > 0:
                time.sleep(self.config.page_cooldown_s)

        reporter.emit(f"Assembling {total_pages}-page translation...")
        document_verdict = aggregate_verdicts(verdicts)
        reporter.emit("All pages translated. Council adjourned.")

        logger.info(
            f"Council finished: {total_pages} pages, confidence={document_verdict.confidence_score}"
        )
        return document_verdict


def run_council(
    pages: Sequence[PageInput],
    target_language: str,
    status_sink: Optional[StatusSink],
    vlm_client: BaseVLMClient,
    vlm_config: VLMConfig,
    cache: Optional[VerdictCache] = None,
    config: Optional[CouncilConfig] = None,
) -> CouncilVerdict:
    """Pipeline entry point: pages + target language + status sink -> document verdict."""
    council = ModelCouncil.create(vlm_client, vlm_config, cache=cache, config=config)
    return council.run(pages, target_language, status_sink)
