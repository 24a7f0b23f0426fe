"""DocumentProcessor - Loads a document and wires the council around it."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv

from ..preprocessing.renderer import PDFRenderer, RenderConfig
from ..schemas.common import PageImage
from ..schemas.config import CouncilConfig, ProcessorConfig, VLMConfig
from .cache import VerdictCache
from .council import ModelCouncil
from .state import DiskStorage, MemoryStorage, StateManager
from .vlm_client import BaseVLMClient, GeminiVLMClient

logger = logging.getLogger(__name__)


def load_vlm_config() -> VLMConfig:
    """Build VLMConfig from the environment (.env supported).

    Raises:
        ValueError: If GEMINI_API_KEY is not set
    """
    load_dotenv()
    api_key = os.getenv("GEMINI_API_KEY")

    if not api_key:
        raise ValueError(
            "GEMINI_API_KEY not found in environment. "
            "Please set it in .env file or pass vlm_client explicitly."
        )

    return VLMConfig(api_key=api_key)


class DocumentProcessor:
    """Main class for document processing.

    Supports:
    - PDF files with automatic rendering and text-layer extraction
    - Image arrays (pre-rendered pages)

    Owns the shared VLM client, the run state and the verdict cache.
    """

    def __init__(
        self,
        source: Union[Path, List[bytes]],
        vlm_client: Optional[BaseVLMClient] = None,
        vlm_config: Optional[VLMConfig] = None,
        state_manager: Optional[StateManager] = None,
        cache: Optional[VerdictCache] = None,
        config: Optional[ProcessorConfig] = None,
        council_config: Optional[CouncilConfig] = None,
    ):
        """Initialize document processor.

        Args:
            source: PDF file path or list of page image bytes
            vlm_client: Provider client (created from environment if not provided)
            vlm_config: Model configuration (loaded from environment if not provided)
            state_manager: Run state manager (created from config if not provided)
            cache: Verdict cache (created from config.cache_dir if not provided)
            config: Processor configuration
            council_config: Council configuration
        """
        self.config = config or ProcessorConfig()
        self.council_config = council_config or CouncilConfig()

        if state_manager is None:
            if self.config.state_dir is not None:
                storage = DiskStorage(self.config.state_dir)
            else:
                storage = MemoryStorage()
            state_manager = StateManager(storage)
        self.state_manager = state_manager

        if cache is None:
            if self.config.cache_dir is not None:
                cache = VerdictCache(DiskStorage(self.config.cache_dir))
            else:
                cache = VerdictCache(MemoryStorage())
            logger.info(f"Created VerdictCache (cache_dir={self.config.cache_dir})")
        self.cache = cache

        if vlm_config is None:
            if vlm_client is None:
                vlm_config = load_vlm_config()
            else:
                # Injected clients only need the model names from config
                vlm_config = getattr(vlm_client, "config", None) or VLMConfig(api_key="")
        self.vlm_config = vlm_config
        self.vlm_client = vlm_client or GeminiVLMClient(vlm_config)

        self._pdf_path: Optional[Path] = None
        self._text: Optional[str] = None
        self._pages: List[PageImage] = []

        if isinstance(source, Path):
            logger.info(f"Initializing from PDF: {source}")
            self._init_from_pdf(source)

        elif isinstance(source, list):
            logger.info(f"Initializing from image array ({len(source)} images)")
            self._pages = [
                PageImage(index=i + 1, image=img_bytes)
                for i, img_bytes in enumerate(source)
            ]

        else:
            raise TypeError(
                f"Invalid source type: {type(source)}. "
                "Expected Path or List[bytes]"
            )

        if self.config.auto_save:
            for page in self._pages:
                self.state_manager.save_page(page.index, page.image)

        logger.info(f"DocumentProcessor initialized with {len(self._pages)} pages")

    def _renderer(self) -> PDFRenderer:
        return PDFRenderer(RenderConfig(
            dpi=self.config.render_dpi,
            format=self.config.render_format,
            quality=self.config.render_quality,
        ))

    def _init_from_pdf(self, pdf_path: Path) -> None:
        self._pdf_path = pdf_path
        renderer = self._renderer()
        self._pages = [
            PageImage(index=page_num, image=img_bytes)
            for page_num, img_bytes in renderer.render_pdf(pdf_path)
        ]

    @property
    def pages(self) -> List[PageImage]:
        """Document pages (1-based, dense)."""
        return self._pages

    @property
    def num_pages(self) -> int:
        return len(self._pages)

    @property
    def text(self) -> Optional[str]:
        """Text layer of a PDF source (extracted lazily), None for image sources."""
        if self._pdf_path is None:
            return None
        if self._text is None:
            renderer = self._renderer()
            self._text = renderer.extract_text(self._pdf_path)
        return self._text

    def build_council(self) -> ModelCouncil:
        """Create a ModelCouncil sharing this processor's client and cache."""
        return ModelCouncil.create(
            self.vlm_client,
            self.vlm_config,
            cache=self.cache,
            config=self.council_config,
        )
