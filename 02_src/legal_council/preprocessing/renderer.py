"""PDF Renderer: page images and text layer for the council."""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import fitz  # pymupdf
from PIL import Image

logger = logging.getLogger(__name__)


@dataclass
class RenderConfig:
    """Configuration for PDF rendering.

    Attributes:
        dpi: Render resolution; 216 matches a 3x scale of 72pt pages
        format: Output image format ("PNG" or "JPEG")
        quality: JPEG quality (ignored for PNG)
    """
    dpi: int = 216
    format: str = "PNG"
    quality: int = 90


class PDFRenderer:
    """Renders PDF pages to image bytes using pymupdf (fitz)."""

    def __init__(self, config: RenderConfig):
        self.config = config

    def _pixmap_to_bytes(self, pix: "fitz.Pixmap") -> bytes:
        mode = "RGB" if pix.alpha == 0 else "RGBA"
        img = Image.frombytes(mode, [pix.width, pix.height], pix.samples)

        # JPEG has no alpha; keep PNG output consistent too
        if mode == "RGBA":
            img = img.convert("RGB")

        buf = io.BytesIO()
        if self.config.format.upper() == "JPEG":
            img.save(buf, format="JPEG", quality=self.config.quality)
        else:
            img.save(buf, format="PNG")
        return buf.getvalue()

    def render_pdf(self, pdf_path: Path) -> List[Tuple[int, bytes]]:
        """Render every PDF page to image bytes.

        Args:
            pdf_path: Path to PDF file

        Returns:
            List of (page_num, image_bytes) tuples, page_num 1-based
        """
        doc = fitz.open(pdf_path)
        try:
            total_pages = len(doc)

            logger.info(
                f"Rendering {total_pages} pages from {pdf_path} "
                f"(DPI: {self.config.dpi}, format: {self.config.format})"
            )

            results: List[Tuple[int, bytes]] = []

            for idx in range(total_pages):
                pix = doc.load_page(idx).get_pixmap(dpi=self.config.dpi)
                results.append((idx + 1, self._pixmap_to_bytes(pix)))

            logger.info(f"Successfully rendered {len(results)} pages")
            return results

        finally:
            doc.close()

    def extract_text(self, pdf_path: Path) -> str:
        """Extract the PDF text layer as "--- Page N ---" blocks.

        Scanned documents without a text layer produce page markers only.
        """
        doc = fitz.open(pdf_path)
        try:
            blocks = []
            for idx in range(len(doc)):
                page_text = doc.load_page(idx).get_text().strip()
                blocks.append(f"--- Page {idx + 1} ---\n{page_text}\n")
            return "\n".join(blocks)
        finally:
            doc.close()
