"""Tests for PDF Renderer."""

import io
from pathlib import Path
from typing import List, Tuple

import pytest
from PIL import Image

from legal_council.preprocessing.renderer import PDFRenderer, RenderConfig


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    """Create a 3-page contract PDF with a text layer.

    Args:
        tmp_path: Pytest temporary directory fixture

    Returns:
        Path to test PDF file
    """
    import fitz

    pdf_path = tmp_path / "lease.pdf"

    doc = fitz.open()
    for page_num in range(3):
        page = doc.new_page(width=595, height=842)  # A4 size
        page.insert_text((50, 50), f"Clause {page_num + 1}", fontsize=24)

    doc.save(pdf_path)
    doc.close()

    return pdf_path


@pytest.fixture
def renderer() -> PDFRenderer:
    """Create PDF renderer instance with a low DPI for speed."""
    return PDFRenderer(RenderConfig(dpi=72))


def test_render_pdf_all_pages(sample_pdf: Path, renderer: PDFRenderer) -> None:
    """Test rendering all pages from PDF.

    Args:
        sample_pdf: Test PDF fixture
        renderer: PDFRenderer fixture
    """
    results: List[Tuple[int, bytes]] = renderer.render_pdf(sample_pdf)

    assert [page_num for page_num, _ in results] == [1, 2, 3]

    for _, image_bytes in results:
        img = Image.open(io.BytesIO(image_bytes))
        assert img.format == "PNG"
        assert img.width > 0


def test_render_jpeg_output(sample_pdf: Path) -> None:
    renderer = PDFRenderer(RenderConfig(dpi=72, format="JPEG", quality=80))

    _, image_bytes = renderer.render_pdf(sample_pdf)[0]

    assert image_bytes[:3] == b"\xff\xd8\xff"


def test_higher_dpi_gives_larger_image(sample_pdf: Path) -> None:
    """Test that render resolution follows RenderConfig.dpi."""
    _, low = PDFRenderer(RenderConfig(dpi=72)).render_pdf(sample_pdf)[0]
    _, high = PDFRenderer(RenderConfig(dpi=144)).render_pdf(sample_pdf)[0]

    assert Image.open(io.BytesIO(high)).width > Image.open(io.BytesIO(low)).width


def test_extract_text_page_blocks(sample_pdf: Path, renderer: PDFRenderer) -> None:
    """Test text layer extraction with page markers."""
    text = renderer.extract_text(sample_pdf)

    assert text.index("--- Page 1 ---") < text.index("--- Page 2 ---") < text.index("--- Page 3 ---")
    assert "Clause 2" in text


def test_extract_text_without_text_layer(tmp_path: Path, renderer: PDFRenderer) -> None:
    import fitz

    pdf_path = tmp_path / "scan.pdf"
    doc = fitz.open()
    doc.new_page()
    doc.save(pdf_path)
    doc.close()

    assert renderer.extract_text(pdf_path) == "--- Page 1 ---\n\n"


def test_render_config_defaults() -> None:
    config = RenderConfig()
    assert config.dpi == 216
    assert config.quality == 90
    assert config.format == "PNG"
