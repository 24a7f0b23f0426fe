"""Preprocessing: PDF rasterization and text extraction."""

from .renderer import PDFRenderer, RenderConfig

__all__ = ["PDFRenderer", "RenderConfig"]
