"""Configuration schemas for the inference client, council and document processor."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class VLMConfig:
    """Configuration for VLM client.

    Attributes:
        api_key: API key for Gemini API
        flash_model: Model for the fast triage tier
        pro_model: Model for the deep-review and judge tiers
        timeout_sec: Request timeout in seconds
        min_interval_s: Minimum interval between requests (throttling)
    """
    api_key: str
    flash_model: str = "gemini-3-flash-preview"
    pro_model: str = "gemini-3-pro-preview"
    timeout_sec: int = 120
    min_interval_s: float = 0.6


@dataclass
class CouncilConfig:
    """Configuration for the Model Council pipeline.

    Attributes:
        max_retries: Retries after the first attempt of each inference call
        retry_base_delay_s: First backoff delay, doubled on every retry
        page_cooldown_s: Pause between consecutive pages
        pro_thinking_budget: Thinking token budget for Agent Pro
        flash_confidence: Reported confidence of Agent Flash
        pro_confidence: Reported confidence of Agent Pro
        fast_accept_confidence: Page confidence when Flash output is accepted as-is
        judge_default_confidence: Judge confidence when the response omits one
    """
    max_retries: int = 3
    retry_base_delay_s: float = 2.0
    page_cooldown_s: float = 0.5
    pro_thinking_budget: int = 10000
    flash_confidence: int = 85
    pro_confidence: int = 95
    fast_accept_confidence: int = 90
    judge_default_confidence: int = 90


@dataclass
class ProcessorConfig:
    """Configuration for DocumentProcessor.

    Attributes:
        state_dir: Directory for run state persistence (optional)
        cache_dir: Directory for the verdict cache (optional, memory if None)
        auto_save: Automatically save pages and results
        render_dpi: DPI for PDF rendering (default: 216)
        render_format: Page image format, "PNG" or "JPEG"
        render_quality: JPEG quality for rendered pages
        log_level: Logging level (default: INFO)
        target_language: Default translation target
    """
    state_dir: Optional[Path] = None
    cache_dir: Optional[Path] = None
    auto_save: bool = True
    render_dpi: int = 216
    render_format: str = "PNG"
    render_quality: int = 90
    log_level: str = "INFO"
    target_language: str = "Hindi"
