"""Shared fixtures: a scripted fake provider and fast council configuration."""

import json
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from legal_council.core.vlm_client import BaseVLMClient
from legal_council.schemas.config import CouncilConfig, VLMConfig

Scripted = Union[Dict[str, Any], str, Exception, Callable[[str], Any]]


class ScriptedVLMClient(BaseVLMClient):
    """Fake provider answering per tier from scripted responses.

    The tier is recognized from the prompt. A tier script is either a single
    response (reused for every call) or a list consumed in order, the last
    entry being reused. A response can be a dict (sent as JSON text), a raw
    string, an exception to raise, or a callable taking the prompt.
    """

    def __init__(
        self,
        flash: Optional[Union[Scripted, List[Scripted]]] = None,
        pro: Optional[Union[Scripted, List[Scripted]]] = None,
        judge: Optional[Union[Scripted, List[Scripted]]] = None,
        text: Optional[Union[Scripted, List[Scripted]]] = None,
    ):
        self.config = VLMConfig(api_key="test_api_key")
        self.scripts = {
            "flash": flash if flash is not None else {
                "extractedText": "source", "translation": "translated", "isComplex": False,
            },
            "pro": pro if pro is not None else {
                "extractedText": "pro source", "translation": "pro translated", "notes": "ok",
            },
            "judge": judge if judge is not None else {
                "finalTranslation": "judged", "judgeReasoning": "reconciled", "confidenceScore": 93,
            },
            "text": text if text is not None else "plain text answer",
        }
        self.calls: List[Dict[str, Any]] = []

    @staticmethod
    def tier_of(prompt: str) -> str:
        if prompt.startswith("You are THE JUDGE"):
            return "judge"
        if prompt.startswith("You are AGENT FLASH"):
            return "flash"
        if prompt.startswith("You are AGENT PRO"):
            return "pro"
        return "text"

    def count(self, tier: str) -> int:
        return sum(1 for call in self.calls if call["tier"] == tier)

    def _next(self, tier: str) -> Scripted:
        script = self.scripts[tier]
        if isinstance(script, list):
            used = self.count(tier) - 1
            return script[min(used, len(script) - 1)]
        return script

    def invoke(self, prompt, images, model=None, response_schema=None, thinking_budget=None):
        tier = self.tier_of(prompt)
        self.calls.append({
            "tier": tier,
            "prompt": prompt,
            "images": list(images),
            "model": model,
            "response_schema": response_schema,
            "thinking_budget": thinking_budget,
        })

        response = self._next(tier)
        if callable(response):
            response = response(prompt)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return {"text": json.dumps(response), "raw": {}}
        return {"text": response, "raw": {}}


@pytest.fixture
def council_config() -> CouncilConfig:
    """Council config without cooldown or backoff delays."""
    return CouncilConfig(page_cooldown_s=0, retry_base_delay_s=0)


@pytest.fixture
def vlm_config() -> VLMConfig:
    return VLMConfig(api_key="test_api_key", min_interval_s=0)


@pytest.fixture
def client_factory():
    """Build ScriptedVLMClient instances with custom scripts."""
    return ScriptedVLMClient


@pytest.fixture
def scripted_client() -> ScriptedVLMClient:
    return ScriptedVLMClient()


@pytest.fixture
def png_bytes() -> bytes:
    """Minimal PNG header bytes."""
    return b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR page"
