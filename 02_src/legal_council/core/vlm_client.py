"""VLM Client - Technical wrapper over Gemini REST API with throttling and failure classification."""

import base64
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from ..schemas.config import VLMConfig

logger = logging.getLogger(__name__)

GEMINI_API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"


class InferenceError(RuntimeError):
    """Base class for inference provider failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RetryableInferenceError(InferenceError):
    """Transient failure that may succeed on a later attempt."""


class RateLimitedError(RetryableInferenceError):
    """Provider answered 429."""


class ServiceUnavailableError(RetryableInferenceError):
    """Provider answered with a 5xx status."""


class TransportError(RetryableInferenceError):
    """Connection could not be established or timed out."""


class FatalInferenceError(InferenceError):
    """Non-retryable provider failure (bad request, authentication, ...)."""


class MalformedResponseError(InferenceError):
    """Provider answered successfully but without a usable payload."""


def classify_status(status: int, body: str) -> Optional[InferenceError]:
    """Map an HTTP status to the matching error, or None for success.

    Args:
        status: HTTP status code
        body: Response body (truncated into the message)

    Returns:
        Error instance to raise, None if status is a success
    """
    if status < 400:
        return None

    message = f"Gemini API status={status}, body={body[:400]}"
    if status == 429:
        return RateLimitedError(message, status)
    if 500 <= status < 600:
        return ServiceUnavailableError(message, status)
    return FatalInferenceError(message, status)


def guess_mime_type(image: bytes) -> str:
    """Detect image MIME type from magic bytes (JPEG or PNG)."""
    if image[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    return "image/png"


class BaseVLMClient:
    """Base interface for VLM clients.

    One instance is built at startup and shared by every tier; the model is
    chosen per call.
    """

    def invoke(
        self,
        prompt: str,
        images: List[bytes],
        model: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        thinking_budget: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Invoke VLM with prompt and images.

        Args:
            prompt: Text prompt
            images: List of images (PNG or JPEG bytes)
            model: Model identifier (client default if None)
            response_schema: Declared output shape for JSON mode
            thinking_budget: Optional thinking token budget

        Returns:
            {"text": str, "raw": {...}}

        Raises:
            InferenceError: Classified provider failure
        """
        raise NotImplementedError


class GeminiVLMClient(BaseVLMClient):
    """Gemini REST API client.

    Features:
    - Failure classification (429, 5xx, transport, fatal, malformed)
    - Throttling with minimum interval between requests
    - JSON mode with response schema
    - Per-call model selection

    A single HTTP request is made per invoke(); retries are the caller's job
    (see core.retry.with_retry).
    """

    def __init__(self, config: VLMConfig):
        """Initialize Gemini VLM client.

        Args:
            config: VLM configuration
        """
        self.config = config
        self._last_call_ts: Optional[float] = None
        self._calls_made = 0

        if not self.config.api_key:
            logger.warning("Gemini API Key is not set!")

    @property
    def calls_made(self) -> int:
        return self._calls_made

    def _build_url(self, model: str) -> str:
        return f"{GEMINI_API_ROOT}/{model}:generateContent?key={self.config.api_key}"

    def _throttle(self) -> None:
        """Guarantee min_interval_s between calls.

        Uses time.monotonic() for correct timing even if system time changes.
        """
        if self._last_call_ts is None:
            return

        elapsed = time.monotonic() - self._last_call_ts
        if elapsed < self.config.min_interval_s:
            sleep_time = self.config.min_interval_s - elapsed
            logger.debug(f"Throttling: sleeping {sleep_time:.3f}s")
            time.sleep(sleep_time)

    def _build_payload(
        self,
        prompt: str,
        images: List[bytes],
        response_schema: Optional[Dict[str, Any]],
        thinking_budget: Optional[int],
    ) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = []

        for img_bytes in images:
            parts.append({
                "inline_data": {
                    "mime_type": guess_mime_type(img_bytes),
                    "data": base64.b64encode(img_bytes).decode("utf-8"),
                }
            })

        parts.append({"text": prompt})

        payload: Dict[str, Any] = {"contents": [{"parts": parts}]}

        generation_config: Dict[str, Any] = {}
        if response_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = response_schema
        if thinking_budget is not None:
            generation_config["thinkingConfig"] = {"thinkingBudget": thinking_budget}
        if generation_config:
            payload["generationConfig"] = generation_config

        return payload

    def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Make one POST request and classify the outcome.

        Raises:
            TransportError: Connection failure or timeout
            RateLimitedError, ServiceUnavailableError, FatalInferenceError: HTTP errors
            MalformedResponseError: Body is not JSON
        """
        headers = {"Content-Type": "application/json"}

        try:
            response = requests.post(
                url,
                headers=headers,
                json=payload,
                timeout=self.config.timeout_sec,
            )
        except (
            requests.ConnectionError,
            requests.Timeout,
            requests.exceptions.ChunkedEncodingError,
        ) as e:
            raise TransportError(f"Gemini API transport failure: {e}") from e
        except requests.RequestException as e:
            raise FatalInferenceError(f"Gemini API request failed: {e}") from e

        error = classify_status(response.status_code, response.text or "")
        if error is not None:
            logger.info(f"Request failed with status={response.status_code}")
            raise error

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Gemini API returned non-JSON body: {e}", response.status_code
            ) from e

    def invoke(
        self,
        prompt: str,
        images: List[bytes],
        model: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        thinking_budget: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Invoke VLM with prompt and images.

        Args:
            prompt: Text prompt
            images: List of images (PNG or JPEG bytes)
            model: Model identifier (flash_model if None)
            response_schema: Declared output shape for JSON mode
            thinking_budget: Optional thinking token budget

        Returns:
            {"text": str, "raw": {...}}
        """
        model = model or self.config.flash_model

        self._throttle()

        payload = self._build_payload(prompt, images, response_schema, thinking_budget)

        logger.info(
            f"Sending request to Gemini {model} "
            f"with {len(images)} images, schema={'yes' if response_schema else 'no'}"
        )

        start_ts = time.monotonic()
        try:
            result = self._post(self._build_url(model), payload)
        finally:
            self._last_call_ts = time.monotonic()
            self._calls_made += 1

        logger.info(f"Request completed in {self._last_call_ts - start_ts:.3f}s")

        return self._parse_response(result)

    def _parse_response(self, result: Dict[str, Any]) -> Dict[str, Any]:
        """Parse Gemini API response.

        Args:
            result: Raw API response

        Returns:
            {"text": str, "raw": result}

        Raises:
            MalformedResponseError: If response has no candidate content
        """
        try:
            candidate = result.get("candidates", [])[0]
            parts_resp = candidate.get("content", {}).get("parts", [])
        except (AttributeError, IndexError, TypeError) as e:
            logger.error(f"Failed to parse Gemini response: {e}. Raw response: {result}")
            raise MalformedResponseError(f"Failed to parse Gemini response: {e}") from e

        # Thinking models may emit thought parts before the answer
        text_parts = [
            part.get("text", "")
            for part in parts_resp
            if isinstance(part, dict) and "text" in part and not part.get("thought")
        ]
        text_content = "".join(text_parts)
        logger.debug(f"Response text length: {len(text_content)}")

        return {
            "text": text_content,
            "raw": result,
        }
