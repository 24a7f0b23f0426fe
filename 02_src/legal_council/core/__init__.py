"""Core components: provider client, retry, cache, agents, orchestration."""

from .vlm_client import (
    BaseVLMClient,
    FatalInferenceError,
    GeminiVLMClient,
    InferenceError,
    MalformedResponseError,
    RateLimitedError,
    RetryableInferenceError,
    ServiceUnavailableError,
    TransportError,
)
from .retry import with_retry
from .state import StorageBackend, MemoryStorage, DiskStorage, StateManager
from .cache import VerdictCache, compute_cache_key
from .status import StatusReporter
from .agents import AgentFlash, AgentPro, Judge
from .orchestrator import PageOrchestrator, PageState
from .council import ModelCouncil, aggregate_verdicts, run_council
from .processor import DocumentProcessor

__all__ = [
    # Provider
    "BaseVLMClient",
    "GeminiVLMClient",
    "InferenceError",
    "RetryableInferenceError",
    "RateLimitedError",
    "ServiceUnavailableError",
    "TransportError",
    "FatalInferenceError",
    "MalformedResponseError",
    "with_retry",
    # Storage
    "StorageBackend",
    "MemoryStorage",
    "DiskStorage",
    "StateManager",
    "VerdictCache",
    "compute_cache_key",
    # Council
    "StatusReporter",
    "AgentFlash",
    "AgentPro",
    "Judge",
    "PageOrchestrator",
    "PageState",
    "ModelCouncil",
    "aggregate_verdicts",
    "run_council",
    "DocumentProcessor",
]
