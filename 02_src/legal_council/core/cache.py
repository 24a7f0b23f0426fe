"""Content-addressed verdict cache over a storage backend."""

import hashlib
import logging
from typing import Optional

from ..schemas.common import CouncilVerdict
from .state import StorageBackend

logger = logging.getLogger(__name__)


def compute_cache_key(image: bytes, target_language: str) -> str:
    """Build the cache identity of a page: SHA-256 of its bytes plus the target language.

    Page position never takes part in the key, so the same page content
    re-rendered at another index still hits the cache.

    Args:
        image: Page image bytes
        target_language: Translation target

    Returns:
        "<sha256 hex>_<target_language>"
    """
    digest = hashlib.sha256(image).hexdigest()
    return f"{digest}_{target_language}"


class VerdictCache:
    """Get/put gateway between the page orchestrator and a key/value store.

    Failures never reach the pipeline: a failed or undecodable read is a
    miss, a failed write is logged and reported as False. No TTL and no
    eviction; retention belongs to the store.
    """

    NAMESPACE = "verdicts"

    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage

    def _storage_key(self, key: str) -> str:
        return f"{self.NAMESPACE}/{key}"

    def get(self, key: str) -> Optional[CouncilVerdict]:
        """Return the cached verdict for key, or None on miss or read failure."""
        try:
            record = self.storage.load(self._storage_key(key), default=None)
        except Exception as e:
            logger.warning(f"Cache lookup failed for '{key}': {e}")
            return None

        if record is None:
            return None

        try:
            return CouncilVerdict.from_dict(record)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring undecodable cache record '{key}': {e}")
            return None

    def put(self, key: str, verdict: CouncilVerdict) -> bool:
        """Store verdict under key.

        Returns:
            True if stored, False if the store failed
        """
        try:
            self.storage.save(self._storage_key(key), verdict.to_dict())
        except Exception as e:
            logger.warning(f"Failed to save to cache '{key}': {e}")
            return False
        return True
