"""State storage for document runs with memory and disk backends."""

import hashlib
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple

import yaml

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^\w.-]", re.UNICODE)


def safe_file_name(name: str) -> str:
    """Map a storage name to a file name, keeping distinct names distinct.

    Safe names are used as is. Otherwise unsafe characters become "_" and a
    short hash of the raw name is appended, so "Hindi/Urdu" and "Hindi Urdu"
    never share a file.
    """
    sanitized = _UNSAFE_NAME_CHARS.sub("_", name)
    if sanitized == name:
        return name
    suffix = hashlib.sha256(name.encode("utf-8")).hexdigest()[:8]
    return f"{sanitized}_{suffix}"


class StorageBackend(Protocol):
    """Protocol for state storage backends."""

    def save(self, key: str, value: Any) -> None:
        """Save value by key.

        Args:
            key: Storage key (e.g., "pages/001", "verdicts/<hash>_Hindi")
            value: Value to save (bytes, dict, str, etc.)
        """
        ...

    def load(self, key: str, default: Any = None) -> Any:
        """Load value by key.

        Args:
            key: Storage key
            default: Default value if key doesn't exist

        Returns:
            Stored value or default
        """
        ...

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        ...


class MemoryStorage:
    """In-memory storage backend for experiments and testing."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        logger.info("Initialized MemoryStorage backend")

    def save(self, key: str, value: Any) -> None:
        self._data[key] = value
        logger.debug(f"MemoryStorage: saved key '{key}'")

    def load(self, key: str, default: Any = None) -> Any:
        value = self._data.get(key, default)
        logger.debug(f"MemoryStorage: loaded key '{key}' (found: {key in self._data})")
        return value

    def exists(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class DiskStorage:
    """File-based storage backend.

    Layout under root_dir:
        pages/page_<name>.png     binary page images
        verdicts/<name>.json      cached council verdicts
        results/<name>.yaml       operation results (human-readable)

    Directories are created on first write.
    """

    def __init__(self, root_dir: Path) -> None:
        """Initialize disk storage.

        Args:
            root_dir: Root directory for storage
        """
        self.root_dir = Path(root_dir)
        self.pages_dir = self.root_dir / "pages"
        self.verdicts_dir = self.root_dir / "verdicts"
        self.results_dir = self.root_dir / "results"
        logger.info(f"Initialized DiskStorage backend at {self.root_dir}")

    def _get_file_path(self, key: str) -> Tuple[Path, str]:
        """Parse key and determine file path and format.

        Args:
            key: Storage key (e.g., "pages/001", "verdicts/ab12_Hindi",
                 "results/council_translation")

        Returns:
            Tuple of (file_path, format) where format is "binary", "json", or "yaml"

        Raises:
            ValueError: If key is malformed or its type is unknown
        """
        parts = key.split("/", 1)

        if len(parts) != 2 or not parts[1]:
            raise ValueError(f"Invalid key format: '{key}'. Expected 'type/name'")

        key_type, name = parts
        name = safe_file_name(name)

        if key_type == "pages":
            return self.pages_dir / f"page_{name}.png", "binary"
        elif key_type == "verdicts":
            return self.verdicts_dir / f"{name}.json", "json"
        elif key_type == "results":
            return self.results_dir / f"{name}.yaml", "yaml"
        else:
            raise ValueError(f"Unknown key type: '{key_type}'")

    def save(self, key: str, value: Any) -> None:
        """Save value to file based on key type.

        Args:
            key: Storage key
            value: Value to save (bytes for binary, dict for json/yaml)
        """
        file_path, format_type = self._get_file_path(key)

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)

            if format_type == "binary":
                if not isinstance(value, bytes):
                    raise TypeError(f"Binary save requires bytes, got {type(value)}")
                file_path.write_bytes(value)

            elif format_type == "json":
                with file_path.open("w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False, indent=2)

            elif format_type == "yaml":
                with file_path.open("w", encoding="utf-8") as f:
                    yaml.dump(value, f, allow_unicode=True, default_flow_style=False)

            logger.info(f"DiskStorage: saved key '{key}' to {file_path}")

        except Exception as e:
            logger.error(f"DiskStorage: failed to save key '{key}': {e}")
            raise

    def load(self, key: str, default: Any = None) -> Any:
        """Load value from file based on key type.

        Args:
            key: Storage key
            default: Default value if file doesn't exist

        Returns:
            Loaded value or default
        """
        file_path, format_type = self._get_file_path(key)

        if not file_path.exists():
            logger.debug(f"DiskStorage: key '{key}' not found, returning default")
            return default

        if format_type == "binary":
            return file_path.read_bytes()

        with file_path.open("r", encoding="utf-8") as f:
            if format_type == "json":
                return json.load(f)
            return yaml.safe_load(f)

    def exists(self, key: str) -> bool:
        file_path, _ = self._get_file_path(key)
        return file_path.exists()


class StateManager:
    """Run state (rendered pages, operation results) over a storage backend."""

    def __init__(self, storage: StorageBackend) -> None:
        """Initialize state manager with storage backend.

        Args:
            storage: Storage backend (MemoryStorage or DiskStorage)
        """
        self.storage = storage
        self.operation_results: Dict[str, Any] = {}
        logger.info(f"Initialized StateManager with {type(storage).__name__}")

    def save_page(self, page_num: int, image: bytes) -> None:
        """Save rendered page.

        Args:
            page_num: 1-based page number
            image: Page image bytes
        """
        self.storage.save(f"pages/{page_num:03d}", image)
        logger.debug(f"Saved page {page_num} ({len(image)} bytes)")

    def load_page(self, page_num: int) -> Optional[bytes]:
        return self.storage.load(f"pages/{page_num:03d}", default=None)

    def save_operation_result(self, operation: str, result: Any) -> None:
        """Save operation result (YAML on disk).

        Args:
            operation: Operation name (e.g., "council_translation")
            result: JSON/YAML-serializable result data
        """
        self.storage.save(f"results/{operation}", result)
        self.operation_results[operation] = result
        logger.info(f"Saved operation result for '{operation}'")
