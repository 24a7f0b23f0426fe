"""Base operation class."""

from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

from ..core.retry import with_retry

T = TypeVar("T")


class BaseOperation(ABC):
    """Abstract base class for all document operations.

    Operations receive a DocumentProcessor instance during initialization
    and reach the provider through its shared client.
    """

    def __init__(self, processor: Any):
        """Initialize operation with a document processor.

        Args:
            processor: DocumentProcessor instance
        """
        self.processor = processor

    def _call_with_retry(self, operation: Callable[[], T], description: str) -> T:
        council_config = self.processor.council_config
        return with_retry(
            operation,
            retries=council_config.max_retries,
            base_delay_s=council_config.retry_base_delay_s,
            description=description,
        )

    @abstractmethod
    def execute(self, **kwargs) -> Any:
        """Execute the operation.

        Returns:
            Operation-specific result
        """
        pass
