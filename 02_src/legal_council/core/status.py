"""Progress notifications from the pipeline to an optional caller sink."""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

StatusSink = Callable[[str], None]


class StatusReporter:
    """Forwards human-readable progress messages to a status sink.

    The sink is called synchronously; its return value is ignored and any
    exception it raises is logged and suppressed.
    """

    def __init__(self, sink: Optional[StatusSink] = None) -> None:
        self.sink = sink
        self.history: List[str] = []

    def emit(self, message: str) -> None:
        self.history.append(message)
        logger.info(message)

        if self.sink is None:
            return

        try:
            self.sink(message)
        except Exception as e:
            logger.warning(f"Status sink failed on '{message}': {e}")
