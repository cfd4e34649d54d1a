"""
Progress reporting to the host automation engine.
"""
import logging
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)

# Sequence number carried by the last record of an invocation
FINAL_SEQUENCE = sys.maxsize

DEFAULT_CONTEXT = "Execute"


class StatusType(str, Enum):
    """Execution status reported to the host."""
    NONE = "None"
    INITIALIZING = "Initializing"
    RUNNING = "Running"
    COMPLETE = "Complete"
    FAILED = "Failed"


@dataclass(frozen=True)
class ProgressRecord:
    """A single progress update."""
    context: str
    message: str
    status: StatusType
    sequence: int


ProgressCallback = Callable[[str, str, StatusType, int], None]


class ProgressReporter:
    """Append-only progress log with a monotonic sequence counter.

    Every update is recorded and forwarded to the optional host callback
    as ``on_progress(context, message, status, sequence)``.
    """

    def __init__(self, on_progress: Optional[ProgressCallback] = None, context: str = DEFAULT_CONTEXT):
        self.on_progress = on_progress
        self.context = context
        self.status = StatusType.NONE
        self._sequence = 0
        self._records: List[ProgressRecord] = []
        self._lock = threading.RLock()

    @property
    def records(self) -> List[ProgressRecord]:
        with self._lock:
            return list(self._records)

    def update(
        self,
        message: str,
        status: Optional[StatusType] = None,
        context: Optional[str] = None,
        final: bool = False,
    ) -> ProgressRecord:
        """Emit a progress update.

        Args:
            message: Human readable progress message
            status: New overall status; keeps the current status when None
            context: Context label; defaults to the reporter's context
            final: Marks the last update of the invocation

        Returns:
            The emitted record
        """
        with self._lock:
            if status is not None:
                self.status = status
            if final:
                self._sequence = FINAL_SEQUENCE
            else:
                self._sequence += 1

            record = ProgressRecord(
                context=context or self.context,
                message=message,
                status=self.status,
                sequence=self._sequence,
            )
            self._records.append(record)

            logger.info(f"[{record.context}] {message}")
            if self.on_progress is not None:
                self.on_progress(record.context, record.message, record.status, record.sequence)
        return record

    def scoped(self, context: str) -> "ScopedReporter":
        """Get a reporter that tags every update with ``context``."""
        return ScopedReporter(self, context)


class ScopedReporter:
    """Reporter view bound to one context label, used per instance."""

    def __init__(self, parent: ProgressReporter, context: str):
        self.parent = parent
        self.context = context

    def update(self, message: str, status: Optional[StatusType] = None) -> ProgressRecord:
        return self.parent.update(message, status=status, context=self.context)
