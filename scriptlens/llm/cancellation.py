import asyncio
import threading
import uuid
from dataclasses import dataclass

from scriptlens.logging.logger import Log


def new_operation_id() -> str:
    return f"op_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class _Operation:
    task: asyncio.Task
    loop: asyncio.AbstractEventLoop


class OperationRegistry:
    """In-flight operations keyed by operation id.

    Safe to use from any thread: cancel() schedules the task cancellation on
    the task's own event loop.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._operations: dict[str, _Operation] = {}

    def register(
        self,
        operation_id: str,
        task: asyncio.Task,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        with self._lock:
            if operation_id in self._operations:
                raise ValueError(f"Operation {operation_id} is already registered")
            self._operations[operation_id] = _Operation(task, loop or task.get_loop())

    def cancel(self, operation_id: str) -> bool:
        """Request cancellation; returns False for unknown or finished operations."""
        with self._lock:
            operation = self._operations.pop(operation_id, None)
        if operation is None or operation.task.done():
            return False
        operation.loop.call_soon_threadsafe(operation.task.cancel)
        Log.info(f"Cancellation requested for operation {operation_id}")
        return True

    def remove(self, operation_id: str) -> None:
        with self._lock:
            self._operations.pop(operation_id, None)

    def active_operations(self) -> list[str]:
        with self._lock:
            return list(self._operations)
