from dataclasses import dataclass
from typing import Any, Dict, Optional

from taskrecords.models.task import Task, TaskException, TaskStatus

# Keys TaskRecord writes over the task's own JSON map
RESERVED_KEYS = ("status", "progress", "exception")

DEFAULT_STATUS = TaskStatus(0)
DEFAULT_PROGRESS = 0.0


class RecordFormatError(ValueError):
    """A stored document could not be decoded into a TaskRecord."""


@dataclass(frozen=True)
class TaskRecord:
    """
    Task, status, progress and exception as recorded in persistent storage.

    The record serializes to a single flat map: the task's JSON map with the
    RESERVED_KEYS set over it.
    """
    task: Task
    status: TaskStatus
    progress: float
    exception: Optional[TaskException] = None

    @property
    def group(self) -> str:
        return self.task.group

    @property
    def task_id(self) -> str:
        return self.task.task_id

    def copy_with(self, task: Task = None, status: TaskStatus = None,
                  progress: float = None) -> 'TaskRecord':
        """Copy with optional replacements. The exception is always carried over."""
        return TaskRecord(
            task if task is not None else self.task,
            status if status is not None else self.status,
            progress if progress is not None else self.progress,
            self.exception,
        )

    def to_json_map(self) -> Dict[str, Any]:
        json_map = self.task.to_json_map()
        json_map["status"] = int(self.status)
        json_map["progress"] = float(self.progress)
        json_map["exception"] = self.exception.to_json_map() if self.exception is not None else None
        return json_map

    @classmethod
    def from_json_map(cls, json_map: Dict[str, Any]) -> 'TaskRecord':
        """
        Decode a stored map: first the task, then the tracking fields.

        Missing or null tracking fields fall back to their defaults; present
        but invalid values raise RecordFormatError.
        """
        if not isinstance(json_map, dict):
            raise RecordFormatError(f"Expected a JSON object, got {type(json_map).__name__}")
        try:
            task = Task.from_json_map(json_map)
        except ValueError as e:  # includes pydantic.ValidationError
            raise RecordFormatError(f"Invalid task data: {e}") from e

        return cls(
            task,
            _decode_status(json_map.get("status")),
            _decode_progress(json_map.get("progress")),
            _decode_exception(json_map.get("exception")),
        )


def _decode_status(raw: Any) -> TaskStatus:
    if raw is None:
        return DEFAULT_STATUS
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise RecordFormatError(f"Invalid status value: {raw!r}")
    try:
        return TaskStatus(raw)
    except ValueError as e:
        raise RecordFormatError(f"Status ordinal out of range: {raw}") from e


def _decode_progress(raw: Any) -> float:
    if raw is None:
        return DEFAULT_PROGRESS
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise RecordFormatError(f"Invalid progress value: {raw!r}")
    return float(raw)


def _decode_exception(raw: Any) -> Optional[TaskException]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise RecordFormatError(f"Invalid exception value: {raw!r}")
    try:
        return TaskException.from_json_map(raw)
    except ValueError as e:  # includes pydantic.ValidationError
        raise RecordFormatError(f"Invalid exception data: {e}") from e
