import uuid
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Registries for polymorphic decode, keyed by the class name stored in the map
_TASK_TYPES: Dict[str, Type['Task']] = {}
_EXCEPTION_TYPES: Dict[str, Type['TaskException']] = {}


def _truncate_to_millis(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    """Current UTC time at the millisecond precision used for storage."""
    return _truncate_to_millis(datetime.now(timezone.utc))


class TaskStatus(IntEnum):
    """
    Lifecycle state of a task.

    Records persist the integer value, so members may only be appended.
    """
    ENQUEUED = 0
    RUNNING = 1
    COMPLETE = 2
    NOT_FOUND = 3
    FAILED = 4
    CANCELED = 5
    WAITING_TO_RETRY = 6
    PAUSED = 7

    @property
    def is_final(self) -> bool:
        return self in _FINAL_STATES

    @property
    def is_not_final(self) -> bool:
        return not self.is_final


_FINAL_STATES = frozenset({
    TaskStatus.COMPLETE,
    TaskStatus.NOT_FOUND,
    TaskStatus.FAILED,
    TaskStatus.CANCELED,
})


class TaskException(BaseModel):
    """
    Terminal failure attached to a task.
    Serialized with a 'type' key naming the concrete class.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    description: str = ""

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        _EXCEPTION_TYPES[cls.__name__] = cls

    @property
    def exception_type(self) -> str:
        return type(self).__name__

    def to_json_map(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json")
        data["type"] = self.exception_type
        return data

    @classmethod
    def from_json_map(cls, json_map: Dict[str, Any]) -> 'TaskException':
        type_name = json_map.get("type") or "TaskException"
        exc_cls = _EXCEPTION_TYPES.get(type_name)
        if exc_cls is None:
            raise ValueError(f"Unknown task exception type: {type_name}")
        return exc_cls.model_validate(json_map)


_EXCEPTION_TYPES["TaskException"] = TaskException


class TaskFileSystemException(TaskException):
    pass


class TaskUrlException(TaskException):
    pass


class TaskConnectionException(TaskException):
    pass


class TaskResumeException(TaskException):
    pass


class TaskHttpException(TaskException):
    http_response_code: int = -1


class Task(BaseModel):
    """
    Definition of a background task, owned by the task engine.

    Only `task_id`, `group` and `creation_time` matter to the record store;
    the rest is carried through serialization untouched. The JSON map uses
    camelCase keys and a 'taskType' key naming the concrete subclass.
    Subclass fields must not be named status, progress or exception.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    task_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    url: str = ""
    filename: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    directory: str = ""
    group: str = "default"
    retries: int = Field(default=0, ge=0, le=10)
    retries_remaining: int = Field(default=0, ge=0, le=10)
    allow_pause: bool = False
    meta_data: str = ""
    creation_time: datetime = Field(default_factory=utc_now)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        _TASK_TYPES[cls.__name__] = cls

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.task_id))

    @field_validator("creation_time", mode="before")
    @classmethod
    def parse_creation_time(cls, value: Any) -> Any:
        # Stored as integer milliseconds since the epoch
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return EPOCH + timedelta(milliseconds=value)
        return value

    @field_validator("creation_time")
    @classmethod
    def normalize_creation_time(cls, value: datetime) -> datetime:
        return _truncate_to_millis(value)

    @field_serializer("creation_time")
    def serialize_creation_time(self, value: datetime) -> int:
        return (value - EPOCH) // timedelta(milliseconds=1)

    @property
    def task_type(self) -> str:
        return type(self).__name__

    def to_json_map(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json")
        data["taskType"] = self.task_type
        return data

    @classmethod
    def from_json_map(cls, json_map: Dict[str, Any]) -> 'Task':
        """
        Create the concrete task named by 'taskType' (DownloadTask if absent).

        Raises:
            ValueError: unknown task type
            pydantic.ValidationError: invalid field values
        """
        type_name = json_map.get("taskType") or "DownloadTask"
        task_cls = _TASK_TYPES.get(type_name)
        if task_cls is None:
            raise ValueError(f"Unknown task type: {type_name}")
        return task_cls.model_validate(json_map)


_TASK_TYPES["Task"] = Task


class DownloadTask(Task):
    http_request_method: str = "GET"
    post: Optional[str] = None


class UploadTask(Task):
    http_request_method: str = "POST"
    file_field: str = "file"
    mime_type: str = "application/octet-stream"
    form_fields: Dict[str, str] = Field(default_factory=dict)
