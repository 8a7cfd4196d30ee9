"""
Data model for tracked tasks.
"""
from taskrecords.models.task import (
    Task,
    DownloadTask,
    UploadTask,
    TaskStatus,
    TaskException,
    TaskFileSystemException,
    TaskUrlException,
    TaskConnectionException,
    TaskResumeException,
    TaskHttpException,
)
from taskrecords.models.record import TaskRecord, RecordFormatError, RESERVED_KEYS

__all__ = [
    "Task",
    "DownloadTask",
    "UploadTask",
    "TaskStatus",
    "TaskException",
    "TaskFileSystemException",
    "TaskUrlException",
    "TaskConnectionException",
    "TaskResumeException",
    "TaskHttpException",
    "TaskRecord",
    "RecordFormatError",
    "RESERVED_KEYS",
]
