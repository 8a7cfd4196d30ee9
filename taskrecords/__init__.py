"""
taskrecords - persistent tracking of background task state.

Stores the status, progress and terminal exception of background tasks
in a document store, keyed by task id and queryable by group.
"""

from taskrecords.config import (
    ConfigManager,
    AppConfig,
    GeneralSettings,
    StorageSettings,
    MongoSettings,
    LocalStoreSettings,
)
from taskrecords.logging import setup_logging
from taskrecords.models import (
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
    TaskRecord,
    RecordFormatError,
    RESERVED_KEYS,
)
from taskrecords.database import (
    DocumentStore,
    DocumentCollection,
    LocalDocumentStore,
    MongoDocumentStore,
    MongoManager,
    RecordStore,
    safe_id,
)
from taskrecords.bootstrap import create_document_store, create_record_store

__version__ = "0.1.0"

__all__ = [
    # Config & logging
    "ConfigManager",
    "AppConfig",
    "GeneralSettings",
    "StorageSettings",
    "MongoSettings",
    "LocalStoreSettings",
    "setup_logging",

    # Models
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

    # Database
    "DocumentStore",
    "DocumentCollection",
    "LocalDocumentStore",
    "MongoDocumentStore",
    "MongoManager",
    "RecordStore",
    "safe_id",

    # Bootstrap
    "create_document_store",
    "create_record_store",
]
