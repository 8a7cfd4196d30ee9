"""
Storage layer: document store backends and the task record repository.
"""
from taskrecords.database.document_store import DocumentStore, DocumentCollection
from taskrecords.database.local_store import LocalDocumentStore
from taskrecords.database.manager import MongoManager
from taskrecords.database.mongo_store import MongoDocumentStore
from taskrecords.database.record_store import RecordStore, safe_id

__all__ = [
    "DocumentStore",
    "DocumentCollection",
    "LocalDocumentStore",
    "MongoManager",
    "MongoDocumentStore",
    "RecordStore",
    "safe_id",
]
