"""
Construction helpers.

The record store is built explicitly from configuration and passed to
whoever needs it; there is no module-level instance.

Example:
    config = ConfigManager("config.json")
    records = create_record_store(config.data)
    await records.update_record(record)
    ...
    await records.store.close()
"""
from loguru import logger

from .config import AppConfig
from .database.document_store import DocumentStore
from .database.local_store import LocalDocumentStore
from .database.manager import MongoManager
from .database.mongo_store import MongoDocumentStore
from .database.record_store import RecordStore


def create_document_store(config: AppConfig) -> DocumentStore:
    """
    Create the document store backend selected by `config.storage.backend`.

    Args:
        config: Application configuration

    Returns:
        Ready-to-use DocumentStore
    """
    backend = config.storage.backend
    if backend == "mongo":
        manager = MongoManager(config.mongo)
        manager.init()
        return MongoDocumentStore(manager)
    if backend == "local":
        return LocalDocumentStore(config.local.path)
    raise ValueError(f"Unknown storage backend: {backend}")


def create_record_store(config: AppConfig, store: DocumentStore = None) -> RecordStore:
    """
    Create the RecordStore for the configured collection.

    Args:
        config: Application configuration
        store: Existing backend to reuse; created from config if omitted

    Returns:
        RecordStore to share between all callers
    """
    if store is None:
        store = create_document_store(config)
    logger.info(f"Record store using {config.storage.backend} backend, collection '{config.storage.collection_name}'")
    return RecordStore(store, config.storage.collection_name)
