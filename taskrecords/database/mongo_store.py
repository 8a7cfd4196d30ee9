from typing import Dict, Optional

from loguru import logger

from .document_store import Document, DocumentCollection, DocumentStore
from .manager import MongoManager


class MongoCollection(DocumentCollection):
    """
    Collection backed by a MongoDB collection.
    The document key is stored as `_id` and stripped again on read.
    """
    def __init__(self, manager: MongoManager, name: str):
        super().__init__(name)
        self.manager = manager

    def _coll(self):
        return self.manager.get_collection(self.name)

    async def get(self, key: str) -> Optional[Document]:
        data = await self._coll().find_one({"_id": key})
        if data is None:
            return None
        data.pop("_id", None)
        return data

    async def get_all(self) -> Optional[Dict[str, Document]]:
        documents = {}
        async for doc in self._coll().find({}):
            key = doc.pop("_id")
            documents[str(key)] = doc
        return documents

    async def set(self, key: str, data: Document) -> None:
        doc = dict(data)
        doc["_id"] = key
        await self._coll().replace_one({"_id": key}, doc, upsert=True)

    async def delete(self, key: str) -> None:
        await self._coll().delete_one({"_id": key})

    async def delete_all(self) -> None:
        await self._coll().drop()
        logger.debug(f"Dropped Mongo collection '{self.name}'")


class MongoDocumentStore(DocumentStore):
    def __init__(self, manager: MongoManager):
        self.manager = manager

    def collection(self, name: str) -> MongoCollection:
        return MongoCollection(self.manager, name)

    async def close(self) -> None:
        await self.manager.close()
