from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError
from loguru import logger

from taskrecords.config import MongoSettings


class MongoManager:
    """Owns the async MongoDB client and database handle."""

    def __init__(self, settings: MongoSettings):
        self.settings = settings
        self.client: AsyncMongoClient = None
        self.db: AsyncDatabase = None

    @property
    def connection_url(self) -> str:
        return f"mongodb://{self.settings.host}:{self.settings.port}"

    def init(self):
        if self.client is not None:
            return
        try:
            self.client = AsyncMongoClient(self.connection_url)
            self.db = self.client[self.settings.database_name]
            logger.info(f"Connected to MongoDB (Async): {self.connection_url}/{self.settings.database_name}")
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    def get_collection(self, collection_name: str) -> AsyncCollection:
        if self.db is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.db[collection_name]

    async def close(self):
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB connection closed.")
        self.client = None
        self.db = None
