from abc import ABC, abstractmethod
import re
from typing import Any, Dict, Optional

Document = Dict[str, Any]

# Characters not allowed in keys of path-based stores
ILLEGAL_KEY_CHARACTERS = re.compile(r'[\\/:*?"<>|]')


class DocumentCollection(ABC):
    """
    A named set of JSON documents addressed by string key.

    Implementations guarantee that a single get/set/delete on one key is
    atomic; nothing is guaranteed across keys.
    """
    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def get(self, key: str) -> Optional[Document]:
        """Return the document stored under key, or None."""

    @abstractmethod
    async def get_all(self) -> Optional[Dict[str, Document]]:
        """Return all documents keyed by their key, or None if the collection does not exist."""

    @abstractmethod
    async def set(self, key: str, data: Document) -> None:
        """Create or fully overwrite the document stored under key."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete the document stored under key. No-op if missing."""

    @abstractmethod
    async def delete_all(self) -> None:
        """Delete the whole collection."""


class DocumentStore(ABC):
    """Backend that hands out collections."""

    @abstractmethod
    def collection(self, name: str) -> DocumentCollection:
        pass

    async def close(self) -> None:
        """Release backend resources. Default: nothing to release."""
        return
