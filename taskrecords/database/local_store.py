import asyncio
import contextlib
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from loguru import logger

from .document_store import ILLEGAL_KEY_CHARACTERS, Document, DocumentCollection, DocumentStore

DOC_SUFFIX = ".json"


class LocalCollection(DocumentCollection):
    """
    Collection stored as a directory holding one JSON file per document.

    File I/O runs in worker threads. Writes go through a temporary file and
    os.replace, so readers never observe a half-written document.
    """
    def __init__(self, root: Path, name: str):
        super().__init__(name)
        if not name or ILLEGAL_KEY_CHARACTERS.search(name):
            raise ValueError(f"Invalid collection name: {name!r}")
        self.directory = root / name

    def _path(self, key: str) -> Path:
        if not key or ILLEGAL_KEY_CHARACTERS.search(key):
            raise ValueError(f"Invalid document key: {key!r}")
        return self.directory / f"{key}{DOC_SUFFIX}"

    # --- Sync helpers (run in threads) ---

    @staticmethod
    def _read(path: Path) -> Optional[Document]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None

    def _write(self, path: Path, data: Document):
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise

    def _read_all(self) -> Optional[Dict[str, Document]]:
        if not self.directory.is_dir():
            return None
        documents = {}
        for path in self.directory.glob(f"*{DOC_SUFFIX}"):
            data = self._read(path)
            # Deleted between listing and reading
            if data is None:
                continue
            documents[path.name[:-len(DOC_SUFFIX)]] = data
        return documents

    def _remove_dir(self):
        with contextlib.suppress(FileNotFoundError):
            shutil.rmtree(self.directory)

    # --- Async API ---

    async def get(self, key: str) -> Optional[Document]:
        return await asyncio.to_thread(self._read, self._path(key))

    async def get_all(self) -> Optional[Dict[str, Document]]:
        return await asyncio.to_thread(self._read_all)

    async def set(self, key: str, data: Document) -> None:
        await asyncio.to_thread(self._write, self._path(key), data)

    async def delete(self, key: str) -> None:
        path = self._path(key)
        await asyncio.to_thread(path.unlink, missing_ok=True)

    async def delete_all(self) -> None:
        await asyncio.to_thread(self._remove_dir)
        logger.debug(f"Removed local collection '{self.name}' at {self.directory}")


class LocalDocumentStore(DocumentStore):
    """
    Embedded store: a root directory with one subdirectory per collection.
    Keys must be non-empty and must not contain any of \\ / : * ? " < > |
    A key becomes a file name, so keys longer than the filesystem allows
    (usually 255 bytes including the ".json" suffix) fail with OSError.
    """
    def __init__(self, path: Union[str, Path]):
        self.root = Path(path)
        self._collections: Dict[str, LocalCollection] = {}
        logger.info(f"Local document store at {self.root.resolve()}")

    def collection(self, name: str) -> LocalCollection:
        if name not in self._collections:
            self._collections[name] = LocalCollection(self.root, name)
        return self._collections[name]
