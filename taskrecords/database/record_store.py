from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from loguru import logger

from taskrecords.config import DEFAULT_COLLECTION
from taskrecords.models.record import TaskRecord
from .document_store import ILLEGAL_KEY_CHARACTERS, DocumentCollection, DocumentStore


def safe_id(task_id: str) -> str:
    """
    Make a task id usable as a storage key by replacing each of
    \\ / : * ? " < > | with an underscore.

    The empty id maps to "_" so every id has a non-empty key.
    Not invertible: ids that differ only in those characters share a key.
    """
    return ILLEGAL_KEY_CHARACTERS.sub('_', task_id) or '_'


class RecordStore:
    """
    Persistent store of TaskRecord objects, one document per task id.

    Create one instance and share it with every caller; it holds no state
    besides the collection handle. No locking is done here: concurrent
    updates of the same id are last-writer-wins, and multi-id operations
    are not atomic (but are safe to re-run).
    """

    def __init__(self, store: DocumentStore, collection_name: str = DEFAULT_COLLECTION):
        self.store = store
        self.collection: DocumentCollection = store.collection(collection_name)

    async def all_records(self, group: Optional[str] = None) -> List[TaskRecord]:
        """
        Returns all records, optionally only those in `group`.

        Raises RecordFormatError if any stored document cannot be decoded.
        """
        documents = await self.collection.get_all()
        if not documents:
            return []
        records = [TaskRecord.from_json_map(doc) for doc in documents.values()]
        if group is None:
            return records
        return [record for record in records if record.group == group]

    async def all_records_older_than(self, age: timedelta, group: Optional[str] = None) -> List[TaskRecord]:
        """Returns all records whose task was created more than `age` ago."""
        records = await self.all_records(group)
        now = datetime.now(timezone.utc)
        return [record for record in records if now - record.task.creation_time > age]

    async def record_for_id(self, task_id: str) -> Optional[TaskRecord]:
        json_map = await self.collection.get(safe_id(task_id))
        return TaskRecord.from_json_map(json_map) if json_map is not None else None

    async def records_for_ids(self, task_ids: Iterable[str]) -> List[TaskRecord]:
        """
        Returns records for `task_ids` in input order.
        Ids without a stored record are skipped.
        """
        result = []
        for task_id in task_ids:
            record = await self.record_for_id(task_id)
            if record is not None:
                result.append(record)
        return result

    async def delete_all_records(self, group: Optional[str] = None) -> None:
        """
        Deletes all records, or only those in `group`.

        The group variant reads the group first and then deletes record by
        record, so records added meanwhile may survive.
        """
        if group is None:
            await self.collection.delete_all()
            logger.info(f"Deleted all task records in '{self.collection.name}'")
            return
        records = await self.all_records(group)
        await self.delete_records_with_ids(record.task_id for record in records)
        logger.info(f"Deleted {len(records)} task records in group '{group}'")

    async def delete_record_with_id(self, task_id: str) -> None:
        await self.delete_records_with_ids([task_id])

    async def delete_records_with_ids(self, task_ids: Iterable[str]) -> None:
        for task_id in task_ids:
            await self.collection.delete(safe_id(task_id))
            logger.debug(f"Deleted task record {task_id}")

    async def update_record(self, record: TaskRecord) -> None:
        """Insert or fully overwrite the stored record for `record.task_id`."""
        await self.collection.set(safe_id(record.task_id), record.to_json_map())
        logger.debug(f"Updated task record {record.task_id}: {record.status.name} {record.progress}")
