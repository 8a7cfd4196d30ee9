import pytest
from datetime import timedelta

from taskrecords.database.local_store import LocalDocumentStore
from taskrecords.database.record_store import RecordStore
from taskrecords.models.record import TaskRecord
from taskrecords.models.task import DownloadTask, TaskStatus, utc_now


@pytest.fixture
def local_store(tmp_path):
    return LocalDocumentStore(tmp_path / "localstore")


@pytest.fixture
def record_store(local_store):
    return RecordStore(local_store)


@pytest.fixture
def make_record():
    """Factory for records with a DownloadTask created `age` ago."""
    def _make(task_id, group="default", age=timedelta(0), status=TaskStatus.ENQUEUED,
              progress=0.0, exception=None):
        task = DownloadTask(
            task_id=task_id,
            url=f"https://example.com/{task_id}",
            filename=f"{task_id}.bin",
            group=group,
            creation_time=utc_now() - age,
        )
        return TaskRecord(task, status, progress, exception)
    return _make


@pytest.fixture
def log_messages():
    """Collect loguru output in a list."""
    from loguru import logger

    messages = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
