"""
Tests for the taskrecords console tool.
"""
import asyncio
import json
from datetime import timedelta

import pytest

from taskrecords.cli import main
from taskrecords.database.local_store import LocalDocumentStore
from taskrecords.database.record_store import RecordStore


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI installs its own loguru handlers; drop them after each test."""
    from loguru import logger

    yield
    logger.remove()


@pytest.fixture
def cli_env(tmp_path, make_record):
    """Config file pointing at a local store seeded with three records."""
    store_path = tmp_path / "store"
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "general": {"log_dir": ""},
        "local": {"path": str(store_path)},
    }), encoding="utf-8")

    records = RecordStore(LocalDocumentStore(store_path))
    seed = [
        make_record("a-old", group="A", age=timedelta(hours=3)),
        make_record("a-new", group="A"),
        make_record("b-old", group="B", age=timedelta(hours=3)),
    ]

    async def _seed():
        for record in seed:
            await records.update_record(record)

    asyncio.run(_seed())
    return str(config_path), records


def remaining_ids(records):
    return sorted(r.task_id for r in asyncio.run(records.all_records()))


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_list_all(cli_env, capsys):
    config_path, _ = cli_env
    assert main(["--config", config_path, "list"]) == 0

    out = capsys.readouterr().out
    assert "a-old" in out and "a-new" in out and "b-old" in out
    assert "3 record(s)" in out


def test_list_filtered(cli_env, capsys):
    config_path, _ = cli_env
    assert main(["--config", config_path, "list", "--group", "A", "--older-than-hours", "1"]) == 0

    out = capsys.readouterr().out
    assert "a-old" in out
    assert "a-new" not in out and "b-old" not in out
    assert "1 record(s)" in out


def test_show(cli_env, capsys):
    config_path, _ = cli_env
    assert main(["--config", config_path, "show", "a-new"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["taskId"] == "a-new"
    assert data["status"] == 0


def test_show_missing(cli_env, capsys):
    config_path, _ = cli_env
    assert main(["--config", config_path, "show", "nope"]) == 1
    assert "No record for task nope" in capsys.readouterr().out


def test_purge_older_than(cli_env):
    config_path, records = cli_env
    assert main(["--config", config_path, "purge", "--older-than-hours", "1"]) == 0
    assert remaining_ids(records) == ["a-new"]


def test_purge_group(cli_env):
    config_path, records = cli_env
    assert main(["--config", config_path, "purge", "--group", "A"]) == 0
    assert remaining_ids(records) == ["b-old"]


def test_purge_ids(cli_env):
    config_path, records = cli_env
    assert main(["--config", config_path, "purge", "--ids", "a-old", "missing"]) == 0
    assert remaining_ids(records) == ["a-new", "b-old"]


def test_purge_everything(cli_env):
    config_path, records = cli_env
    assert main(["--config", config_path, "purge"]) == 0
    assert remaining_ids(records) == []


def test_corrupt_store_reports_failure(cli_env, capsys):
    config_path, records = cli_env
    asyncio.run(records.collection.set("broken", {"taskId": "broken", "status": "bad"}))

    assert main(["--config", config_path, "list"]) == 1
    assert "Error" in capsys.readouterr().out


@pytest.mark.parametrize("extra", [["--group", "A"], ["--older-than-hours", "1"]])
def test_purge_ids_rejects_filters(cli_env, capsys, extra):
    config_path, records = cli_env
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", config_path, "purge", "--ids", "a-old", *extra])

    assert exc_info.value.code == 2
    assert "--ids cannot be combined" in capsys.readouterr().err
    assert remaining_ids(records) == ["a-new", "a-old", "b-old"]
