from __future__ import annotations

import os
import uuid

import pytest
from pymongo import MongoClient

from taskvault.errors import ConflictError, NotFoundError
from taskvault.models.task_model import NewTask, TaskPatch
from taskvault.stores.mongo import MongoAccountStore, MongoTaskStore

MONGO_URI = os.environ.get("TASKVAULT_TEST_MONGO_URI")

pytestmark = pytest.mark.skipif(not MONGO_URI, reason="TASKVAULT_TEST_MONGO_URI is not set")

OWNER_A = "65a000000000000000000001"
OWNER_B = "65a000000000000000000002"


@pytest.fixture
def db():
    client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=2000, tz_aware=True)
    name = f"taskvault_test_{uuid.uuid4().hex[:8]}"
    yield client[name]
    client.drop_database(name)
    client.close()


def test_unique_email(db) -> None:
    accounts = MongoAccountStore(db["users"])
    accounts.ensure_indexes()
    first = accounts.add("a@x.com", "hash-1")
    with pytest.raises(ConflictError):
        accounts.add("a@x.com", "hash-2")
    assert accounts.get_by_email("a@x.com").password_hash == "hash-1"
    assert accounts.get_by_email("a@x.com").id == first.id


def test_task_lifecycle_with_ownership(db) -> None:
    tasks = MongoTaskStore(db["tasks"])
    tasks.ensure_indexes()
    task = tasks.create(NewTask(title="Buy milk"), owner_id=OWNER_A)
    assert task.completed is False
    assert [t.id for t in tasks.list(owner_id=OWNER_A)] == [task.id]
    assert tasks.list(owner_id=OWNER_B) == []

    with pytest.raises(NotFoundError):
        tasks.update(task.id, TaskPatch(completed=True), owner_id=OWNER_B)

    updated = tasks.update(task.id, TaskPatch(completed=True), owner_id=OWNER_A)
    assert updated.completed is True
    assert updated.title == "Buy milk"
    assert updated.description is None
    assert tasks.stats(owner_id=OWNER_A).to_dict() == {"total": 1, "pending": 0, "completed": 1}

    tasks.delete(task.id, owner_id=OWNER_A)
    with pytest.raises(NotFoundError):
        tasks.delete(task.id, owner_id=OWNER_A)
    with pytest.raises(NotFoundError):
        tasks.delete("not-an-id")


def test_backfill(db) -> None:
    legacy = MongoTaskStore(db["tasks"], track_timestamps=False)
    legacy.create(NewTask(title="old"))
    assert legacy.backfill_timestamps() == 1
    assert legacy.list()[0].created_at is not None
    assert legacy.backfill_timestamps() == 0
