"""MongoDB-backed stores."""

from datetime import datetime, timezone
from typing import List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from taskvault.errors import ConflictError, NotFoundError
from taskvault.models.account_model import Account
from taskvault.models.task_model import NewTask, Task, TaskPatch, TaskStats
from taskvault.utils.db import to_object_id


def _now():
    return datetime.now(timezone.utc)


def _scope(owner_id, **extra):
    query = dict(extra)
    if owner_id is not None:
        query["owner_id"] = owner_id
    return query


class MongoAccountStore:
    def __init__(self, collection):
        self.collection = collection

    def ensure_indexes(self):
        self.collection.create_index([("email", ASCENDING)], unique=True)

    def get_by_email(self, email: str) -> Optional[Account]:
        doc = self.collection.find_one({"email": email})
        return Account.from_doc(doc) if doc else None

    def add(self, email: str, password_hash: str) -> Account:
        if self.collection.find_one({"email": email}, {"_id": 1}):
            raise ConflictError()
        try:
            res = self.collection.insert_one({"email": email, "password_hash": password_hash})
        except DuplicateKeyError as exc:
            raise ConflictError() from exc
        return Account(id=str(res.inserted_id), email=email, password_hash=password_hash)


class MongoTaskStore:
    def __init__(self, collection, track_timestamps=True):
        self.collection = collection
        self.track_timestamps = track_timestamps

    def ensure_indexes(self):
        self.collection.create_index([("owner_id", ASCENDING)])

    def list(self, owner_id: Optional[str] = None, completed: Optional[bool] = None) -> List[Task]:
        query = _scope(owner_id)
        if completed is not None:
            query["completed"] = completed
        return [Task.from_doc(d) for d in self.collection.find(query)]

    def stats(self, owner_id: Optional[str] = None) -> TaskStats:
        total = self.collection.count_documents(_scope(owner_id))
        done = self.collection.count_documents(_scope(owner_id, completed=True))
        return TaskStats(total=total, pending=total - done, completed=done)

    def create(self, fields: NewTask, owner_id: Optional[str] = None) -> Task:
        doc = {"completed": False}
        if fields.title is not None:
            doc["title"] = fields.title
        if fields.description is not None:
            doc["description"] = fields.description
        if owner_id is not None:
            doc["owner_id"] = owner_id
        if self.track_timestamps:
            doc["created_at"] = doc["updated_at"] = _now()
        res = self.collection.insert_one(doc)
        doc["_id"] = res.inserted_id
        return Task.from_doc(doc)

    def update(self, task_id: str, patch: TaskPatch, owner_id: Optional[str] = None) -> Task:
        oid = to_object_id(task_id)
        if oid is None:
            raise NotFoundError()
        query = _scope(owner_id, _id=oid)
        updates = patch.changes()
        if not updates:
            doc = self.collection.find_one(query)
        else:
            if self.track_timestamps:
                updates["updated_at"] = _now()
            doc = self.collection.find_one_and_update(
                query,
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        if not doc:
            raise NotFoundError()
        return Task.from_doc(doc)

    def delete(self, task_id: str, owner_id: Optional[str] = None) -> None:
        oid = to_object_id(task_id)
        if oid is None:
            raise NotFoundError()
        res = self.collection.delete_one(_scope(owner_id, _id=oid))
        if res.deleted_count == 0:
            raise NotFoundError()

    def backfill_timestamps(self) -> int:
        now = _now()
        res = self.collection.update_many(
            {"created_at": {"$exists": False}},
            {"$set": {"created_at": now, "updated_at": now}},
        )
        return res.modified_count
