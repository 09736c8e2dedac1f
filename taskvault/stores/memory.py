"""In-memory stores for tests and throwaway local runs.

The dev server handles requests on several threads, so every read and write
goes through the store's lock.
"""

import copy
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from bson import ObjectId

from taskvault.errors import ConflictError, NotFoundError
from taskvault.models.account_model import Account
from taskvault.models.task_model import NewTask, Task, TaskPatch, TaskStats
from taskvault.utils.db import to_object_id


class InMemoryAccountStore:
    def __init__(self) -> None:
        self._by_email: Dict[str, Account] = {}
        self._lock = threading.Lock()

    def get_by_email(self, email: str) -> Optional[Account]:
        with self._lock:
            account = self._by_email.get(email)
            return copy.copy(account) if account else None

    def add(self, email: str, password_hash: str) -> Account:
        with self._lock:
            if email in self._by_email:
                raise ConflictError()
            account = Account(id=str(ObjectId()), email=email, password_hash=password_hash)
            self._by_email[email] = account
            return copy.copy(account)


class InMemoryTaskStore:
    """Keeps task documents keyed by ObjectId, in insertion order."""

    def __init__(self, track_timestamps: bool = True) -> None:
        self.track_timestamps = track_timestamps
        self._docs: Dict[ObjectId, dict] = {}
        self._lock = threading.Lock()

    def _visible(self, owner_id):
        # Caller holds the lock.
        return [
            doc
            for doc in list(self._docs.values())
            if owner_id is None or doc.get("owner_id") == owner_id
        ]

    def _find(self, task_id, owner_id):
        oid = to_object_id(task_id)
        doc = self._docs.get(oid) if oid is not None else None
        if doc is None or (owner_id is not None and doc.get("owner_id") != owner_id):
            raise NotFoundError()
        return doc

    def list(self, owner_id: Optional[str] = None, completed: Optional[bool] = None) -> List[Task]:
        with self._lock:
            return [
                Task.from_doc(doc)
                for doc in self._visible(owner_id)
                if completed is None or doc["completed"] == completed
            ]

    def stats(self, owner_id: Optional[str] = None) -> TaskStats:
        with self._lock:
            docs = self._visible(owner_id)
            done = sum(1 for doc in docs if doc["completed"])
        return TaskStats(total=len(docs), pending=len(docs) - done, completed=done)

    def create(self, fields: NewTask, owner_id: Optional[str] = None) -> Task:
        doc = {"_id": ObjectId(), "completed": False}
        if fields.title is not None:
            doc["title"] = fields.title
        if fields.description is not None:
            doc["description"] = fields.description
        if owner_id is not None:
            doc["owner_id"] = owner_id
        if self.track_timestamps:
            doc["created_at"] = doc["updated_at"] = datetime.now(timezone.utc)
        with self._lock:
            self._docs[doc["_id"]] = doc
            return Task.from_doc(doc)

    def update(self, task_id: str, patch: TaskPatch, owner_id: Optional[str] = None) -> Task:
        updates = patch.changes()
        with self._lock:
            doc = self._find(task_id, owner_id)
            if updates:
                doc.update(updates)
                if self.track_timestamps:
                    doc["updated_at"] = datetime.now(timezone.utc)
            return Task.from_doc(doc)

    def delete(self, task_id: str, owner_id: Optional[str] = None) -> None:
        with self._lock:
            doc = self._find(task_id, owner_id)
            del self._docs[doc["_id"]]

    def backfill_timestamps(self) -> int:
        now = datetime.now(timezone.utc)
        count = 0
        with self._lock:
            for doc in list(self._docs.values()):
                if "created_at" not in doc:
                    doc["created_at"] = doc["updated_at"] = now
                    count += 1
        return count
