import atexit
from dataclasses import dataclass
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from taskvault.stores.base import AccountStore, TaskStore


@dataclass
class Stores:
    accounts: AccountStore
    tasks: TaskStore


def to_object_id(value) -> Optional[ObjectId]:
    """Parse a task id; ``None`` for anything that is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _mongo_stores(app) -> Stores:
    from taskvault.stores.mongo import MongoAccountStore, MongoTaskStore

    client = MongoClient(
        app.config["MONGO_URI"],
        serverSelectionTimeoutMS=app.config["MONGO_TIMEOUT_MS"],
        tz_aware=True,
    )
    # Closed at process exit rather than per request.
    atexit.register(client.close)
    db = client[app.config["MONGO_DB_NAME"]]
    accounts = MongoAccountStore(db["users"])
    tasks = MongoTaskStore(db["tasks"], track_timestamps=app.config["TRACK_TIMESTAMPS"])
    try:
        accounts.ensure_indexes()
        tasks.ensure_indexes()
    except PyMongoError as exc:
        app.logger.warning("Could not create MongoDB indexes at startup: %s", exc)
    return Stores(accounts=accounts, tasks=tasks)


def _memory_stores(app) -> Stores:
    from taskvault.stores.memory import InMemoryAccountStore, InMemoryTaskStore

    app.logger.warning("Using in-memory storage; data is lost when the process exits.")
    return Stores(
        accounts=InMemoryAccountStore(),
        tasks=InMemoryTaskStore(track_timestamps=app.config["TRACK_TIMESTAMPS"]),
    )


def init_app(app):
    backend = app.config["STORAGE_BACKEND"]
    if backend == "mongo":
        stores = _mongo_stores(app)
    elif backend == "memory":
        stores = _memory_stores(app)
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected 'mongo' or 'memory'")
    app.extensions["taskvault.stores"] = stores
    return stores


def get_stores() -> Stores:
    return current_app.extensions["taskvault.stores"]
