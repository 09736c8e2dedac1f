from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from taskvault.errors import ValidationError


@dataclass
class Task:
    title: Optional[str] = None
    description: Optional[str] = None
    completed: bool = False
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Mapping[str, Any]) -> "Task":
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title"),
            description=doc.get("description"),
            completed=bool(doc.get("completed", False)),
            owner_id=doc.get("owner_id"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON view of the task; attributes that were never set are omitted."""
        out: Dict[str, Any] = {"id": self.id}
        if self.title is not None:
            out["title"] = self.title
        if self.description is not None:
            out["description"] = self.description
        out["completed"] = self.completed
        if self.owner_id is not None:
            out["owner"] = self.owner_id
        if self.created_at is not None:
            out["createdAt"] = self.created_at.isoformat()
        if self.updated_at is not None:
            out["updatedAt"] = self.updated_at.isoformat()
        return out


def _optional_str(payload, name):
    value = payload.get(name)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string")
    return value


def _require_object(payload):
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


@dataclass
class NewTask:
    title: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, payload) -> "NewTask":
        # Titles are stored verbatim: no trimming and no non-empty check.
        payload = _require_object(payload)
        return cls(
            title=_optional_str(payload, "title"),
            description=_optional_str(payload, "description"),
        )


@dataclass
class TaskPatch:
    """Partial update; ``None`` means "leave unchanged"."""

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None

    @classmethod
    def from_payload(cls, payload) -> "TaskPatch":
        payload = _require_object(payload)
        completed = payload.get("completed")
        if completed is not None and not isinstance(completed, bool):
            raise ValidationError("'completed' must be a boolean")
        return cls(
            title=_optional_str(payload, "title"),
            description=_optional_str(payload, "description"),
            completed=completed,
        )

    def changes(self) -> Dict[str, Any]:
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("description", self.description),
                ("completed", self.completed),
            )
            if value is not None
        }


STATUS_FILTERS = ("all", "pending", "completed")


def completed_filter(status: Optional[str]) -> Optional[bool]:
    """Map a ``?status=`` query value to the ``completed`` value to match."""
    status = status or "all"
    if status not in STATUS_FILTERS:
        raise ValidationError(f"status must be one of: {', '.join(STATUS_FILTERS)}")
    if status == "all":
        return None
    return status == "completed"


@dataclass
class TaskStats:
    total: int = 0
    pending: int = 0
    completed: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, "pending": self.pending, "completed": self.completed}
