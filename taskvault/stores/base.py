"""Storage interfaces for accounts and tasks."""

from typing import List, Optional, Protocol

from taskvault.models.account_model import Account
from taskvault.models.task_model import NewTask, Task, TaskPatch, TaskStats


class AccountStore(Protocol):
    def get_by_email(self, email: str) -> Optional[Account]: ...

    def add(self, email: str, password_hash: str) -> Account:
        """Insert a new account; raises ConflictError if the email exists."""
        ...


class TaskStore(Protocol):
    """Task persistence. ``owner_id=None`` means unscoped (auth disabled).

    Results come back in storage order, which is not a guaranteed ordering.
    """

    def list(self, owner_id: Optional[str] = None, completed: Optional[bool] = None) -> List[Task]: ...

    def stats(self, owner_id: Optional[str] = None) -> TaskStats: ...

    def create(self, fields: NewTask, owner_id: Optional[str] = None) -> Task: ...

    def update(self, task_id: str, patch: TaskPatch, owner_id: Optional[str] = None) -> Task:
        """Raises NotFoundError when absent or owned by someone else."""
        ...

    def delete(self, task_id: str, owner_id: Optional[str] = None) -> None: ...

    def backfill_timestamps(self) -> int: ...
