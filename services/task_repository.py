"""
Task persistence, scoped to the owning user.

A task and its checklist items form one aggregate: every operation reads
or writes a single task row and its items inside one transaction.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic.alias_generators import to_camel
from sqlmodel import Session, col, select

from errors import NotFoundError, ValidationError
from models import ChecklistItem, Task
from schemas import ItemCreate

logger = logging.getLogger(__name__)

# Fields of ItemPatch.changes() that may not be set to null
_REQUIRED_FIELDS = ("title", "content", "is_completed")


class TaskRepository:
    """CRUD operations over one user's tasks"""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def list_tasks(self, on_date: Optional[date] = None) -> List[Task]:
        """
        All of the user's tasks in insertion order

        Args:
            on_date: Keep only tasks with at least one item scheduled that day
        """
        query = select(Task).where(Task.user_id == self.user_id)

        if on_date is not None:
            scheduled = select(ChecklistItem.task_id).where(ChecklistItem.scheduled_date == on_date)
            query = query.where(col(Task.id).in_(scheduled))

        query = query.order_by(col(Task.seq))
        return list(self.session.exec(query).all())

    def get_task(self, task_id: str, for_update: bool = False) -> Task:
        """
        Raises:
            NotFoundError: If the task does not exist or belongs to another user
        """
        query = select(Task).where(Task.id == task_id, Task.user_id == self.user_id)
        if for_update:
            query = query.with_for_update()

        task = self.session.exec(query).first()
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def create_task(self, title: str, items: List[ItemCreate]) -> Task:
        """
        Persist a new task, generating its id and ids for items that lack one

        Raises:
            ValidationError: If two items share a caller-supplied id
        """
        task = Task(user_id=self.user_id, title=title)

        seen = set()
        for position, item in enumerate(items):
            item_id = item.id or uuid4().hex
            if item_id in seen:
                raise ValidationError(f"Duplicate item id: {item_id}")
            seen.add(item_id)

            task.items.append(
                ChecklistItem(
                    id=item_id,
                    position=position,
                    content=item.content,
                    is_completed=item.is_completed,
                    scheduled_date=item.scheduled_date,
                    note=item.note,
                )
            )

        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)

        logger.info("Task %s created with %d item(s)", task.id, len(task.items))
        return task

    def update_task_item(self, task_id: str, item_id: str, changes: dict) -> Task:
        """
        Apply a patch to one item (and optionally the task title) in one commit

        Args:
            task_id: Owning task
            item_id: Item within that task
            changes: Subset of title, content, is_completed, scheduled_date, note

        Raises:
            NotFoundError: If the task or item does not resolve
        """
        task = self.get_task(task_id, for_update=True)

        item = next((i for i in task.items if i.id == item_id), None)
        if item is None:
            self.session.rollback()
            raise NotFoundError("Item not found")

        for field in _REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                self.session.rollback()
                raise ValidationError(f"{to_camel(field)} cannot be null.")

        if "title" in changes:
            task.title = changes["title"]
        if "content" in changes:
            item.content = changes["content"]
        if "is_completed" in changes:
            item.is_completed = changes["is_completed"]
        if "scheduled_date" in changes:
            item.scheduled_date = changes["scheduled_date"]
        if "note" in changes:
            item.note = changes["note"]

        task.updated_at = datetime.now(timezone.utc)

        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task

    def delete_task(self, task_id: str) -> None:
        """
        Remove a task and all of its items

        Raises:
            NotFoundError: If the task is already gone
        """
        task = self.get_task(task_id)
        self.session.delete(task)
        self.session.commit()

        logger.info("Task %s deleted", task_id)
