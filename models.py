from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _utc_column(**kwargs):
    """Timestamp column that keeps its UTC offset on backends that support one"""
    return Field(sa_type=DateTime(timezone=True), **kwargs)


class User(SQLModel, table=True):
    """Registered account; the credential store"""
    __tablename__ = "users"

    id: str = Field(default_factory=_new_id, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    created_at: datetime = _utc_column(default_factory=_utcnow)


class Task(SQLModel, table=True):
    """Named agenda group owning an ordered list of checklist items"""
    __tablename__ = "tasks"

    # Insertion sequence; listing order follows it
    seq: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(default_factory=_new_id, unique=True, index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=200)
    created_at: datetime = _utc_column(default_factory=_utcnow)
    updated_at: datetime = _utc_column(default_factory=_utcnow)

    items: List["ChecklistItem"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "ChecklistItem.position",
        },
    )


class ChecklistItem(SQLModel, table=True):
    """Completable entry of a task; its id is unique within the owning task"""
    __tablename__ = "checklist_items"

    task_id: str = Field(foreign_key="tasks.id", primary_key=True)
    id: str = Field(primary_key=True, max_length=100)
    position: int = Field(default=0)
    content: str = Field(max_length=500)
    is_completed: bool = Field(default=False)
    scheduled_date: Optional[date] = Field(default=None, index=True)
    note: Optional[str] = None

    task: Optional[Task] = Relationship(back_populates="items")


class RevokedToken(SQLModel, table=True):
    """Session token invalidated by logout before its natural expiry"""
    __tablename__ = "revoked_tokens"

    jti: str = Field(primary_key=True, max_length=64)
    expires_at: datetime = _utc_column(index=True)
