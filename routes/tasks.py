from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from datetime import date
from typing import List, Optional
from database import get_session
from schemas import TaskCreate, ItemPatch, TaskRead, ProgressRead, MessageResponse
from middleware.auth import verify_session
from services.progress import compute_progress
from services.task_repository import TaskRepository

router = APIRouter()


def get_repository(
    user_id: str = Depends(verify_session),
    session: Session = Depends(get_session)
) -> TaskRepository:
    """Task repository scoped to the authenticated user"""
    return TaskRepository(session, user_id)


@router.get("/tasks", response_model=List[TaskRead])
async def list_tasks(
    on_date: Optional[date] = Query(None, alias="date"),
    repo: TaskRepository = Depends(get_repository)
) -> List[TaskRead]:
    """
    Get all tasks for authenticated user

    Args:
        on_date: Only tasks with an item scheduled on this day
        repo: Task repository

    Returns:
        List of tasks in insertion order
    """
    return [TaskRead.model_validate(task) for task in repo.list_tasks(on_date)]


@router.post("/tasks", status_code=status.HTTP_201_CREATED, response_model=TaskRead)
async def create_task(
    task_data: TaskCreate,
    repo: TaskRepository = Depends(get_repository)
) -> TaskRead:
    """
    Create a new task

    Args:
        task_data: Title and checklist items
        repo: Task repository

    Returns:
        Created task with generated ids
    """
    task = repo.create_task(task_data.title, task_data.items)
    return TaskRead.model_validate(task)


@router.patch("/tasks", response_model=TaskRead)
async def update_task_item(
    patch: ItemPatch,
    task_id: str = Query(..., alias="id"),
    repo: TaskRepository = Depends(get_repository)
) -> TaskRead:
    """
    Update one checklist item of a task

    Args:
        patch: Item id plus the fields to change
        task_id: Task id from the query string
        repo: Task repository

    Returns:
        Updated task
    """
    task = repo.update_task_item(task_id, patch.item_id, patch.changes())
    return TaskRead.model_validate(task)


@router.delete("/tasks", response_model=MessageResponse)
async def delete_task(
    task_id: str = Query(..., alias="id"),
    repo: TaskRepository = Depends(get_repository)
) -> MessageResponse:
    """
    Delete a task

    Args:
        task_id: Task id from the query string
        repo: Task repository

    Returns:
        Success message
    """
    repo.delete_task(task_id)
    return MessageResponse(message="Task deleted successfully")


@router.get("/tasks/progress", response_model=ProgressRead)
async def get_progress(
    on_date: Optional[date] = Query(None, alias="date"),
    repo: TaskRepository = Depends(get_repository)
) -> ProgressRead:
    """Completed and pending item counts over the user's tasks"""
    progress = compute_progress(repo.list_tasks(on_date))
    return ProgressRead(
        completed=progress.completed,
        pending=progress.pending,
        percentage=round(progress.percentage),
    )
