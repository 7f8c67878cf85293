"""Repository layer for task database operations."""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from fluidplan.models.task import Task, TaskStatus
from fluidplan.database.models import TaskDB

logger = logging.getLogger(__name__)

_EXCLUDED_STATUSES = [TaskStatus.COMPLETED.value, TaskStatus.IN_PROGRESS.value]


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, task: Task) -> Task:
        """Create a new task."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, user_id: str, task_id: str) -> Optional[Task]:
        """Get task by ID for a specific user."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task_id,
            TaskDB.user_id == user_id,
        ).first()
        return task_db.to_pydantic() if task_db else None

    def get_all(self, user_id: str) -> List[Task]:
        """Get all tasks for a user sorted by creation date (newest first)."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
        ).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_schedulable(self, user_id: str) -> List[Task]:
        """Auto-scheduled, unlocked tasks that are not completed or in progress."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
            TaskDB.is_auto_scheduled.is_(True),
            TaskDB.schedule_locked.is_(False),
            TaskDB.status.notin_(_EXCLUDED_STATUSES),
        ).order_by(TaskDB.created_at, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def get_locked(self, user_id: str) -> List[Task]:
        """Auto-scheduled, locked tasks that are not completed or in progress."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.user_id == user_id,
            TaskDB.is_auto_scheduled.is_(True),
            TaskDB.schedule_locked.is_(True),
            TaskDB.status.notin_(_EXCLUDED_STATUSES),
        ).order_by(TaskDB.created_at, TaskDB.id).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def update(self, task: Task) -> Task:
        """Update an existing task (user_id must match task.user_id)."""
        task_db = self.db.query(TaskDB).filter(
            TaskDB.id == task.id,
            TaskDB.user_id == task.user_id,
        ).first()
        if not task_db:
            raise ValueError(f"Task {task.id} not found")

        fresh = TaskDB.from_pydantic(task)
        for column in TaskDB.__table__.columns.keys():
            if column in ("id", "user_id", "created_at"):
                continue
            setattr(task_db, column, getattr(fresh, column))

        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Updated task {task.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def clear_schedules(self, user_id: str, task_ids: List[str]) -> int:
        """Null out placements for unlocked tasks. Locked rows are never touched."""
        if not task_ids:
            return 0

        try:
            affected = (
                self.db.query(TaskDB)
                .filter(
                    TaskDB.user_id == user_id,
                    TaskDB.id.in_(list(task_ids)),
                    TaskDB.schedule_locked.is_(False),
                )
                .update(
                    {
                        TaskDB.scheduled_start: None,
                        TaskDB.scheduled_end: None,
                        TaskDB.schedule_score: None,
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
            logger.debug(f"Cleared schedules of {affected} tasks for user {user_id}")
            return int(affected)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to clear schedules for user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def save_schedules(self, tasks: List[Task]) -> int:
        """Persist scheduling fields of unlocked tasks in a single commit."""
        saved = 0
        try:
            for task in tasks:
                if task.schedule_locked:
                    continue
                task_db = self.db.query(TaskDB).filter(
                    TaskDB.id == task.id,
                    TaskDB.user_id == task.user_id,
                ).first()
                if not task_db:
                    logger.warning(f"Skipping schedule save for missing task {task.id}")
                    continue
                task_db.apply_placement(task)
                saved += 1
            self.db.commit()
            logger.debug(f"Saved schedules of {saved} tasks")
            return saved
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save schedules: {type(e).__name__}: {str(e)}")
            raise
