"""Session-backed repositories with compare-and-swap writes.

Reads hand out pydantic snapshots so the reconciliation and completion logic
never touches ORM state directly. Every conditional write returns ``False``
instead of raising when the stored version moved on.
"""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from prep_tracker.api.schemas.progress import UserProgressSnapshot
from prep_tracker.api.schemas.sprint import DailyPlan, SprintSnapshot
from prep_tracker.core.clock import utcnow
from prep_tracker.core.errors import UserNotFoundError
from prep_tracker.db.models.application import Application
from prep_tracker.db.models.sprint import Sprint
from prep_tracker.db.models.user import User
from prep_tracker.db.models.user_progress import UserProgress


def sprint_to_snapshot(row: Sprint) -> SprintSnapshot:
    return SprintSnapshot(
        id=row.id,
        application_id=row.application_id,
        interview_date=row.interview_date,
        role_type=row.role_type,
        total_days=row.total_days,
        daily_plans=[DailyPlan.model_validate(plan) for plan in (row.daily_plans or [])],
        status=row.status,
        created_at=row.created_at,
        version=row.version or 0,
    )


def _dump_plans(snapshot: SprintSnapshot) -> list:
    return [plan.model_dump(mode="json") for plan in snapshot.daily_plans]


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def ensure(self, user_id: UUID) -> User:
        """Return the user row, inserting it on first sight."""
        user = self.db.get(User, user_id)
        if user is not None:
            return user
        user = User(id=user_id)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError:
            # Another request created the same user between our read and insert.
            self.db.rollback()
            user = self.db.get(User, user_id)
            if user is None:
                raise
        return user

    def require(self, user_id: UUID) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError()
        return user


class ApplicationRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, application_id: UUID) -> Optional[Application]:
        return self.db.get(Application, application_id)

    def list_for_user(self, user_id: UUID) -> List[Application]:
        return (
            self.db.query(Application)
            .filter(Application.user_id == user_id)
            .order_by(Application.created_at.desc())
            .all()
        )

    def current_version(self, application_id: UUID) -> Optional[int]:
        row = (
            self.db.query(Application.version)
            .filter(Application.id == application_id)
            .one_or_none()
        )
        return row[0] if row else None

    def bump_version(self, application_id: UUID, expected_version: int, **values) -> bool:
        """Advance the version, writing ``values`` in the same statement."""
        result = self.db.execute(
            update(Application)
            .where(Application.id == application_id, Application.version == expected_version)
            .values(version=expected_version + 1, updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class SprintRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, sprint_id: UUID) -> Optional[SprintSnapshot]:
        row = (
            self.db.query(Sprint)
            .filter(Sprint.id == sprint_id)
            .populate_existing()
            .one_or_none()
        )
        return sprint_to_snapshot(row) if row else None

    def owner_of(self, sprint_id: UUID) -> Optional[UUID]:
        row = self.db.query(Sprint.user_id).filter(Sprint.id == sprint_id).one_or_none()
        return row[0] if row else None

    def list_for_application(self, application_id: UUID) -> List[SprintSnapshot]:
        rows = (
            self.db.query(Sprint)
            .filter(Sprint.application_id == application_id)
            .order_by(Sprint.created_at.asc())
            .populate_existing()
            .all()
        )
        return [sprint_to_snapshot(row) for row in rows]

    def list_for_user(self, user_id: UUID, status: Optional[str] = None) -> List[SprintSnapshot]:
        query = self.db.query(Sprint).filter(Sprint.user_id == user_id)
        if status:
            query = query.filter(Sprint.status == status)
        rows = query.order_by(Sprint.created_at.desc()).populate_existing().all()
        return [sprint_to_snapshot(row) for row in rows]

    def insert(self, user_id: UUID, snapshot: SprintSnapshot) -> SprintSnapshot:
        row = Sprint(
            id=snapshot.id,
            user_id=user_id,
            application_id=snapshot.application_id,
            interview_date=snapshot.interview_date,
            role_type=snapshot.role_type,
            total_days=snapshot.total_days,
            daily_plans=_dump_plans(snapshot),
            status=snapshot.status,
            version=0,
            created_at=snapshot.created_at,
        )
        self.db.add(row)
        self.db.flush()
        return snapshot.model_copy(update={"version": 0})

    def replace_content(self, snapshot: SprintSnapshot, expected_version: int) -> bool:
        """Overwrite a sprint's plan and metadata if nobody wrote it since ``expected_version``."""
        return self._conditional_update(
            snapshot.id,
            expected_version,
            interview_date=snapshot.interview_date,
            role_type=snapshot.role_type,
            total_days=snapshot.total_days,
            daily_plans=_dump_plans(snapshot),
            status=snapshot.status,
            created_at=snapshot.created_at,
        )

    def save_progress(self, snapshot: SprintSnapshot, expected_version: int) -> bool:
        return self._conditional_update(
            snapshot.id,
            expected_version,
            daily_plans=_dump_plans(snapshot),
            status=snapshot.status,
        )

    def expire(self, sprint_id: UUID, expected_version: int) -> bool:
        return self._conditional_update(sprint_id, expected_version, status="expired")

    def delete_for_application(self, application_id: UUID) -> int:
        return (
            self.db.query(Sprint)
            .filter(Sprint.application_id == application_id)
            .delete(synchronize_session=False)
        )

    def _conditional_update(self, sprint_id: UUID, expected_version: int, **values) -> bool:
        result = self.db.execute(
            update(Sprint)
            .where(Sprint.id == sprint_id, Sprint.version == expected_version)
            .values(version=expected_version + 1, updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class ProgressRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: UUID) -> UserProgressSnapshot:
        """Current progress; ``version`` is None when no row exists yet."""
        row = (
            self.db.query(UserProgress)
            .filter(UserProgress.user_id == user_id)
            .populate_existing()
            .one_or_none()
        )
        if row is None:
            return UserProgressSnapshot()
        return UserProgressSnapshot(
            current_streak=row.current_streak,
            longest_streak=row.longest_streak,
            last_active_date=row.last_active_date,
            total_tasks_completed=row.total_tasks_completed,
            version=row.version,
        )

    def save(self, user_id: UUID, progress: UserProgressSnapshot, expected_version: Optional[int]) -> bool:
        values = {
            "current_streak": progress.current_streak,
            "longest_streak": progress.longest_streak,
            "last_active_date": progress.last_active_date,
            "total_tasks_completed": progress.total_tasks_completed,
        }
        if expected_version is None:
            # A concurrent first insert surfaces as IntegrityError on flush.
            self.db.add(UserProgress(user_id=user_id, version=0, **values))
            self.db.flush()
            return True

        result = self.db.execute(
            update(UserProgress)
            .where(UserProgress.user_id == user_id, UserProgress.version == expected_version)
            .values(version=expected_version + 1, updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
