"""
User Repository - HR portal accounts stored in the SQL database.

Routes depend on the UserRepository interface; SqlUserRepository is the
implementation wired in by ats.api.deps.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from ats.core.exceptions import DuplicateUserError
from ats.db.sql import get_db_session, users_table


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[dict]: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[dict]: ...

    @abstractmethod
    def create(self, email: str, password_hash: str, name: str, role: str,
               department: Optional[str], employee_id: str) -> dict: ...

    @abstractmethod
    def record_login(self, user_id: int) -> None: ...

    @abstractmethod
    def update_password(self, user_id: int, password_hash: str) -> None: ...

    @abstractmethod
    def list_users(self) -> List[dict]: ...

    @abstractmethod
    def count(self) -> int: ...


class SqlUserRepository(UserRepository):
    """SQLAlchemy Core implementation over the users table."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory

    def _fetch_one(self, condition) -> Optional[dict]:
        with get_db_session(self._session_factory) as db:
            row = db.execute(select(users_table).where(condition)).fetchone()
        return dict(row._mapping) if row else None

    def get_by_id(self, user_id: int) -> Optional[dict]:
        return self._fetch_one(users_table.c.user_id == user_id)

    def get_by_email(self, email: str) -> Optional[dict]:
        return self._fetch_one(users_table.c.email == email.lower())

    def create(self, email: str, password_hash: str, name: str, role: str,
               department: Optional[str], employee_id: str) -> dict:
        email = email.lower()
        with get_db_session(self._session_factory) as db:
            existing = db.execute(
                select(users_table.c.user_id).where(
                    or_(users_table.c.email == email, users_table.c.employee_id == employee_id)
                )
            ).fetchone()
            if existing:
                raise DuplicateUserError(f"Email or employee ID already registered: {email} / {employee_id}")

            now = datetime.utcnow()
            try:
                db.execute(
                    users_table.insert().values(
                        email=email,
                        password_hash=password_hash,
                        name=name,
                        role=role,
                        department=department,
                        employee_id=employee_id,
                        is_active=True,
                        created_at=now,
                        updated_at=now,
                    )
                )
            except IntegrityError as e:
                raise DuplicateUserError(str(e.orig)) from e

        return self.get_by_email(email)

    def record_login(self, user_id: int) -> None:
        with get_db_session(self._session_factory) as db:
            db.execute(
                users_table.update()
                .where(users_table.c.user_id == user_id)
                .values(last_login=datetime.utcnow())
            )

    def update_password(self, user_id: int, password_hash: str) -> None:
        with get_db_session(self._session_factory) as db:
            db.execute(
                users_table.update()
                .where(users_table.c.user_id == user_id)
                .values(password_hash=password_hash, updated_at=datetime.utcnow())
            )

    def list_users(self) -> List[dict]:
        with get_db_session(self._session_factory) as db:
            rows = db.execute(select(users_table).order_by(users_table.c.user_id)).fetchall()
        return [dict(r._mapping) for r in rows]

    def count(self) -> int:
        with get_db_session(self._session_factory) as db:
            return db.execute(select(func.count()).select_from(users_table)).scalar_one()
