import sqlite3
from typing import Optional

from database.db_manager import DatabaseManager
from models.user import User
from utils.errors import PersistenceError, ValidationError


class UserDAO:
    """Account rows. Not user-scoped: this is what establishes the user."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> User:
        return User(id=row["id"], email=row["email"], created_at=row["created_at"])

    def get_by_id(self, user_id: int) -> Optional[User]:
        row = self._db.get_connection().execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_credentials(self, email: str) -> Optional[tuple[User, str]]:
        """Return (user, password_hash) for the email, or None."""
        row = self._db.get_connection().execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_model(row), row["password_hash"]

    def create(self, email: str, password_hash: str) -> User:
        conn = self._db.get_connection()
        try:
            cursor = conn.execute(
                "INSERT INTO users(email, password_hash) VALUES (?, ?)",
                (email, password_hash),
            )
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise ValidationError(f"An account for {email} already exists.") from None
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(str(e)) from e
        return self.get_by_id(cursor.lastrowid)

    def set_password_hash(self, user_id: int, password_hash: str):
        conn = self._db.get_connection()
        try:
            conn.execute(
                "UPDATE users SET password_hash = ? WHERE id = ?",
                (password_hash, user_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(str(e)) from e
