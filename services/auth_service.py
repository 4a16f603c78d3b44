import logging
import re
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from database.db_manager import DatabaseManager
from database.user_dao import UserDAO
from models.user import User
from utils.constants import MIN_PASSWORD_LENGTH
from utils.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _validate_password(password: str, confirm: str | None = None):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    if confirm is not None and password != confirm:
        raise ValidationError("Passwords do not match.")


class AuthService:
    """Holds the signed-in session; the backend asks it for the current user id."""

    def __init__(self, db: DatabaseManager, user_dao: UserDAO):
        self._db = db
        self._dao = user_dao
        self._user: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    def current_user_id(self) -> Optional[int]:
        return self._user.id if self._user else None

    def require_user(self) -> User:
        if self._user is None:
            raise AuthenticationError("User not authenticated")
        return self._user

    def sign_up(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        if not _EMAIL.match(email):
            raise ValidationError("Enter a valid email address.")
        _validate_password(password)
        user = self._dao.create(email, generate_password_hash(password))
        self._db.seed_user_defaults(user.id)
        logger.info("Registered user %s", user.id)
        self._user = user
        return user

    def sign_in(self, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        found = self._dao.get_credentials(email)
        if found is None or not check_password_hash(found[1], password or ""):
            logger.info("Failed sign-in attempt")
            raise AuthenticationError("Invalid email or password.")
        self._user = found[0]
        logger.info("User %s signed in", self._user.id)
        return self._user

    def sign_out(self):
        if self._user is not None:
            logger.info("User %s signed out", self._user.id)
        self._user = None

    def update_password(self, new_password: str, confirm: str):
        user = self.require_user()
        _validate_password(new_password, confirm)
        self._dao.set_password_hash(user.id, generate_password_hash(new_password))
        logger.info("Password updated for user %s", user.id)
