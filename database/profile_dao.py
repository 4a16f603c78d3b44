from typing import Optional

from database.backend import Backend
from models.user import Profile
from utils.constants import CURRENCIES, THEMES
from utils.errors import PersistenceError


class ProfileDAO:
    def __init__(self, backend: Backend):
        self._backend = backend

    def _row_to_model(self, row: dict) -> Profile:
        if row.get("theme") not in THEMES or row.get("currency") not in CURRENCIES:
            raise PersistenceError(f"Malformed profile row for user {row.get('user_id')}")
        return Profile(
            user_id=row["user_id"],
            full_name=row.get("full_name") or "",
            theme=row["theme"],
            currency=row["currency"],
            updated_at=row.get("updated_at") or "",
        )

    def get(self) -> Optional[Profile]:
        rows = self._backend.query("profiles")
        return self._row_to_model(rows[0]) if rows else None

    def save(self, **fields) -> Profile:
        return self._row_to_model(self._backend.upsert("profiles", fields))
