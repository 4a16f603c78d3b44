import re
from typing import Optional

from database.backend import Backend
from models.category import Category
from utils.constants import TRANSACTION_TYPES
from utils.errors import PersistenceError

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryDAO:
    def __init__(self, backend: Backend):
        self._backend = backend

    def _row_to_model(self, row: dict) -> Category:
        try:
            name = row["name"]
            type_ = row["type"]
            color = row["color"]
        except KeyError as e:
            raise PersistenceError(f"Category row missing {e}") from None
        if not name or type_ not in TRANSACTION_TYPES or not _HEX_COLOR.match(color or ""):
            raise PersistenceError(f"Malformed category row id={row.get('id')}")
        return Category(
            id=row["id"],
            user_id=row["user_id"],
            name=name,
            type=type_,
            color=color,
            created_at=row.get("created_at") or "",
        )

    def get_all(self, type_filter: str | None = None) -> list[Category]:
        """type_filter: 'income', 'expense', or None for both."""
        filters = {"type": type_filter} if type_filter else None
        rows = self._backend.query(
            "categories", filters, ordering=[("name", True)]
        )
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        rows = self._backend.query("categories", {"id": category_id})
        return self._row_to_model(rows[0]) if rows else None

    def create(self, name: str, type_: str, color: str) -> Category:
        row = self._backend.insert(
            "categories", [{"name": name, "type": type_, "color": color}]
        )[0]
        return self._row_to_model(row)

    def update(self, category_id: int, name: str, type_: str, color: str) -> Category:
        row = self._backend.update(
            "categories", category_id, {"name": name, "type": type_, "color": color}
        )
        return self._row_to_model(row)

    def delete(self, category_id: int):
        self._backend.delete("categories", category_id)
