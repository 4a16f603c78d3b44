from __future__ import annotations

import logging
import re

from database.category_dao import CategoryDAO
from models.category import Category
from services.query_cache import QueryCache
from utils.constants import TRANSACTION_TYPES, UNCATEGORIZED_NAME
from utils.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryService:
    def __init__(self, category_dao: CategoryDAO, cache: QueryCache, get_user_id):
        self._dao = category_dao
        self._cache = cache
        self._get_user_id = get_user_id

    def list(self, type_: str | None = None) -> list[Category]:
        user_id = self._get_user_id()
        if user_id is None:
            return []
        cached = self._cache.get(user_id, "categories", type_)
        if cached is not None:
            return list(cached)
        categories = self._dao.get_all(type_)
        self._cache.put(user_id, "categories", type_, categories)
        return list(categories)

    def get_by_id(self, category_id: int):
        return self._dao.get_by_id(category_id)

    def create(self, name: str, type_: str, color: str) -> Category:
        name = self._validate(None, name, type_, color)
        category = self._dao.create(name, type_, color.upper())
        self._invalidate()
        logger.info("Created category %s", category.id)
        return category

    def update(self, category_id: int, name: str, type_: str, color: str) -> Category:
        name = self._validate(category_id, name, type_, color)
        category = self._dao.update(category_id, name, type_, color.upper())
        self._invalidate()
        logger.info("Updated category %s", category_id)
        return category

    def delete(self, category_id: int):
        """Transactions pointing at the category become uncategorized."""
        self._require_user()
        self._dao.delete(category_id)
        self._invalidate()
        logger.info("Deleted category %s", category_id)

    def _require_user(self) -> int:
        user_id = self._get_user_id()
        if user_id is None:
            raise AuthenticationError("User not authenticated")
        return user_id

    def _validate(self, category_id, name: str, type_: str, color: str) -> str:
        self._require_user()
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        if name.lower() == UNCATEGORIZED_NAME.lower():
            raise ValidationError(
                f"'{UNCATEGORIZED_NAME}' is reserved for transactions without a category."
            )
        if type_ not in TRANSACTION_TYPES:
            raise ValidationError(f"Invalid category type: {type_}")
        if not _HEX_COLOR.match(color or ""):
            raise ValidationError("Color must be a hex value like #22C55E.")
        siblings = [c for c in self._dao.get_all(type_) if c.id != category_id]
        if any(c.name.lower() == name.lower() for c in siblings):
            raise ValidationError(f"A category named '{name}' already exists.")
        return name

    def _invalidate(self):
        # Transactions are shown joined to their category.
        user_id = self._get_user_id()
        self._cache.invalidate(user_id, "categories")
        self._cache.invalidate(user_id, "transactions")
