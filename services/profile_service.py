import logging

from database.profile_dao import ProfileDAO
from models.user import Profile
from utils.constants import CURRENCIES, DEFAULT_CURRENCY, DEFAULT_THEME, THEMES
from utils.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, profile_dao: ProfileDAO, get_user_id):
        self._dao = profile_dao
        self._get_user_id = get_user_id

    def get(self) -> Profile:
        """The signed-in user's profile; defaults are written if it is missing."""
        user_id = self._get_user_id()
        if user_id is None:
            raise AuthenticationError("User not authenticated")
        profile = self._dao.get()
        if profile is None:
            profile = self._dao.save(theme=DEFAULT_THEME, currency=DEFAULT_CURRENCY)
        return profile

    def update_name(self, full_name: str) -> Profile:
        full_name = (full_name or "").strip()
        self.get()
        profile = self._dao.save(full_name=full_name)
        logger.info("Updated profile name for user %s", profile.user_id)
        return profile

    def update_preferences(self, theme: str | None = None, currency: str | None = None) -> Profile:
        fields = {}
        if theme is not None:
            if theme not in THEMES:
                raise ValidationError(f"Unknown theme: {theme}")
            fields["theme"] = theme
        if currency is not None:
            if currency not in CURRENCIES:
                raise ValidationError(f"Unsupported currency: {currency}")
            fields["currency"] = currency
        profile = self.get()
        if not fields:
            return profile
        profile = self._dao.save(**fields)
        logger.info("Updated preferences for user %s", profile.user_id)
        return profile
