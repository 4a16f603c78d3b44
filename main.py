import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.backend import Backend
from database.db_manager import DatabaseManager
from database.category_dao import CategoryDAO
from database.profile_dao import ProfileDAO
from database.transaction_dao import TransactionDAO
from database.user_dao import UserDAO

from services.auth_service import AuthService
from services.category_service import CategoryService
from services.profile_service import ProfileService
from services.query_cache import QueryCache
from services.transaction_service import TransactionService

from ui.app_window import AppWindow
from ui.components.login_dialog import LoginDialog
from utils.app_config import configure_logging, get_db_folder
from utils.constants import DEFAULT_THEME

logger = logging.getLogger(__name__)


def main():
    configure_logging()

    # ── Bootstrap: read DB folder from pre-DB config ──────────────────────────
    db_folder = get_db_folder()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open_default(db_folder=db_folder)

    # ── Session + user-scoped backend ────────────────────────────────────────
    auth_svc = AuthService(db, UserDAO(db))
    backend = Backend(db, auth_svc.current_user_id)
    cache = QueryCache()

    # ── DAOs ─────────────────────────────────────────────────────────────────
    category_dao = CategoryDAO(backend)
    tx_dao = TransactionDAO(backend)
    profile_dao = ProfileDAO(backend)

    # ── Services ─────────────────────────────────────────────────────────────
    category_svc = CategoryService(category_dao, cache, auth_svc.current_user_id)
    tx_svc = TransactionService(tx_dao, category_dao, cache, auth_svc.current_user_id)
    profile_svc = ProfileService(profile_dao, auth_svc.current_user_id)

    ctk.set_default_color_theme("blue")

    try:
        while True:
            ctk.set_appearance_mode(DEFAULT_THEME)
            login = LoginDialog(auth_svc)
            login.mainloop()
            if login.user is None:
                break

            # ── Appearance ───────────────────────────────────────────────────
            ctk.set_appearance_mode(profile_svc.get().theme)

            # ── Launch UI ────────────────────────────────────────────────────
            app = AppWindow(
                auth_service=auth_svc,
                tx_service=tx_svc,
                category_service=category_svc,
                profile_service=profile_svc,
                db=db,
                on_sign_out=cache.clear,
                date_format=db.get_setting("date_format", "DD/MM/YYYY"),
            )
            app.mainloop()
            if not app.signed_out:
                break
    finally:
        db.close()
        logger.info("Database closed")


if __name__ == "__main__":
    main()
