import logging

import customtkinter as ctk
from database.db_manager import DatabaseManager
from services.auth_service import AuthService
from services.category_service import CategoryService
from services.profile_service import ProfileService
from services.transaction_service import TransactionService
from ui.components.alert_banner import AlertBanner
from ui.tabs.bills_tab import BillsTab
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.dashboard_tab import DashboardTab
from ui.tabs.profile_tab import ProfileTab
from ui.tabs.reports_tab import ReportsTab
from ui.tabs.settings_tab import SettingsTab
from ui.tabs.transactions_tab import TransactionsTab
from utils.constants import APP_HEIGHT, APP_NAME, APP_WIDTH, DEFAULT_CURRENCY

logger = logging.getLogger(__name__)

_ERROR_BANNER_MS = 8000

_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"dashboard", "income", "expenses", "bills", "reports"},
    "category":    {"dashboard", "income", "expenses", "bills", "reports", "categories"},
    "preferences": {"dashboard", "income", "expenses", "bills", "reports", "settings"},
    "full":        {"dashboard", "income", "expenses", "bills", "reports",
                    "categories", "settings", "profile"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        auth_service: AuthService,
        tx_service: TransactionService,
        category_service: CategoryService,
        profile_service: ProfileService,
        db: DatabaseManager,
        on_sign_out=None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._auth = auth_service
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._profile_svc = profile_service
        self._db = db
        self._on_sign_out = on_sign_out
        self._date_format = date_format
        self.signed_out = False

        user = auth_service.current_user
        self.title(f"{APP_NAME} · {user.email}" if user else APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        tab_names = [
            "Dashboard", "Income", "Expenses", "Bills",
            "Reports", "Categories", "Settings", "Profile",
        ]
        for tab_name in tab_names:
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        shared = dict(
            get_currency=self._get_currency,
            date_format=self._date_format,
            on_error=self.show_error,
        )

        self._tabs = {
            "dashboard": DashboardTab(
                self._tabview.tab("Dashboard"), tx_service=self._tx_svc, **shared,
            ),
            "income": TransactionsTab(
                self._tabview.tab("Income"), "income",
                tx_service=self._tx_svc,
                category_service=self._cat_svc,
                notify_refresh=self.notify_tabs_refresh,
                **shared,
            ),
            "expenses": TransactionsTab(
                self._tabview.tab("Expenses"), "expense",
                tx_service=self._tx_svc,
                category_service=self._cat_svc,
                notify_refresh=self.notify_tabs_refresh,
                **shared,
            ),
            "bills": BillsTab(
                self._tabview.tab("Bills"),
                tx_service=self._tx_svc,
                notify_refresh=self.notify_tabs_refresh,
                **shared,
            ),
            "reports": ReportsTab(
                self._tabview.tab("Reports"),
                tx_service=self._tx_svc,
                category_service=self._cat_svc,
                **shared,
            ),
            "categories": CategoriesTab(
                self._tabview.tab("Categories"),
                category_service=self._cat_svc,
                notify_refresh=self.notify_tabs_refresh,
                on_error=self.show_error,
            ),
            "settings": SettingsTab(
                self._tabview.tab("Settings"),
                db=self._db,
                profile_service=self._profile_svc,
                notify_refresh=self.notify_tabs_refresh,
            ),
            "profile": ProfileTab(
                self._tabview.tab("Profile"),
                auth_service=self._auth,
                profile_service=self._profile_svc,
                on_sign_out=self._sign_out,
            ),
        }
        for tab in self._tabs.values():
            tab.grid(row=0, column=0, sticky="nsew")

    def _get_currency(self) -> str:
        if self._auth.current_user is None:
            return DEFAULT_CURRENCY
        return self._profile_svc.get().currency

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        for name in tabs:
            self._tabs[name].refresh()

    # ── Banners ──────────────────────────────────────────────────────────────
    def show_error(self, message: str):
        self.show_banner(message, severity="error")

    def show_banner(self, message: str, severity: str = "info"):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        AlertBanner(
            self._banner_frame,
            message=message,
            severity=severity,
            auto_hide_ms=_ERROR_BANNER_MS,
        ).pack(fill="x", pady=2)

    # ── Session ──────────────────────────────────────────────────────────────
    def _sign_out(self):
        self._auth.sign_out()
        self.signed_out = True
        if self._on_sign_out:
            self._on_sign_out()
        self.destroy()
