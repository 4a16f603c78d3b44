import logging

import customtkinter as ctk
from tkinter import filedialog

from database.db_manager import DatabaseManager
from services.profile_service import ProfileService
from utils.app_config import get_db_folder, set_db_folder
from utils.constants import CURRENCIES, THEMES
from utils.date_helpers import DATE_FORMAT_OPTIONS
from utils.errors import FinanceError

logger = logging.getLogger(__name__)


class SettingsTab(ctk.CTkFrame):
    """Settings tab: appearance and currency (per user), date format, DB folder."""

    def __init__(
        self,
        master,
        db: DatabaseManager,
        profile_service: ProfileService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._db = db
        self._profile_svc = profile_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_preferences_section(scroll)
        self._build_db_folder_section(scroll)

    def refresh(self):
        """Re-read preferences and update displayed values."""
        profile = self._profile_svc.get()
        self._theme_var.set(profile.theme.title())
        self._currency_var.set(profile.currency)
        date_fmt = self._db.get_setting("date_format", "DD/MM/YYYY")
        if date_fmt in DATE_FORMAT_OPTIONS:
            self._date_fmt_var.set(date_fmt)

    # ── Section 1: Preferences ────────────────────────────────────────────────

    def _build_preferences_section(self, parent):
        section = self._make_section(parent, "Preferences", row=0)
        profile = self._profile_svc.get()

        ctk.CTkLabel(section, text="Theme:", anchor="e", width=120).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._theme_var = ctk.StringVar(value=profile.theme.title())
        ctk.CTkSegmentedButton(
            section,
            values=[t.title() for t in THEMES],
            variable=self._theme_var,
        ).grid(row=0, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Currency:", anchor="e", width=120).grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._currency_var = ctk.StringVar(value=profile.currency)
        ctk.CTkComboBox(
            section,
            values=list(CURRENCIES),
            variable=self._currency_var,
            width=180,
            state="readonly",
        ).grid(row=1, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Date Format:", anchor="e", width=120).grid(
            row=2, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._date_fmt_var = ctk.StringVar(
            value=self._db.get_setting("date_format", "DD/MM/YYYY")
        )
        ctk.CTkComboBox(
            section,
            values=DATE_FORMAT_OPTIONS,
            variable=self._date_fmt_var,
            width=180,
            state="readonly",
        ).grid(row=2, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(
            section,
            text="Date format changes take effect on next app restart.",
            text_color="gray60",
            font=ctk.CTkFont(size=11),
            anchor="w",
        ).grid(row=3, column=0, columnspan=2, sticky="w", padx=8)

        ctk.CTkButton(
            section, text="Save Settings", width=140,
            command=self._save_settings,
        ).grid(row=4, column=0, columnspan=2, pady=(10, 8))

        self._settings_status_var = ctk.StringVar()
        self._settings_status = ctk.CTkLabel(
            section,
            textvariable=self._settings_status_var,
            text_color="#4CAF50",
            font=ctk.CTkFont(size=11),
        )
        self._settings_status.grid(row=5, column=0, columnspan=2, pady=(0, 8))

    def _save_settings(self):
        theme = self._theme_var.get().lower()
        try:
            self._profile_svc.update_preferences(theme=theme, currency=self._currency_var.get())
        except FinanceError as e:
            self._settings_status.configure(text_color="#F44336")
            self._settings_status_var.set(str(e))
            return
        self._db.set_setting("date_format", self._date_fmt_var.get())
        ctk.set_appearance_mode(theme)
        self._settings_status.configure(text_color="#4CAF50")
        self._settings_status_var.set("Settings saved.")
        self._notify_refresh("preferences")

    # ── Section 2: DB folder ──────────────────────────────────────────────────

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=1)

        ctk.CTkLabel(
            section,
            text="The database file (controle_facil.db) is stored in this folder.",
            text_color="gray60",
            font=ctk.CTkFont(size=11),
            anchor="w",
        ).grid(row=0, column=0, columnspan=3, sticky="w", padx=8, pady=(4, 6))

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or "(default: app folder)")
        entry = ctk.CTkEntry(
            section, textvariable=self._db_folder_var,
            state="readonly", width=340,
        )
        entry.grid(row=1, column=0, padx=(8, 4), pady=4, sticky="ew")
        section.grid_columnconfigure(0, weight=1)

        ctk.CTkButton(
            section, text="Browse…", width=90,
            command=self._browse_db_folder,
        ).grid(row=1, column=1, padx=4)

        ctk.CTkButton(
            section, text="Reset to Default", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._reset_db_folder,
        ).grid(row=1, column=2, padx=(4, 8))

        self._db_restart_label = ctk.CTkLabel(
            section,
            text="",
            text_color="#FF9800",
            font=ctk.CTkFont(size=11),
            anchor="w",
        )
        self._db_restart_label.grid(row=2, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            set_db_folder(path)
            logger.info("Database folder changed to %s", path)
            self._db_folder_var.set(path)
            self._db_restart_label.configure(
                text="Restart the app for the change to take effect."
            )

    def _reset_db_folder(self):
        set_db_folder(None)
        self._db_folder_var.set("(default: app folder)")
        self._db_restart_label.configure(
            text="Restart the app for the change to take effect."
        )

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            outer,
            text=title,
            font=ctk.CTkFont(size=14, weight="bold"),
            anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(0, weight=1)
        return inner
