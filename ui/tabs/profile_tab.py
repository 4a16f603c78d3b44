import customtkinter as ctk

from services.auth_service import AuthService
from services.profile_service import ProfileService
from ui.components.confirm_dialog import ConfirmDialog
from utils.constants import MIN_PASSWORD_LENGTH
from utils.errors import FinanceError


class ProfileTab(ctk.CTkFrame):
    """Name, email, password change and sign out."""

    def __init__(
        self,
        master,
        auth_service: AuthService,
        profile_service: ProfileService,
        on_sign_out,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._auth = auth_service
        self._profile_svc = profile_service
        self._on_sign_out = on_sign_out

        self.grid_columnconfigure(0, weight=1)

        self._build_account_section()
        self._build_password_section()

        ctk.CTkButton(
            self, text="Sign Out", width=140,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._sign_out,
        ).grid(row=2, column=0, padx=12, pady=12, sticky="w")

    def refresh(self):
        user = self._auth.current_user
        self._email_label.configure(text=user.email if user else "")
        self._name_var.set(self._profile_svc.get().full_name)

    def _section(self, title: str, row: int) -> ctk.CTkFrame:
        outer = ctk.CTkFrame(self, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(1, weight=1)
        ctk.CTkLabel(
            outer, text=title, font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, columnspan=2, sticky="w", padx=12, pady=(10, 4))
        return outer

    def _build_account_section(self):
        section = self._section("Account", row=0)
        user = self._auth.current_user

        ctk.CTkLabel(section, text="Email:", width=140, anchor="e").grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._email_label = ctk.CTkLabel(
            section, text=user.email if user else "", anchor="w", text_color="gray60",
        )
        self._email_label.grid(row=1, column=1, padx=4, sticky="w")

        ctk.CTkLabel(section, text="Full name:", width=140, anchor="e").grid(
            row=2, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._name_var = ctk.StringVar(value=self._profile_svc.get().full_name)
        ctk.CTkEntry(section, textvariable=self._name_var, width=260).grid(
            row=2, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkButton(section, text="Save", width=100, command=self._save_name).grid(
            row=3, column=1, padx=4, pady=(4, 4), sticky="w"
        )
        self._name_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._name_status.grid(row=4, column=1, padx=4, pady=(0, 8), sticky="w")

    def _build_password_section(self):
        section = self._section("Change Password", row=1)

        self._new_pw_var = ctk.StringVar()
        self._confirm_pw_var = ctk.StringVar()
        for r, (label, var) in enumerate(
            (("New password:", self._new_pw_var), ("Confirm password:", self._confirm_pw_var)),
            start=1,
        ):
            ctk.CTkLabel(section, text=label, width=140, anchor="e").grid(
                row=r, column=0, padx=(8, 4), pady=6, sticky="e"
            )
            ctk.CTkEntry(section, textvariable=var, show="•", width=260).grid(
                row=r, column=1, padx=4, pady=6, sticky="w"
            )

        ctk.CTkLabel(
            section, text=f"At least {MIN_PASSWORD_LENGTH} characters.",
            text_color="gray60", font=ctk.CTkFont(size=11),
        ).grid(row=3, column=1, padx=4, sticky="w")

        ctk.CTkButton(
            section, text="Update Password", width=140, command=self._update_password,
        ).grid(row=4, column=1, padx=4, pady=(8, 4), sticky="w")
        self._pw_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._pw_status.grid(row=5, column=1, padx=4, pady=(0, 8), sticky="w")

    def _save_name(self):
        try:
            self._profile_svc.update_name(self._name_var.get())
        except FinanceError as e:
            self._name_status.configure(text=str(e), text_color="#F44336")
            return
        self._name_status.configure(text="Profile updated.", text_color="#4CAF50")

    def _update_password(self):
        try:
            self._auth.update_password(self._new_pw_var.get(), self._confirm_pw_var.get())
        except FinanceError as e:
            self._pw_status.configure(text=str(e), text_color="#F44336")
            return
        self._new_pw_var.set("")
        self._confirm_pw_var.set("")
        self._pw_status.configure(text="Password updated.", text_color="#4CAF50")

    def _sign_out(self):
        dlg = ConfirmDialog(
            self.winfo_toplevel(), "Sign Out", "Sign out of your account?",
            confirm_text="Sign Out", destructive=False,
        )
        if dlg.result:
            self._on_sign_out()
