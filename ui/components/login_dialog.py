import customtkinter as ctk
from services.auth_service import AuthService
from utils.app_config import get_last_email, set_last_email
from utils.constants import APP_NAME, MIN_PASSWORD_LENGTH
from utils.errors import FinanceError


class LoginDialog(ctk.CTk):
    """Sign in or create an account before the main window opens.

    Runs its own mainloop; .user is set on success, None if the window was closed.
    """

    def __init__(self, auth_service: AuthService, **kwargs):
        super().__init__(**kwargs)
        self._auth = auth_service
        self.user = None

        self.title(APP_NAME)
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=APP_NAME, font=ctk.CTkFont(size=20, weight="bold"),
        ).grid(row=0, column=0, padx=24, pady=(20, 4))
        self._subtitle = ctk.CTkLabel(self, text="Sign in to continue", text_color="gray60")
        self._subtitle.grid(row=1, column=0, padx=24, pady=(0, 12))

        self._mode_var = ctk.StringVar(value="Sign In")
        ctk.CTkSegmentedButton(
            self, values=["Sign In", "Sign Up"], variable=self._mode_var,
            command=lambda _: self._on_mode_change(),
        ).grid(row=2, column=0, padx=24, pady=(0, 8))

        self._email_var = ctk.StringVar(value=get_last_email())
        ctk.CTkEntry(
            self, textvariable=self._email_var, width=260, placeholder_text="Email",
        ).grid(row=3, column=0, padx=24, pady=4)

        self._password_var = ctk.StringVar()
        pw_entry = ctk.CTkEntry(
            self, textvariable=self._password_var, width=260, show="•",
            placeholder_text="Password",
        )
        pw_entry.grid(row=4, column=0, padx=24, pady=4)
        pw_entry.bind("<Return>", lambda _e: self._on_submit())

        self._hint = ctk.CTkLabel(
            self, text="", text_color="gray60", font=ctk.CTkFont(size=11),
        )
        self._hint.grid(row=5, column=0, padx=24)

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=260, anchor="w",
        ).grid(row=6, column=0, padx=24, pady=(0, 4), sticky="ew")

        self._submit_btn = ctk.CTkButton(
            self, text="Sign In", width=260, command=self._on_submit,
        )
        self._submit_btn.grid(row=7, column=0, padx=24, pady=(4, 20))

    def _on_mode_change(self):
        signing_up = self._mode_var.get() == "Sign Up"
        self._submit_btn.configure(text="Create Account" if signing_up else "Sign In")
        self._subtitle.configure(
            text="Create your account" if signing_up else "Sign in to continue"
        )
        self._hint.configure(
            text=f"At least {MIN_PASSWORD_LENGTH} characters" if signing_up else ""
        )
        self._error_var.set("")

    def _on_submit(self):
        email = self._email_var.get().strip()
        password = self._password_var.get()
        try:
            if self._mode_var.get() == "Sign Up":
                self.user = self._auth.sign_up(email, password)
            else:
                self.user = self._auth.sign_in(email, password)
        except FinanceError as e:
            self._error_var.set(str(e))
            return
        set_last_email(self.user.email)
        self.destroy()
