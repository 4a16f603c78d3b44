import customtkinter as ctk
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, INFO_COLOR, WARNING_COLOR

SEVERITY_COLORS = {
    "info": INFO_COLOR,
    "success": INCOME_COLOR,
    "warning": WARNING_COLOR,
    "error": EXPENSE_COLOR,
}


class AlertBanner(ctk.CTkFrame):
    """A dismissible colored banner; the desktop stand-in for a toast.

    auto_hide_ms > 0 removes the banner on its own after that delay.
    """

    def __init__(self, master, message: str, severity: str = "info",
                 action_text: str | None = None, action_cmd=None,
                 auto_hide_ms: int = 0, **kwargs):
        color = SEVERITY_COLORS.get(severity, INFO_COLOR)
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._hide_job = None

        ctk.CTkLabel(
            self, text=message, text_color="white",
            anchor="w", padx=10, pady=6, wraplength=900, justify="left",
        ).grid(row=0, column=0, sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=0, column=1, padx=(0, 4))

        if action_text and action_cmd:
            ctk.CTkButton(
                btn_frame, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=action_cmd,
            ).pack(side="left", padx=2)

        ctk.CTkButton(
            btn_frame, text="✕", width=28, height=24,
            fg_color="transparent",
            text_color="white",
            command=self.destroy,
        ).pack(side="left")

        if auto_hide_ms > 0:
            self._hide_job = self.after(auto_hide_ms, self.destroy)

    def destroy(self):
        if self._hide_job is not None:
            self.after_cancel(self._hide_job)
            self._hide_job = None
        super().destroy()
