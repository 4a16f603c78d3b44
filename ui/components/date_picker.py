import customtkinter as ctk
from tkcalendar import Calendar
import tkinter as tk
from tkinter import ttk
from utils.date_helpers import format_display_date, parse_date, parse_display_date
from datetime import date


class DatePickerWidget(ctk.CTkFrame):
    """CTkEntry in the user's display format plus a calendar popup button.

    .get_date() returns a date (or None when empty); .set_date() takes a date.
    With allow_empty=True an empty entry is valid (optional due dates).
    """

    def __init__(
        self,
        master,
        initial_date: date | None = None,
        date_format: str = "DD/MM/YYYY",
        allow_empty: bool = False,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._date_format = date_format
        self._allow_empty = allow_empty
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(value=format_display_date(initial_date, date_format))

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        self._btn = ctk.CTkButton(
            self, text="📅", width=32, command=self._open_popup
        )
        self._btn.grid(row=0, column=1, padx=(4, 0))

        if allow_empty:
            ctk.CTkButton(
                self, text="✕", width=28,
                fg_color="transparent", border_width=1,
                text_color=("gray10", "gray90"),
                command=lambda: self.set_date(None),
            ).grid(row=0, column=2, padx=(4, 0))

    def _parse(self) -> date | None:
        raw = self._var.get().strip()
        if not raw:
            return None
        d = parse_display_date(raw, self._date_format)
        if d is None:
            d = parse_date(raw.replace("/", "-").replace(".", "-"))
        return d

    def get_date(self) -> date | None:
        return self._parse()

    def set_date(self, value: date | None):
        self._var.set(format_display_date(value, self._date_format))
        self._reset_border()

    def is_valid(self) -> bool:
        if not self._var.get().strip():
            return self._allow_empty
        return self._parse() is not None

    def _on_focus_out(self, _event=None):
        if not self._var.get().strip():
            self._reset_border()
            return
        d = self._parse()
        if d:
            self._var.set(format_display_date(d, self._date_format))
            self._reset_border()
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    def _open_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._popup.destroy()
            self._popup = None
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        # Theme the calendar to match CTk appearance
        if ctk.get_appearance_mode() == "Dark":
            bg, fg = "#2b2b2b", "#ffffff"
        else:
            bg, fg = "#ffffff", "#000000"
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure(
            "Calendar.Treeview",
            background=bg, foreground=fg,
            fieldbackground=bg,
        )

        current = self._parse() or date.today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern="yyyy-mm-dd",
            background=bg,
            foreground=fg,
            headersbackground=bg,
            headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg,
            weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal, popup))

        # Position below the entry
        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")

        popup.bind("<FocusOut>", lambda e: self._maybe_close(popup))

    def _on_date_selected(self, cal, popup):
        # selection_get() is a datetime.date regardless of date_pattern
        self.set_date(cal.selection_get())
        popup.destroy()
        self._popup = None

    def _maybe_close(self, popup):
        if not popup.winfo_exists():
            return
        try:
            focused = popup.focus_get()
        except KeyError:
            # focus moved to a widget Tk can no longer resolve (popup torn down)
            focused = None
        if focused is None or not str(focused).startswith(str(popup)):
            popup.destroy()
            self._popup = None
