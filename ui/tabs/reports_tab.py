import logging

import customtkinter as ctk
import tkinter as tk
from tkinter import filedialog
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from services.category_service import CategoryService
from services.report_service import (
    Report, ReportFilter, export_filename, export_rows, report, write_csv,
)
from services.transaction_service import TransactionService
from ui.components.date_picker import DatePickerWidget
from ui.tabs.loading_tab import LoadingTab
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, INFO_COLOR, TYPE_LABELS, WARNING_COLOR
from utils.currency import format_currency
from utils.date_helpers import format_display_date, today
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

_PERIODS = {"Current Month": "current_month", "Last Month": "last_month", "Custom": "custom"}
_ALL_CATEGORIES = "All Categories"
_ALL_TYPES = "All Types"


class ReportsTab(LoadingTab):
    def __init__(
        self,
        master,
        tx_service: TransactionService,
        category_service: CategoryService,
        get_currency,
        date_format: str = "DD/MM/YYYY",
        on_error=None,
        **kwargs,
    ):
        super().__init__(master, on_error=on_error, **kwargs)
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._get_currency = get_currency
        self._date_format = date_format
        self._categories = []
        self._category_labels = {}
        self._report: Report | None = None

        self._period_var = ctk.StringVar(value="Current Month")
        self._category_var = ctk.StringVar(value=_ALL_CATEGORIES)
        self._type_var = ctk.StringVar(value=_ALL_TYPES)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_summary()
        self._build_body()
        self.refresh()

    # ── Layout ───────────────────────────────────────────────────────────────

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkSegmentedButton(
            bar, values=list(_PERIODS), variable=self._period_var,
            command=lambda _: self._on_period_change(),
        ).pack(side="left", padx=(12, 8), pady=8)

        self._custom_frame = ctk.CTkFrame(bar, fg_color="transparent")
        ctk.CTkLabel(self._custom_frame, text="From").pack(side="left", padx=(0, 4))
        first = today().replace(day=1)
        self._start_picker = DatePickerWidget(
            self._custom_frame, initial_date=first, date_format=self._date_format,
        )
        self._start_picker.pack(side="left")
        ctk.CTkLabel(self._custom_frame, text="to").pack(side="left", padx=4)
        self._end_picker = DatePickerWidget(
            self._custom_frame, initial_date=today(), date_format=self._date_format,
        )
        self._end_picker.pack(side="left")

        self._category_combo = ctk.CTkComboBox(
            bar, values=[_ALL_CATEGORIES], variable=self._category_var,
            width=160, state="readonly", command=lambda _: self.refresh(),
        )
        self._category_combo.pack(side="left", padx=(8, 4))
        ctk.CTkComboBox(
            bar, values=[_ALL_TYPES] + list(TYPE_LABELS.values()),
            variable=self._type_var, width=120, state="readonly",
            command=lambda _: self.refresh(),
        ).pack(side="left", padx=4)

        ctk.CTkButton(bar, text="Export CSV", command=self._export_csv).pack(side="right", padx=8)
        ctk.CTkButton(
            bar, text="Apply", width=70,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.refresh,
        ).pack(side="right", padx=4)

    def _on_period_change(self):
        if _PERIODS[self._period_var.get()] == "custom":
            self._custom_frame.pack(side="left", padx=4, before=self._category_combo)
        else:
            self._custom_frame.pack_forget()
            self.refresh()

    def _build_summary(self):
        self._summary_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._summary_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=10)
        self._summary_frame.grid_columnconfigure((0, 1, 2, 3), weight=1)

    def _build_body(self):
        body = ctk.CTkFrame(self, fg_color="transparent")
        body.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        body.grid_columnconfigure(0, weight=3)
        body.grid_columnconfigure(1, weight=2)
        body.grid_rowconfigure((0, 1), weight=1)

        self._breakdown_frame = ctk.CTkScrollableFrame(body, label_text="By Category")
        self._breakdown_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 8), pady=(0, 8))

        pie_outer = ctk.CTkFrame(body, fg_color=("gray90", "gray20"), corner_radius=8)
        pie_outer.grid(row=0, column=1, rowspan=2, sticky="nsew")
        ctk.CTkLabel(
            pie_outer, text="Expense Breakdown",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(pady=(10, 0))
        self._pie_fig = Figure(figsize=(3, 3), dpi=80, tight_layout=True)
        self._pie_ax = self._pie_fig.add_subplot(111)
        self._pie_mpl = FigureCanvasTkAgg(self._pie_fig, master=pie_outer)
        self._pie_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))
        self._legend_frame = ctk.CTkFrame(pie_outer, fg_color="transparent")
        self._legend_frame.pack(fill="x", padx=8, pady=(0, 8))

        self._recent_frame = ctk.CTkScrollableFrame(body, label_text="Most Recent")
        self._recent_frame.grid(row=1, column=0, sticky="nsew", padx=(0, 8))

    def _style_ax(self, ax, fig):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)

    # ── Data ─────────────────────────────────────────────────────────────────

    def _current_filter(self) -> ReportFilter:
        preset = _PERIODS[self._period_var.get()]
        category = self._category_labels.get(self._category_var.get())
        type_label = self._type_var.get()
        type_ = next((k for k, v in TYPE_LABELS.items() if v == type_label), None)
        if preset == "custom" and not (self._start_picker.is_valid() and self._end_picker.is_valid()):
            raise ValidationError("Enter valid start and end dates.")
        return ReportFilter.for_preset(
            preset, today(),
            custom_start=self._start_picker.get_date(),
            custom_end=self._end_picker.get_date(),
            category_id=category.id if category else None,
            type_=type_,
        )

    def _fetch(self):
        self._categories = self._cat_svc.list()
        self._category_labels = {
            f"{c.name} ({TYPE_LABELS[c.type]})": c for c in self._categories
        }
        try:
            report_filter = self._current_filter()
        except ValidationError as e:
            self._on_error(str(e))
            return self._report
        return report(self._tx_svc.list(), self._categories, report_filter)

    def _render(self, data: Report | None):
        names = [_ALL_CATEGORIES] + sorted(self._category_labels)
        self._category_combo.configure(values=names)
        if self._category_var.get() not in names:
            self._category_var.set(_ALL_CATEGORIES)

        self._report = data
        for frame in (self._summary_frame, self._breakdown_frame,
                      self._recent_frame, self._legend_frame):
            for w in frame.winfo_children():
                w.destroy()
        if data is None:
            self._draw_pie_chart([])
            return

        currency = self._get_currency()
        s = data.summary
        for i, (label, text, color) in enumerate([
            ("Income", format_currency(s.total_income, currency), INCOME_COLOR),
            ("Expenses", format_currency(s.total_expenses, currency), EXPENSE_COLOR),
            ("Balance", format_currency(s.balance, currency),
             INFO_COLOR if s.balance >= 0 else WARNING_COLOR),
            ("Transactions", str(data.transaction_count), INFO_COLOR),
        ]):
            card = ctk.CTkFrame(
                self._summary_frame, fg_color=("gray90", "gray20"), corner_radius=10
            )
            card.grid(row=0, column=i, padx=6, sticky="ew")
            ctk.CTkLabel(card, text=label, text_color="gray60").pack(pady=(10, 0), padx=16)
            ctk.CTkLabel(
                card, text=text,
                font=ctk.CTkFont(size=18, weight="bold"),
                text_color=color,
            ).pack(pady=(4, 10), padx=16)

        if not data.breakdown:
            ctk.CTkLabel(
                self._breakdown_frame, text="No paid transactions in this period.",
                text_color="gray60",
            ).pack(pady=20)
        for item in data.breakdown:
            f = ctk.CTkFrame(self._breakdown_frame, fg_color="transparent")
            f.pack(fill="x", pady=4, padx=4)
            top = ctk.CTkFrame(f, fg_color="transparent")
            top.pack(fill="x")
            tk.Label(top, bg=item.color, width=2).pack(side="left", padx=(0, 6))
            ctk.CTkLabel(top, text=item.name, anchor="w").pack(side="left")
            parts = []
            if item.income:
                parts.append(f"+{format_currency(item.income, currency)} ({item.income_share}%)")
            if item.expense:
                parts.append(f"-{format_currency(item.expense, currency)} ({item.expense_share}%)")
            ctk.CTkLabel(top, text="  ".join(parts), text_color="gray60").pack(side="right")
            share = item.expense_share if item.expense else item.income_share
            bar = ctk.CTkProgressBar(f, progress_color=item.color)
            bar.pack(fill="x", pady=2)
            bar.set(float(share) / 100)

        for tx in data.recent:
            row = ctk.CTkFrame(self._recent_frame, fg_color="transparent")
            row.pack(fill="x", pady=1)
            row.grid_columnconfigure(1, weight=1)
            ctk.CTkLabel(
                row, text=format_display_date(tx.transaction_date, self._date_format), width=85,
                anchor="w",
            ).grid(row=0, column=0, padx=4)
            ctk.CTkLabel(row, text=tx.description or tx.category_name or "—", anchor="w").grid(
                row=0, column=1, padx=4, sticky="ew"
            )
            is_income = tx.type == "income"
            ctk.CTkLabel(
                row, text=f"{'+' if is_income else '-'}{format_currency(tx.amount, currency)}",
                text_color=INCOME_COLOR if is_income else EXPENSE_COLOR, width=110, anchor="e",
            ).grid(row=0, column=2, padx=4)

        expenses = [b for b in data.breakdown if b.expense > 0]
        self.after(50, lambda b=expenses: self._draw_pie_chart(b))
        for item in expenses[:8]:
            row = ctk.CTkFrame(self._legend_frame, fg_color="transparent")
            row.pack(fill="x", pady=1)
            tk.Label(row, bg=item.color, width=2).pack(side="left", padx=(0, 4))
            ctk.CTkLabel(
                row, text=f"{item.name}: {format_currency(item.expense, currency)}",
                anchor="w", font=ctk.CTkFont(size=11),
            ).pack(side="left")

    def _draw_pie_chart(self, breakdown):
        if not self.winfo_exists():
            return
        ax = self._pie_ax
        ax.clear()
        self._style_ax(ax, self._pie_fig)

        if not breakdown:
            ax.text(0.5, 0.5, "No expense data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._pie_mpl.draw_idle()
            return

        ax.pie(
            [float(b.expense) for b in breakdown],
            colors=[b.color for b in breakdown],
            startangle=90,
        )
        ax.set_aspect("equal")
        self._pie_mpl.draw_idle()

    # ── Export ───────────────────────────────────────────────────────────────

    def _export_csv(self):
        if self._report is None:
            return
        path = filedialog.asksaveasfilename(
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv")],
            initialfile=export_filename(today()),
        )
        if not path:
            return
        rows = export_rows(self._report.transactions, self._categories, self._date_format)
        try:
            write_csv(path, rows)
        except OSError as e:
            logger.error("CSV export to %s failed: %s", path, e)
            self._on_error(f"Export failed: {e}")
            return
        logger.info("Exported %d transactions to CSV", len(rows) - 1)
