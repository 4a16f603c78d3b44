import customtkinter as ctk
from services.transaction_service import TransactionService
from services.bill_service import expense_bills_due
from services.report_service import summarize
from ui.tabs.loading_tab import LoadingTab
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, INFO_COLOR, WARNING_COLOR
from utils.currency import format_currency, format_signed
from utils.date_helpers import (
    current_month_str, format_display_date, friendly_month, month_window,
    next_month, prev_month, today,
)

_RECENT_ROWS = 8


class DashboardTab(LoadingTab):
    def __init__(
        self,
        master,
        tx_service: TransactionService,
        get_currency,     # callable → 'BRL' | 'USD' | 'EUR'
        date_format: str = "DD/MM/YYYY",
        on_error=None,
        **kwargs,
    ):
        super().__init__(master, on_error=on_error, **kwargs)
        self._tx_svc = tx_service
        self._get_currency = get_currency
        self._date_format = date_format
        self._month = current_month_str()
        self._month_var = ctk.StringVar(value=friendly_month(self._month))

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_month_nav()
        self._build_summary_cards()
        self._build_savings_bar()
        self._build_bottom_section()
        self.refresh()

    def _build_month_nav(self):
        nav = ctk.CTkFrame(self, fg_color="transparent")
        nav.grid(row=0, column=0, sticky="ew", padx=16, pady=(12, 0))
        ctk.CTkButton(nav, text="◀", width=28, command=self._prev_month).pack(side="left")
        ctk.CTkLabel(
            nav, textvariable=self._month_var,
            font=ctk.CTkFont(size=15, weight="bold"), width=150, anchor="center"
        ).pack(side="left", padx=8)
        ctk.CTkButton(nav, text="▶", width=28, command=self._next_month).pack(side="left")

    def _prev_month(self):
        self._month = prev_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self.refresh()

    def _next_month(self):
        self._month = next_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self.refresh()

    def _build_summary_cards(self):
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=12)
        self._card_frame.grid_columnconfigure((0, 1, 2, 3), weight=1)

    def _build_savings_bar(self):
        box = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=10)
        box.grid(row=2, column=0, sticky="ew", padx=22, pady=(0, 12))
        box.grid_columnconfigure(1, weight=1)
        ctk.CTkLabel(box, text="Savings rate", text_color="gray60").grid(
            row=0, column=0, padx=16, pady=10
        )
        self._savings_bar = ctk.CTkProgressBar(box)
        self._savings_bar.grid(row=0, column=1, sticky="ew", padx=8)
        self._savings_label = ctk.CTkLabel(
            box, text="0.0%", width=70, font=ctk.CTkFont(weight="bold"),
        )
        self._savings_label.grid(row=0, column=2, padx=16)

    def _build_bottom_section(self):
        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.grid(row=3, column=0, sticky="nsew", padx=16, pady=(0, 12))
        bottom.grid_columnconfigure((0, 1), weight=1)
        bottom.grid_rowconfigure(0, weight=1)

        self._recent_frame = ctk.CTkScrollableFrame(
            bottom, label_text="Recent Transactions", height=240
        )
        self._recent_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 8))

        self._bills_frame = ctk.CTkScrollableFrame(
            bottom, label_text="Bills (overdue and next 7 days)", height=240
        )
        self._bills_frame.grid(row=0, column=1, sticky="nsew", padx=(8, 0))

    # ── Data ─────────────────────────────────────────────────────────────────

    def _fetch(self):
        return self._tx_svc.list()

    def _empty(self):
        return []

    def _render(self, transactions):
        ref = today()
        start, end = month_window(self._month)
        summary = summarize(transactions, start, end)
        currency = self._get_currency()

        for w in self._card_frame.winfo_children():
            w.destroy()
        cards = [
            ("Income", format_currency(summary.total_income, currency), INCOME_COLOR),
            ("Expenses", format_currency(summary.total_expenses, currency), EXPENSE_COLOR),
            ("Balance", format_signed(summary.balance, currency),
             INFO_COLOR if summary.balance >= 0 else WARNING_COLOR),
            (f"Bills ({summary.upcoming_bills_count})",
             format_currency(summary.upcoming_bills_amount, currency), WARNING_COLOR),
        ]
        for i, (label, text, color) in enumerate(cards):
            self._make_card(self._card_frame, i, label, text, color)

        rate = float(summary.savings_rate)
        self._savings_bar.set(max(0.0, min(rate / 100, 1.0)))
        self._savings_bar.configure(progress_color=INCOME_COLOR if rate >= 0 else EXPENSE_COLOR)
        self._savings_label.configure(text=f"{summary.savings_rate}%")

        # Recent transactions in the selected month
        for w in self._recent_frame.winfo_children():
            w.destroy()
        in_month = [t for t in transactions if start <= t.transaction_date < end]
        if not in_month:
            ctk.CTkLabel(
                self._recent_frame, text="No transactions this month.", text_color="gray60",
            ).pack(pady=20)
        for idx, tx in enumerate(in_month[:_RECENT_ROWS]):
            bg = ("gray90", "gray20") if idx % 2 == 0 else ("gray86", "gray24")
            f = ctk.CTkFrame(self._recent_frame, fg_color=bg, corner_radius=4)
            f.pack(fill="x", pady=1)
            f.grid_columnconfigure(1, weight=1)
            is_income = tx.type == "income"
            ctk.CTkLabel(
                f, text=format_display_date(tx.transaction_date, self._date_format),
                width=85, anchor="w",
            ).grid(row=0, column=0, padx=6, pady=3)
            ctk.CTkLabel(f, text=tx.description or tx.category_name or "—", anchor="w").grid(
                row=0, column=1, padx=4, sticky="ew"
            )
            ctk.CTkLabel(
                f, text=f"{'+' if is_income else '-'}{format_currency(tx.amount, currency)}",
                text_color=INCOME_COLOR if is_income else EXPENSE_COLOR,
                anchor="e", width=110,
            ).grid(row=0, column=2, padx=6)

        # Overdue first, then the 7-day horizon
        for w in self._bills_frame.winfo_children():
            w.destroy()
        overdue, upcoming = expense_bills_due(transactions, ref)
        if not overdue and not upcoming:
            ctk.CTkLabel(
                self._bills_frame, text="Nothing due.", text_color="gray60",
            ).pack(pady=20)
        for tx in overdue:
            self._bill_row(tx, "overdue", EXPENSE_COLOR, currency)
        for bill in upcoming:
            self._bill_row(
                bill.transaction, f"due {bill.due_label}",
                WARNING_COLOR if bill.days_until_due <= 1 else INFO_COLOR, currency,
            )

    def _bill_row(self, tx, status: str, color: str, currency: str):
        f = ctk.CTkFrame(self._bills_frame, fg_color="transparent")
        f.pack(fill="x", pady=2, padx=4)
        f.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(f, text=tx.description or tx.category_name or "—", anchor="w").grid(
            row=0, column=0, sticky="w"
        )
        ctk.CTkLabel(f, text=status, text_color=color, width=90).grid(row=0, column=1)
        ctk.CTkLabel(
            f, text=format_currency(tx.amount, currency), anchor="e", width=100,
        ).grid(row=0, column=2)

    def _make_card(self, parent, col, label, text, color):
        card = ctk.CTkFrame(parent, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=col, padx=6, sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            card, text=label, font=ctk.CTkFont(size=12),
            text_color="gray60",
        ).grid(row=0, column=0, pady=(12, 0), padx=16)
        ctk.CTkLabel(
            card,
            text=text,
            font=ctk.CTkFont(size=20, weight="bold"),
            text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)
