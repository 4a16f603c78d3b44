import customtkinter as ctk
from services.bill_service import BillOverview, bill_overview
from services.transaction_service import TransactionService
from ui.tabs.loading_tab import LoadingTab
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, WARNING_COLOR
from utils.currency import format_currency
from utils.date_helpers import format_display_date, today
from utils.errors import FinanceError


class BillsTab(LoadingTab):
    """Unpaid expenses with a due date, split into overdue and upcoming."""

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        notify_refresh,
        get_currency,
        date_format: str = "DD/MM/YYYY",
        on_error=None,
        **kwargs,
    ):
        super().__init__(master, on_error=on_error, **kwargs)
        self._tx_svc = tx_service
        self._notify_refresh = notify_refresh
        self._get_currency = get_currency
        self._date_format = date_format

        self.grid_columnconfigure((0, 1, 2), weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._cards = ctk.CTkFrame(self, fg_color="transparent")
        self._cards.grid(row=0, column=0, columnspan=3, sticky="ew", padx=16, pady=12)
        self._cards.grid_columnconfigure((0, 1, 2), weight=1)

        self._overdue_frame = ctk.CTkScrollableFrame(self, label_text="Overdue")
        self._overdue_frame.grid(row=1, column=0, sticky="nsew", padx=(16, 6), pady=(0, 12))
        self._upcoming_frame = ctk.CTkScrollableFrame(self, label_text="Upcoming")
        self._upcoming_frame.grid(row=1, column=1, sticky="nsew", padx=6, pady=(0, 12))
        self._paid_frame = ctk.CTkScrollableFrame(self, label_text="Paid This Month")
        self._paid_frame.grid(row=1, column=2, sticky="nsew", padx=(6, 16), pady=(0, 12))

        self.refresh()

    def _fetch(self):
        # no horizon: every future bill is listed here
        return bill_overview(self._tx_svc.list("expense"), today(), horizon_days=None)

    def _empty(self):
        return BillOverview()

    def _render(self, overview: BillOverview):
        currency = self._get_currency()

        for w in self._cards.winfo_children():
            w.destroy()
        for col, (label, count, amount, color) in enumerate([
            ("Overdue", len(overview.overdue), overview.overdue_amount, EXPENSE_COLOR),
            ("Upcoming", len(overview.upcoming), overview.upcoming_amount, WARNING_COLOR),
            ("Paid This Month", len(overview.paid), overview.paid_amount, INCOME_COLOR),
        ]):
            card = ctk.CTkFrame(self._cards, fg_color=("gray90", "gray20"), corner_radius=10)
            card.grid(row=0, column=col, padx=6, sticky="ew")
            card.grid_columnconfigure(0, weight=1)
            ctk.CTkLabel(card, text=f"{label} ({count})", text_color="gray60").grid(
                row=0, column=0, pady=(12, 0)
            )
            ctk.CTkLabel(
                card, text=format_currency(amount, currency),
                font=ctk.CTkFont(size=20, weight="bold"), text_color=color,
            ).grid(row=1, column=0, pady=(4, 12))

        for frame in (self._overdue_frame, self._upcoming_frame, self._paid_frame):
            for w in frame.winfo_children():
                w.destroy()

        if not overview.overdue:
            self._placeholder(self._overdue_frame, "No overdue bills.")
        for tx in overview.overdue:
            due = format_display_date(tx.due_date, self._date_format)
            self._bill_row(self._overdue_frame, tx, f"was due {due}", EXPENSE_COLOR, currency)

        if not overview.upcoming:
            self._placeholder(self._upcoming_frame, "No upcoming bills.")
        for bill in overview.upcoming:
            self._bill_row(
                self._upcoming_frame, bill.transaction, f"due {bill.due_label}",
                WARNING_COLOR if bill.days_until_due <= 1 else "gray60", currency,
            )

        if not overview.paid:
            self._placeholder(self._paid_frame, "Nothing paid this month.")
        for tx in overview.paid:
            paid_on = format_display_date(tx.transaction_date, self._date_format)
            self._bill_row(self._paid_frame, tx, f"paid {paid_on}", INCOME_COLOR, currency,
                           payable=False)

    def _placeholder(self, frame, text: str):
        ctk.CTkLabel(frame, text=text, text_color="gray60").pack(pady=20)

    def _bill_row(self, frame, tx, status: str, color, currency: str, payable: bool = True):
        row = ctk.CTkFrame(frame, fg_color=("gray92", "gray17"), corner_radius=6)
        row.pack(fill="x", pady=2, padx=2)
        row.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            row, text=tx.description or tx.category_name or "—",
            anchor="w", font=ctk.CTkFont(weight="bold"),
        ).grid(row=0, column=0, padx=8, pady=(6, 0), sticky="w")
        ctk.CTkLabel(
            row, text=format_currency(tx.amount, currency), anchor="e",
        ).grid(row=0, column=1, padx=8, pady=(6, 0), sticky="e")

        detail = status
        if tx.installment_label:
            detail += f" · {tx.installment_label}"
        ctk.CTkLabel(
            row, text=detail, text_color=color, anchor="w", font=ctk.CTkFont(size=11),
        ).grid(row=1, column=0, padx=8, pady=(0, 6), sticky="w")

        if payable:
            ctk.CTkButton(
                row, text="Mark Paid", width=80, height=24,
                fg_color=INCOME_COLOR, hover_color="#388E3C",
                command=lambda t=tx: self._mark_paid(t),
            ).grid(row=1, column=1, padx=8, pady=(0, 6), sticky="e")

    def _mark_paid(self, tx):
        try:
            self._tx_svc.mark_paid(tx.id)
        except FinanceError as e:
            self._on_error(str(e))
            return
        self._notify_refresh("transaction")
