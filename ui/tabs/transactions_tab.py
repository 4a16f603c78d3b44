import customtkinter as ctk
from services.category_service import CategoryService
from services.transaction_service import TransactionService
from models.transaction import Transaction
from ui.components.transaction_form import TransactionForm
from ui.components.confirm_dialog import ConfirmDialog
from ui.tabs.loading_tab import LoadingTab
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, INFO_COLOR, TYPE_LABELS, WARNING_COLOR
from utils.currency import format_currency, money_sum
from utils.date_helpers import format_display_date
from utils.errors import FinanceError


_MAX_RENDERED_ROWS = 100
_STATUS_FILTERS = {"All": None, "Paid": True, "Pending": False}


class TransactionsTab(LoadingTab):
    """The Income and Expenses tabs: one list per transaction type."""

    def __init__(
        self,
        master,
        type_: str,
        tx_service: TransactionService,
        category_service: CategoryService,
        notify_refresh,   # callable
        get_currency,     # callable → currency code
        date_format: str = "DD/MM/YYYY",
        on_error=None,
        **kwargs,
    ):
        super().__init__(master, on_error=on_error, **kwargs)
        self._type = type_
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._notify_refresh = notify_refresh
        self._get_currency = get_currency
        self._date_format = date_format
        self._status_var = ctk.StringVar(value="All")
        self._amount_color = INCOME_COLOR if type_ == "income" else EXPENSE_COLOR

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_filter_bar()
        self._build_header()
        self._build_list()
        self.refresh()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        bar.grid_columnconfigure(1, weight=1)

        ctk.CTkSegmentedButton(
            bar,
            values=list(_STATUS_FILTERS),
            variable=self._status_var,
            command=lambda _: self.refresh(),
            width=220,
        ).grid(row=0, column=0, padx=8, pady=6)

        self._total_label = ctk.CTkLabel(
            bar, text="", text_color=self._amount_color,
            font=ctk.CTkFont(weight="bold"), anchor="e",
        )
        self._total_label.grid(row=0, column=1, padx=8, sticky="e")

        ctk.CTkButton(
            bar, text=f"+ {TYPE_LABELS[self._type]}", width=110,
            command=self._open_add_form,
        ).grid(row=0, column=2, padx=(0, 8))

    # ── Column headers ───────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=1, column=0, sticky="ew", padx=8, pady=(4, 0))
        cols = [("✓", 30), ("Date", 85), ("Due", 85), ("Category", 140),
                ("Description", 200), ("", 150), ("Amount", 110), ("Actions", 100)]
        for i, (label, width) in enumerate(cols):
            ctk.CTkLabel(
                hdr, text=label, width=width, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

    # ── Data ─────────────────────────────────────────────────────────────────
    def _fetch(self):
        rows = self._tx_svc.list(self._type)
        wanted = _STATUS_FILTERS[self._status_var.get()]
        if wanted is not None:
            rows = [t for t in rows if t.is_paid == wanted]
        return rows

    def _empty(self):
        return []

    def _render(self, rows: list[Transaction]):
        for w in self._scroll.winfo_children():
            w.destroy()

        currency = self._get_currency()
        self._total_label.configure(
            text=f"Total: {format_currency(money_sum(t.amount for t in rows), currency)}"
        )

        if not rows:
            ctk.CTkLabel(
                self._scroll, text=f"No {self._type} recorded yet.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return

        for idx, tx in enumerate(rows[:_MAX_RENDERED_ROWS]):
            self._add_row(idx, tx, currency)

        if len(rows) > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {len(rows)} transactions. Use the filter to narrow results.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS, column=0, pady=8)

    def _add_row(self, idx: int, tx: Transaction, currency: str):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        paid_var = ctk.BooleanVar(value=tx.is_paid)
        ctk.CTkCheckBox(
            row, text="", variable=paid_var, width=30,
            command=lambda t=tx, v=paid_var: self._toggle_paid(t, v),
        ).grid(row=0, column=0, padx=(6, 0), pady=4)

        ctk.CTkLabel(
            row, text=format_display_date(tx.transaction_date, self._date_format),
            width=85, anchor="w",
        ).grid(row=0, column=1, padx=4, pady=4)
        ctk.CTkLabel(
            row, text=format_display_date(tx.due_date, self._date_format) or "—",
            width=85, anchor="w", text_color="gray60",
        ).grid(row=0, column=2, padx=4)

        # Category with its color
        cat = ctk.CTkFrame(row, fg_color="transparent", width=140)
        cat.grid(row=0, column=3, padx=4, sticky="w")
        if tx.category:
            ctk.CTkLabel(
                cat, text="", width=10, height=10, corner_radius=5,
                fg_color=tx.category.color,
            ).pack(side="left", padx=(0, 4))
        ctk.CTkLabel(cat, text=tx.category_name or "—", anchor="w").pack(side="left")

        ctk.CTkLabel(row, text=tx.description or "—", width=200, anchor="w").grid(
            row=0, column=4, padx=4
        )

        badges = ctk.CTkFrame(row, fg_color="transparent", width=150)
        badges.grid(row=0, column=5, padx=4, sticky="w")
        for text, color in self._badges(tx):
            ctk.CTkLabel(
                badges, text=text, text_color="white", fg_color=color,
                corner_radius=6, font=ctk.CTkFont(size=10), height=18,
            ).pack(side="left", padx=1)

        ctk.CTkLabel(
            row, text=format_currency(tx.amount, currency), width=110, anchor="e",
            text_color=self._amount_color,
        ).grid(row=0, column=6, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=7, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda t=tx: self._open_edit_form(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color=EXPENSE_COLOR, hover_color="#D32F2F",
            command=lambda t=tx: self._delete_tx(t),
        ).pack(side="left")

    @staticmethod
    def _badges(tx: Transaction) -> list[tuple[str, str]]:
        badges = []
        if tx.is_fixed:
            badges.append(("Fixed", "gray50"))
        if tx.is_recurring:
            badges.append((f"Recurring · {tx.recurring_interval or 'monthly'}", INFO_COLOR))
        if tx.installment_label:
            badges.append((tx.installment_label, WARNING_COLOR))
        return badges

    # ── Actions ──────────────────────────────────────────────────────────────
    def _toggle_paid(self, tx: Transaction, var: ctk.BooleanVar):
        try:
            self._tx_svc.set_paid(tx.id, var.get())
        except FinanceError as e:
            var.set(tx.is_paid)
            self._on_error(str(e))
            return
        self._notify_refresh("transaction")

    def _open_add_form(self):
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc, self._cat_svc,
            initial_type=self._type,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _open_edit_form(self, tx: Transaction):
        form = TransactionForm(
            self.winfo_toplevel(), self._tx_svc, self._cat_svc,
            transaction=tx,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _delete_tx(self, tx: Transaction):
        extra = (
            f"\n\nOnly installment {tx.installment_label} is deleted; the others stay."
            if tx.installment_label else ""
        )
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            f"Delete {TYPE_LABELS[tx.type]}",
            f"Delete this {tx.type} of {format_currency(tx.amount, self._get_currency())}?{extra}",
        )
        if not dlg.result:
            return
        try:
            self._tx_svc.delete(tx.id)
        except FinanceError as e:
            self._on_error(str(e))
            return
        self._notify_refresh("transaction")
