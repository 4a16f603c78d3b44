import customtkinter as ctk
from services.category_service import CategoryService
from services.transaction_service import TransactionService
from models.transaction import Transaction, TransactionDraft
from ui.components.date_picker import DatePickerWidget
from utils.constants import (
    INSTALLMENT_MAX, INSTALLMENT_MIN, RECURRING_INTERVALS, TYPE_LABELS, UNCATEGORIZED_NAME,
)
from utils.currency import to_money
from utils.date_helpers import today
from utils.errors import FinanceError


def parse_amount(raw: str):
    """'1234.5', '1234,50' -> Decimal. Raises ValueError."""
    raw = raw.strip()
    if "," in raw and "." not in raw:
        raw = raw.replace(",", ".")
    return to_money(raw)


class TransactionForm(ctk.CTkToplevel):
    """Add or edit an income/expense.

    Create mode can repeat the row over monthly installments;
    edit mode changes one row and leaves installment data alone.
    """

    _last_date = today()  # reset to today on each app launch

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        category_service: CategoryService,
        initial_type: str = "expense",
        transaction: Transaction | None = None,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._transaction = transaction
        self._date_format = date_format
        self.saved = False

        tx = transaction
        type_ = tx.type if tx else initial_type
        self.title(f"{'Edit' if tx else 'New'} {TYPE_LABELS[type_]}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0

        # Type
        self._label("Type:", r)
        self._type_var = ctk.StringVar(value=TYPE_LABELS[type_])
        ctk.CTkSegmentedButton(
            self, values=list(TYPE_LABELS.values()),
            variable=self._type_var,
            command=lambda _: self._on_type_change(),
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Description
        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=tx.description if tx else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Amount
        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{tx.amount:.2f}" if tx else "")
        ctk.CTkEntry(
            self, textvariable=self._amount_var, width=220, placeholder_text="0.00",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Date
        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self,
            initial_date=tx.transaction_date if tx else TransactionForm._last_date,
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Due date (optional)
        self._label("Due date:", r)
        self._due_picker = DatePickerWidget(
            self,
            initial_date=tx.due_date if tx else None,
            date_format=date_format,
            allow_empty=True,
        )
        self._due_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Category: only categories of the selected type are offered
        self._label("Category:", r)
        self._cat_var = ctk.StringVar()
        self._cat_combo = ctk.CTkComboBox(
            self, values=[], variable=self._cat_var, width=220, state="readonly"
        )
        self._cat_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._load_categories(select_id=tx.category_id if tx else None)
        r += 1

        # Flags
        self._label("Options:", r)
        flags = ctk.CTkFrame(self, fg_color="transparent")
        flags.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        self._paid_var = ctk.BooleanVar(value=tx.is_paid if tx else True)
        self._fixed_var = ctk.BooleanVar(value=tx.is_fixed if tx else False)
        ctk.CTkCheckBox(flags, text="Paid", variable=self._paid_var).pack(side="left", padx=(0, 8))
        ctk.CTkCheckBox(flags, text="Fixed", variable=self._fixed_var).pack(side="left")
        r += 1

        # Recurring
        self._label("Recurring:", r)
        rec = ctk.CTkFrame(self, fg_color="transparent")
        rec.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        self._recurring_var = ctk.BooleanVar(value=tx.is_recurring if tx else False)
        ctk.CTkCheckBox(
            rec, text="", width=24, variable=self._recurring_var,
            command=self._sync_enabled,
        ).pack(side="left")
        self._interval_var = ctk.StringVar(
            value=(tx.recurring_interval if tx and tx.recurring_interval else "monthly")
        )
        self._interval_combo = ctk.CTkComboBox(
            rec, values=list(RECURRING_INTERVALS), variable=self._interval_var,
            width=120, state="readonly",
        )
        self._interval_combo.pack(side="left", padx=(4, 0))
        r += 1

        # Installments: chosen at creation only
        self._label("Installments:", r)
        inst = ctk.CTkFrame(self, fg_color="transparent")
        inst.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        self._installment_var = ctk.BooleanVar(value=False)
        self._count_var = ctk.StringVar(value=str(INSTALLMENT_MIN))
        if tx is None:
            ctk.CTkCheckBox(
                inst, text="", width=24, variable=self._installment_var,
                command=self._sync_enabled,
            ).pack(side="left")
            self._count_entry = ctk.CTkEntry(inst, textvariable=self._count_var, width=60)
            self._count_entry.pack(side="left", padx=(4, 4))
            ctk.CTkLabel(
                inst, text=f"months ({INSTALLMENT_MIN}-{INSTALLMENT_MAX})", text_color="gray60",
            ).pack(side="left")
        else:
            self._count_entry = None
            ctk.CTkLabel(
                inst, text=tx.installment_label or "—", text_color="gray60",
            ).pack(side="left")
        r += 1

        # Error
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(
            btn_frame, text="Save", width=110, command=self._on_save,
        ).pack(side="right")

        self._sync_enabled()
        self.transient(master)
        self.grab_set()
        self._center()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _selected_type(self) -> str:
        label = self._type_var.get()
        return next(k for k, v in TYPE_LABELS.items() if v == label)

    def _load_categories(self, select_id: int | None = None):
        self._cats = self._cat_svc.list(self._selected_type())
        names = [UNCATEGORIZED_NAME] + [c.name for c in self._cats]
        self._cat_combo.configure(values=names)
        selected = next((c.name for c in self._cats if c.id == select_id), UNCATEGORIZED_NAME)
        self._cat_var.set(selected)
        self._cat_combo.set(selected)

    def _on_type_change(self):
        self._load_categories()

    def _sync_enabled(self):
        self._interval_combo.configure(
            state="readonly" if self._recurring_var.get() else "disabled"
        )
        if self._count_entry is not None:
            self._count_entry.configure(
                state="normal" if self._installment_var.get() else "disabled"
            )

    def _selected_category_id(self) -> int | None:
        name = self._cat_var.get()
        cat = next((c for c in self._cats if c.name == name), None)
        return cat.id if cat else None

    def _on_save(self):
        try:
            amount = parse_amount(self._amount_var.get())
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return
        if not self._due_picker.is_valid():
            self._error_var.set("Invalid due date.")
            return

        is_recurring = self._recurring_var.get()
        fields = dict(
            type=self._selected_type(),
            amount=amount,
            transaction_date=self._date_picker.get_date(),
            description=self._desc_var.get().strip(),
            due_date=self._due_picker.get_date(),
            category_id=self._selected_category_id(),
            is_paid=self._paid_var.get(),
            is_fixed=self._fixed_var.get(),
            is_recurring=is_recurring,
            recurring_interval=self._interval_var.get() if is_recurring else None,
        )

        try:
            if self._transaction:
                self._tx_svc.update(self._transaction.id, **fields)
            else:
                count = None
                if self._installment_var.get():
                    try:
                        count = int(self._count_var.get().strip())
                    except ValueError:
                        self._error_var.set("Installment count must be a whole number.")
                        return
                self._tx_svc.create(TransactionDraft(
                    **fields,
                    is_installment=count is not None,
                    installment_count=count,
                ))
            TransactionForm._last_date = fields["transaction_date"]
            self.saved = True
            self.destroy()
        except FinanceError as e:
            self._error_var.set(str(e))

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
