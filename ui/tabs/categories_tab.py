import customtkinter as ctk
from models.category import Category
from services.category_service import CategoryService
from ui.components.category_form import CategoryForm
from ui.components.confirm_dialog import ConfirmDialog
from ui.tabs.loading_tab import LoadingTab
from utils.constants import EXPENSE_COLOR, INCOME_COLOR, TYPE_LABELS
from utils.errors import FinanceError


class CategoriesTab(LoadingTab):
    def __init__(
        self,
        master,
        category_service: CategoryService,
        notify_refresh,
        on_error=None,
        **kwargs,
    ):
        super().__init__(master, on_error=on_error, **kwargs)
        self._svc = category_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure((0, 1), weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._lists = {}
        for col, (type_, color) in enumerate((("income", INCOME_COLOR), ("expense", EXPENSE_COLOR))):
            self._lists[type_] = self._build_column(col, type_, color)
        self.refresh()

    def _build_column(self, col: int, type_: str, color: str) -> ctk.CTkScrollableFrame:
        outer = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        outer.grid(row=0, column=col, sticky="nsew", padx=8, pady=8)
        outer.grid_columnconfigure(0, weight=1)
        outer.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(outer, fg_color="transparent")
        bar.grid(row=0, column=0, sticky="ew")
        ctk.CTkLabel(
            bar, text=f"{TYPE_LABELS[type_]} Categories", text_color=color,
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)
        ctk.CTkButton(
            bar, text="+ Add", width=70, command=lambda: self._open_add(type_),
        ).pack(side="right", padx=8, pady=6)

        scroll = ctk.CTkScrollableFrame(outer, fg_color="transparent")
        scroll.grid(row=1, column=0, sticky="nsew", padx=4, pady=(0, 8))
        scroll.grid_columnconfigure(0, weight=1)
        return scroll

    def _fetch(self):
        return self._svc.list()

    def _empty(self):
        return []

    def _render(self, categories: list[Category]):
        for type_, scroll in self._lists.items():
            for w in scroll.winfo_children():
                w.destroy()
            rows = [c for c in categories if c.type == type_]
            if not rows:
                ctk.CTkLabel(
                    scroll, text="No categories yet.", text_color="gray60",
                ).grid(row=0, column=0, pady=40)
            for idx, cat in enumerate(rows):
                self._add_row(scroll, idx, cat)

    def _add_row(self, scroll, idx, cat: Category):
        row = ctk.CTkFrame(scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row, text="", width=28, height=28, corner_radius=4,
            fg_color=cat.color,
        ).grid(row=0, column=0, padx=(10, 0), pady=8)
        ctk.CTkLabel(
            row, text=cat.name,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=1, padx=8, sticky="w")

        btn_frame = ctk.CTkFrame(row, fg_color="transparent")
        btn_frame.grid(row=0, column=2, padx=(4, 10), pady=6)
        ctk.CTkButton(
            btn_frame, text="Edit", width=60, height=26,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=cat: self._open_edit(c),
        ).pack(side="left", padx=(0, 4))
        ctk.CTkButton(
            btn_frame, text="Delete", width=65, height=26,
            fg_color=EXPENSE_COLOR, hover_color="#D32F2F",
            command=lambda c=cat: self._on_delete(c),
        ).pack(side="left")

    def _open_add(self, type_: str):
        form = CategoryForm(self.winfo_toplevel(), self._svc, initial_type=type_)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _open_edit(self, cat: Category):
        form = CategoryForm(self.winfo_toplevel(), self._svc, category=cat)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _on_delete(self, cat: Category):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Category",
            message=f"Delete '{cat.name}'? Its transactions are kept and become uncategorized.",
        )
        if not dlg.result:
            return
        try:
            self._svc.delete(cat.id)
        except FinanceError as e:
            self._on_error(str(e))
            return
        self._notify_refresh("category")
