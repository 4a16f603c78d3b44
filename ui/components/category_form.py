import customtkinter as ctk
import tkinter as tk
from tkinter import colorchooser
from services.category_service import CategoryService
from models.category import Category
from utils.constants import DEFAULT_CATEGORY_COLOR, PRESET_COLORS, TYPE_LABELS
from utils.errors import FinanceError


class CategoryForm(ctk.CTkToplevel):
    """Add or edit a category."""

    _SWATCHES_PER_ROW = 8

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        initial_type: str = "expense",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0

        # Name
        ctk.CTkLabel(self, text="Name:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=category.name if category else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        # Type
        ctk.CTkLabel(self, text="Type:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        current_type = category.type if category else initial_type
        self._type_var = ctk.StringVar(value=TYPE_LABELS[current_type])
        ctk.CTkSegmentedButton(
            self, values=list(TYPE_LABELS.values()), variable=self._type_var,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Color: preset palette plus a custom picker
        ctk.CTkLabel(self, text="Color:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="ne"
        )
        color_box = ctk.CTkFrame(self, fg_color="transparent")
        color_box.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")

        palette = ctk.CTkFrame(color_box, fg_color="transparent")
        palette.pack(anchor="w")
        for i, hex_ in enumerate(PRESET_COLORS):
            ctk.CTkButton(
                palette, text="", width=24, height=24, corner_radius=12,
                fg_color=hex_, hover_color=hex_,
                command=lambda c=hex_: self._set_color(c),
            ).grid(row=i // self._SWATCHES_PER_ROW, column=i % self._SWATCHES_PER_ROW,
                   padx=2, pady=2)

        custom_row = ctk.CTkFrame(color_box, fg_color="transparent")
        custom_row.pack(anchor="w", pady=(6, 0))
        self._color_var = ctk.StringVar(
            value=category.color if category else DEFAULT_CATEGORY_COLOR
        )
        self._color_entry = ctk.CTkEntry(custom_row, textvariable=self._color_var, width=100)
        self._color_entry.pack(side="left")
        self._color_entry.bind("<FocusOut>", self._sync_swatch)

        self._swatch = ctk.CTkLabel(
            custom_row, text="", width=32, height=24, corner_radius=4,
            fg_color=self._color_var.get(),
        )
        self._swatch.pack(side="left", padx=(8, 0))

        ctk.CTkButton(
            custom_row, text="Pick", width=60,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._pick_color,
        ).pack(side="left", padx=(8, 0))
        r += 1

        # Error
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=320, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        # Buttons
        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _set_color(self, hex_: str):
        self._color_var.set(hex_)
        self._swatch.configure(fg_color=hex_)

    def _pick_color(self):
        result = colorchooser.askcolor(
            color=self._color_var.get(), parent=self, title="Pick Category Color"
        )
        if result and result[1]:
            self._set_color(result[1].upper())

    def _sync_swatch(self, _event=None):
        color = self._color_var.get().strip()
        if len(color) == 7 and color.startswith("#"):
            try:
                self._swatch.configure(fg_color=color)
            except tk.TclError:
                self._error_var.set(f"'{color}' is not a color.")

    def _selected_type(self) -> str:
        label = self._type_var.get()
        return next(k for k, v in TYPE_LABELS.items() if v == label)

    def _on_save(self):
        name = self._name_var.get().strip()
        color = self._color_var.get().strip()
        if color and not color.startswith("#"):
            color = "#" + color
        try:
            if self._category:
                self._svc.update(self._category.id, name, self._selected_type(), color)
            else:
                self._svc.create(name, self._selected_type(), color)
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
