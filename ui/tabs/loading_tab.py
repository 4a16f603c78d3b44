import logging

import customtkinter as ctk

from utils.errors import PersistenceError

logger = logging.getLogger(__name__)


class LoadingTab(ctk.CTkFrame):
    """Base for tabs that fetch on the Tk loop.

    refresh() schedules _fetch() with after_idle instead of running it inline,
    so building the window never blocks on a query. A generation counter drops
    results a newer refresh has superseded, and destroy() cancels a pending
    fetch so nothing renders into a dead widget.
    """

    def __init__(self, master, on_error=None, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._on_error = on_error or (lambda _msg: None)
        self._load_gen = 0
        self._load_job = None

    def refresh(self):
        if self._load_job is not None:
            self.after_cancel(self._load_job)
        self._load_gen += 1
        gen = self._load_gen
        self._load_job = self.after_idle(lambda: self._run_load(gen))

    def destroy(self):
        if self._load_job is not None:
            self.after_cancel(self._load_job)
            self._load_job = None
        self._load_gen += 1
        super().destroy()

    def _run_load(self, gen: int):
        self._load_job = None
        if gen != self._load_gen or not self.winfo_exists():
            return  # superseded by a newer load
        try:
            data = self._fetch()
        except PersistenceError as e:
            logger.error("%s failed to load: %s", type(self).__name__, e)
            self._on_error(f"Could not load data: {e}")
            data = self._empty()
        self._render(data)

    # ── Overridden by tabs ───────────────────────────────────────────────────

    def _fetch(self):
        raise NotImplementedError

    def _empty(self):
        return None

    def _render(self, data):
        raise NotImplementedError
