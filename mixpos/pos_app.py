"""Main Textual app class."""

from __future__ import annotations

import logging
from typing import Callable

from textual.app import App
from textual.binding import Binding
from textual.screen import ModalScreen, Screen

from mixpos.context import AppContext
from mixpos.dashboard_screen import DashboardScreen
from mixpos.kitchen_board_screen import KitchenBoardScreen
from mixpos.table_grid_screen import TableGridScreen

logger = logging.getLogger(__name__)


class PosApp(App):
    """Table service point-of-sale: tables, kitchen board and sales."""

    TITLE = "Mix Foods"
    SUB_TITLE = "Connecting…"

    BINDINGS = [
        Binding("f1", "show_tables", "Tables", priority=True),
        Binding("f2", "show_kitchen", "Kitchen", priority=True),
        Binding("f3", "show_dashboard", "Sales", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, ctx: AppContext) -> None:
        super().__init__()
        self.ctx = ctx
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self.push_screen(TableGridScreen(self.ctx))
        self._unsubscribe = self.ctx.store.subscribe(self._refresh_connection)
        await self.ctx.store.start()
        self._refresh_connection()
        logger.info("Store ready: %d tables, %d orders", len(self.ctx.store.tables), len(self.ctx.store.orders))

    async def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.ctx.store.stop()

    def connection_label(self) -> str:
        return "Online" if self.ctx.store.is_cloud_active() else "Offline"

    def _refresh_connection(self) -> None:
        self.sub_title = self.connection_label()

    def action_show_tables(self) -> None:
        self._show(TableGridScreen(self.ctx))

    def action_show_kitchen(self) -> None:
        self._show(KitchenBoardScreen(self.ctx))

    def action_show_dashboard(self) -> None:
        self._show(DashboardScreen(self.ctx))

    def _show(self, screen: Screen) -> None:
        # While a modal is active, let the modal own keyboard handling.
        if isinstance(self.screen, ModalScreen):
            return
        if getattr(self.screen, "busy", False):
            return
        self.switch_screen(screen)
