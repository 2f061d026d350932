from __future__ import annotations

from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

import pygame

from unbox.cases.items import Item
from unbox.cases.reveal import RollPlan
from unbox.cases.selector import item_odds, unique_items
from unbox.config import ITEM_WIDTH, ROLLER_VIEWPORT_WIDTH
from unbox.core.events import (
    CASE_SELECTED,
    CATALOG_LOADED,
    COLLECTION_CHANGED,
    ROLL_CANCELLED,
    ROLL_REVEALED,
    ROLL_STARTED,
)
from unbox.core.scene import Scene
from unbox.ui.effects import draw_glow_border
from unbox.ui.widgets import Button, ItemList, Panel

if TYPE_CHECKING:
    from unbox.core.app import UnboxApp


class CaseScene(Scene):
    """Case picker, roller strip, odds list and collection."""

    def __init__(self, app: "UnboxApp") -> None:
        super().__init__(app)
        self.session = app.session
        self.case_buttons: list[Button] = []
        self.strip: list[Item] = []
        self.plan: RollPlan | None = None
        self.landed = False
        self.result_text = ""
        self._watched_sync: Future | None = None
        self.layout()
        events = self.session.events
        events.on(CATALOG_LOADED, self._on_catalog_loaded)
        events.on(CASE_SELECTED, self._on_case_selected)
        events.on(ROLL_STARTED, self._on_roll_started)
        events.on(ROLL_REVEALED, self._on_roll_revealed)
        events.on(ROLL_CANCELLED, self._on_roll_cancelled)
        events.on(COLLECTION_CHANGED, self._on_collection_changed)

    # --- layout -----------------------------------------------------------

    def layout(self) -> None:
        sw, sh = self.app.screen.get_size()
        pad = 12
        self.cases_panel = Panel(pygame.Rect(pad, pad, sw - pad * 2, 92), "Cases")
        roller_w = min(ROLLER_VIEWPORT_WIDTH, sw - pad * 2 - 8)
        self.roller_panel = Panel(pygame.Rect(pad, 116, sw - pad * 2, 236), "Case Opening")
        body = self.roller_panel.body()
        self.roller = pygame.Rect(body.centerx - roller_w // 2, body.y + 8, roller_w, 150)
        self.open_button = Button(pygame.Rect(body.x + 8, self.roller.bottom + 12, 160, 30), "Open Case", self._open_case)
        bottom_y = self.roller_panel.rect.bottom + pad
        half = (sw - pad * 3) // 2
        self.odds_panel = Panel(pygame.Rect(pad, bottom_y, half, sh - bottom_y - pad), "Available Items")
        self.collection_panel = Panel(pygame.Rect(pad * 2 + half, bottom_y, half, sh - bottom_y - pad), "Inventory")
        odds_body = self.odds_panel.body()
        self.odds_list = ItemList(pygame.Rect(odds_body.x, odds_body.y + 40, odds_body.width, odds_body.height - 40))
        inv_body = self.collection_panel.body()
        self.collection_list = ItemList(pygame.Rect(inv_body.x, inv_body.y, inv_body.width, inv_body.height - 40))
        self.delete_button = Button(
            pygame.Rect(inv_body.x, inv_body.bottom - 32, 160, 30), "Delete Item", self._delete_selected
        )
        self._build_case_buttons()
        self._refresh_odds()
        self._refresh_collection()

    def _build_case_buttons(self) -> None:
        body = self.cases_panel.body()
        self.case_buttons = []
        x = body.x + 4
        for case in self.session.catalog.ordered():
            btn = Button(pygame.Rect(x, body.y + 8, 150, 44), case.name, lambda cid=case.case_id: self.session.select_case(cid))
            btn.selected = case.case_id == self.session.current_case_id
            self.case_buttons.append(btn)
            x += 158

    def _refresh_odds(self) -> None:
        pool = self.session.current_pool()
        odds = dict((item.name, chance) for item, chance in item_odds(pool))
        rows = [
            (f"{item.name}  |  {item.rarity.name}  |  {odds.get(item.name, 0.0) * 100:0.1f}%", item.rarity.color)
            for item in unique_items(pool)
        ]
        self.odds_list.set_rows(rows)

    def _refresh_collection(self) -> None:
        rows = [(f"{item.name}  ({item.rarity.name})", item.rarity.color) for item in self.session.collection.list()]
        self.collection_list.set_rows(rows)

    # --- session events ---------------------------------------------------

    def _on_catalog_loaded(self, payload: dict[str, Any]) -> None:
        _ = payload
        self.strip = []
        self.plan = None
        self.result_text = ""
        self._build_case_buttons()

    def _on_case_selected(self, payload: dict[str, Any]) -> None:
        _ = payload
        for btn, case in zip(self.case_buttons, self.session.catalog.ordered()):
            btn.selected = case.case_id == self.session.current_case_id
        self.plan = None
        self.landed = False
        self.result_text = ""
        self.strip = self.session.engine.preview(self.session.current_pool())
        self._refresh_odds()

    def _on_roll_started(self, payload: dict[str, Any]) -> None:
        self.plan = payload["plan"]
        self.strip = list(self.plan.filler)
        self.landed = False
        self.result_text = "Rolling..."

    def _on_roll_revealed(self, payload: dict[str, Any]) -> None:
        item: Item = payload["item"]
        self.landed = True
        self.result_text = f"Unboxed: {item.name}"
        self.toasts.push(f"{item.name} ({item.rarity.name})", color=item.rarity.color)
        if item.description:
            self.toasts.push(item.description, ttl=5.0)
        self._watched_sync = self.session.last_sync

    def _on_roll_cancelled(self, payload: dict[str, Any]) -> None:
        _ = payload
        self.plan = None
        self.result_text = ""

    def _on_collection_changed(self, payload: dict[str, Any]) -> None:
        _ = payload
        self._refresh_collection()

    # --- actions ------------------------------------------------------------

    def _open_case(self) -> None:
        self.session.open_case(viewport_width=self.roller.width)

    def _delete_selected(self) -> None:
        idx = self.collection_list.selected
        if idx is None:
            return
        self.session.delete_item(idx)
        self.collection_list.selected = None
        self._watched_sync = self.session.last_sync

    # --- loop ---------------------------------------------------------------

    def handle_event(self, event: pygame.event.Event) -> None:
        super().handle_event(event)
        if self.app.input_map.is_action(event, "open"):
            self._open_case()
        elif self.app.input_map.is_action(event, "delete"):
            self._delete_selected()
        for btn in self.case_buttons:
            btn.handle_event(event)
        self.open_button.handle_event(event)
        self.delete_button.handle_event(event)
        self.odds_list.handle_event(event)
        self.collection_list.handle_event(event)

    def update(self, dt: float) -> None:
        super().update(dt)
        rolling = self.session.rolling
        self.open_button.enabled = not rolling and bool(self.session.current_pool())
        for btn in self.case_buttons:
            btn.enabled = not rolling
        self.delete_button.enabled = self.collection_list.selected is not None
        sync = self._watched_sync
        if sync is not None and sync.done():
            self._watched_sync = None
            if sync.exception() is not None or sync.result() is False:
                self.toasts.push("Inventory not synced; kept locally.", color=self.theme.colors.danger)

    def selected_item(self) -> Item | None:
        idx = self.collection_list.selected
        items = self.session.collection.list()
        if idx is None or not 0 <= idx < len(items):
            return None
        return items[idx]

    def _strip_left(self) -> float:
        # Screen x of slot 0; the viewport the plan was computed for stays centred on the marker.
        viewport = self.plan.viewport_width if self.plan is not None else self.roller.width
        return self.roller.centerx - viewport / 2

    def marker_slot(self) -> int:
        """Index of the strip slot under the centre marker right now."""
        return int((self.roller.centerx - self._strip_left() + self._strip_offset()) // ITEM_WIDTH)

    def _strip_offset(self) -> float:
        if self.plan is None:
            return 0.0
        if self.landed:
            return self.plan.travel_distance
        elapsed = self.session.scheduler.now_ms - self.plan.started_ms
        return self.plan.offset_at(elapsed)

    def draw(self, surface: pygame.Surface) -> None:
        super().draw(surface)
        c = self.theme.colors
        self.cases_panel.draw(surface, self.theme)
        if not self.case_buttons:
            msg = self.theme.render_text(
                self.theme.font_small, "No cases available. Log in from the console (`) to load cases.", c.muted
            )
            surface.blit(msg, (self.cases_panel.body().x + 8, self.cases_panel.body().y + 20))
        for btn in self.case_buttons:
            btn.draw(surface, self.theme)
        self.roller_panel.draw(surface, self.theme)
        self._draw_strip(surface)
        self.open_button.draw(surface, self.theme)
        result = self.theme.render_text(self.theme.font, self.result_text, c.text)
        surface.blit(result, (self.open_button.rect.right + 16, self.open_button.rect.y + 5))
        self.odds_panel.draw(surface, self.theme)
        self._draw_case_description(surface)
        self.odds_list.draw(surface, self.theme)
        self.collection_panel.draw(surface, self.theme)
        if not self.collection_list.rows:
            empty = self.theme.render_text(self.theme.font_small, "Your inventory is empty.", c.muted)
            surface.blit(empty, (self.collection_list.rect.x + 8, self.collection_list.rect.y + 8))
        else:
            self.collection_list.draw(surface, self.theme)
        self.delete_button.draw(surface, self.theme)
        self._draw_selected_detail(surface)
        self.draw_overlays(surface)

    def _draw_selected_detail(self, surface: pygame.Surface) -> None:
        item = self.selected_item()
        if item is None:
            return
        x = self.delete_button.rect.right + 12
        width = self.collection_panel.body().right - x - 4
        text = f"{item.name}: {item.description}" if item.description else item.name
        line = self.theme.fit_text(self.theme.font_small, text, width)
        surface.blit(self.theme.render_text(self.theme.font_small, line, item.rarity.color), (x, self.delete_button.rect.y + 7))

    def _draw_case_description(self, surface: pygame.Surface) -> None:
        case = self.session.current_case()
        if case is None:
            return
        body = self.odds_panel.body()
        name = self.theme.render_text(self.theme.font, case.name, self.theme.colors.text)
        surface.blit(name, (body.x + 4, body.y + 2))
        if case.description:
            desc = self.theme.fit_text(self.theme.font_small, case.description, body.width - 8)
            surface.blit(self.theme.render_text(self.theme.font_small, desc, self.theme.colors.muted), (body.x + 4, body.y + 22))

    def _draw_strip(self, surface: pygame.Surface) -> None:
        c = self.theme.colors
        pygame.draw.rect(surface, (24, 24, 24), self.roller)
        offset = self._strip_offset()
        left = self._strip_left()
        clip = surface.get_clip()
        surface.set_clip(self.roller)
        first = max(0, int((self.roller.x - left + offset) // ITEM_WIDTH))
        last = min(len(self.strip), int((self.roller.right - left + offset) // ITEM_WIDTH) + 1)
        for i in range(first, last):
            item = self.strip[i]
            x = left + i * ITEM_WIDTH - offset
            card = pygame.Rect(int(x) + 4, self.roller.y + 8, ITEM_WIDTH - 8, self.roller.height - 16)
            pygame.draw.rect(surface, (48, 48, 48), card)
            pygame.draw.rect(surface, item.rarity.color, pygame.Rect(card.x, card.bottom - 8, card.width, 8))
            name = self.theme.fit_text(self.theme.font_small, item.name, card.width - 12)
            surface.blit(self.theme.render_text(self.theme.font_small, name, c.text_light), (card.x + 6, card.y + 60))
            surface.blit(
                self.theme.render_text(self.theme.font_small, item.rarity.name, item.rarity.color),
                (card.x + 6, card.y + 80),
            )
            if self.landed and self.plan is not None and i == self.plan.win_slot_index:
                draw_glow_border(surface, card, item.rarity.color)
        surface.set_clip(clip)
        mid = self.roller.centerx
        pygame.draw.line(surface, c.marker, (mid, self.roller.y), (mid, self.roller.bottom), 3)
