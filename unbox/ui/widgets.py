from __future__ import annotations

from typing import Callable

import pygame

from unbox.ui.theme import Theme


class Button:
    def __init__(self, rect: pygame.Rect, text: str, on_click: Callable[[], None]) -> None:
        self.rect = rect
        self.text = text
        self.on_click = on_click
        self.hovered = False
        self.enabled = True
        self.selected = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if not self.enabled:
            return
        if event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()

    def draw(self, surface: pygame.Surface, theme: Theme) -> None:
        c = theme.colors
        fill = c.accent_hover if self.hovered or self.selected else c.panel
        if not self.enabled:
            fill = c.panel_alt
        pygame.draw.rect(surface, fill, self.rect)
        # Raised bevel: light top/left, dark bottom/right.
        pygame.draw.line(surface, c.highlight, self.rect.topleft, self.rect.topright, 2)
        pygame.draw.line(surface, c.highlight, self.rect.topleft, self.rect.bottomleft, 2)
        pygame.draw.line(surface, c.border, self.rect.bottomleft, self.rect.bottomright, 2)
        pygame.draw.line(surface, c.border, self.rect.topright, self.rect.bottomright, 2)
        color = c.text_light if (self.hovered or self.selected) and self.enabled else c.text
        if not self.enabled:
            color = c.muted
        label = theme.fit_text(theme.font, self.text, self.rect.width - 8)
        text = theme.render_text(theme.font, label, color)
        surface.blit(text, text.get_rect(center=self.rect.center))


class Panel:
    def __init__(self, rect: pygame.Rect, title: str | None = None) -> None:
        self.rect = rect
        self.title = title

    def body(self) -> pygame.Rect:
        top = 28 if self.title else 4
        return pygame.Rect(self.rect.x + 4, self.rect.y + top, self.rect.width - 8, self.rect.height - top - 4)

    def draw(self, surface: pygame.Surface, theme: Theme) -> None:
        c = theme.colors
        pygame.draw.rect(surface, c.panel, self.rect)
        pygame.draw.rect(surface, c.border, self.rect, 2)
        if self.title:
            bar = pygame.Rect(self.rect.x + 2, self.rect.y + 2, self.rect.width - 4, 22)
            pygame.draw.rect(surface, c.accent, bar)
            text = theme.render_text(theme.font_small, self.title, c.text_light)
            surface.blit(text, (bar.x + 6, bar.y + 3))


class ItemList:
    """Scrollable rows with a selection; rows are (label, color) pairs."""

    def __init__(self, rect: pygame.Rect, row_height: int = 26) -> None:
        self.rect = rect
        self.row_height = row_height
        self.rows: list[tuple[str, tuple[int, int, int]]] = []
        self.scroll_offset = 0
        self.selected: int | None = None
        self.on_select: Callable[[int], None] | None = None

    def set_rows(self, rows: list[tuple[str, tuple[int, int, int]]]) -> None:
        self.rows = rows
        if self.selected is not None and self.selected >= len(rows):
            self.selected = None
        self.scroll_offset = max(0, min(self.scroll_offset, self._max_scroll()))

    def _max_scroll(self) -> int:
        return max(0, len(self.rows) * self.row_height - self.rect.height)

    def _index_at(self, pos: tuple[int, int]) -> int | None:
        if not self.rect.collidepoint(pos):
            return None
        idx = (pos[1] - self.rect.y + self.scroll_offset) // self.row_height
        if 0 <= idx < len(self.rows):
            return int(idx)
        return None

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEWHEEL:
            if self.rect.collidepoint(pygame.mouse.get_pos()):
                self.scroll_offset -= event.y * self.row_height
                self.scroll_offset = max(0, min(self.scroll_offset, self._max_scroll()))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            idx = self._index_at(event.pos)
            if idx is not None:
                self.selected = idx
                if self.on_select:
                    self.on_select(idx)

    def draw(self, surface: pygame.Surface, theme: Theme) -> None:
        c = theme.colors
        pygame.draw.rect(surface, c.highlight, self.rect)
        pygame.draw.rect(surface, c.border, self.rect, 1)
        clip = surface.get_clip()
        surface.set_clip(self.rect)
        y = self.rect.y - self.scroll_offset
        for idx, (label, color) in enumerate(self.rows):
            row = pygame.Rect(self.rect.x, y, self.rect.width, self.row_height)
            if idx == self.selected:
                pygame.draw.rect(surface, c.accent, row)
            pygame.draw.rect(surface, color, pygame.Rect(row.x + 4, row.y + 6, 6, self.row_height - 12))
            text_color = c.text_light if idx == self.selected else c.text
            text = theme.render_text(theme.font_small, theme.fit_text(theme.font_small, label, row.width - 20), text_color)
            surface.blit(text, (row.x + 16, row.y + 5))
            y += self.row_height
        surface.set_clip(clip)
