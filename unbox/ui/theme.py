from __future__ import annotations

from collections import OrderedDict

import pygame


class Colors:
    bg = (0, 128, 128)
    panel = (192, 192, 192)
    panel_alt = (160, 160, 160)
    border = (64, 64, 64)
    highlight = (255, 255, 255)
    text = (0, 0, 0)
    text_light = (255, 255, 255)
    muted = (90, 90, 90)
    accent = (0, 0, 128)
    accent_hover = (16, 16, 168)
    marker = (250, 204, 21)
    danger = (200, 40, 40)
    good = (20, 140, 60)


class Theme:
    """Fonts, colors and a shared LRU of rendered labels."""

    def __init__(self, *, cache_size: int = 1024) -> None:
        pygame.font.init()
        self.colors = Colors()
        self.font_small = pygame.font.SysFont("arial", 14)
        self.font = pygame.font.SysFont("arial", 18)
        self.cache_size = int(cache_size)
        self._text: "OrderedDict[tuple[int, str, tuple[int, int, int]], pygame.Surface]" = OrderedDict()

    def render_text(
        self, font: pygame.font.Font, text: str, color: tuple[int, int, int] | None = None
    ) -> pygame.Surface:
        key = (id(font), str(text), tuple(color or self.colors.text))
        surf = self._text.get(key)
        if surf is not None:
            self._text.move_to_end(key)
            return surf
        surf = font.render(key[1], True, key[2])
        self._text[key] = surf
        if len(self._text) > self.cache_size:
            self._text.popitem(last=False)
        return surf

    def fit_text(self, font: pygame.font.Font, text: str, max_width: int) -> str:
        """Trim `text` with an ellipsis until it renders within `max_width`."""
        if font.size(text)[0] <= max_width:
            return text
        while text and font.size(text + "...")[0] > max_width:
            text = text[:-1]
        return text + "..."
