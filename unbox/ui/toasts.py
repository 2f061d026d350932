from __future__ import annotations

from dataclasses import dataclass, field

import pygame

from unbox.ui.theme import Theme


@dataclass
class Toast:
    text: str
    ttl: float = 3.0
    color: tuple[int, int, int] | None = None


@dataclass
class ToastManager:
    """Short-lived status messages (reveals, sync failures, login results)."""

    toasts: list[Toast] = field(default_factory=list)
    limit: int = 5

    def push(self, text: str, *, ttl: float = 3.0, color: tuple[int, int, int] | None = None) -> None:
        self.toasts.append(Toast(text=text, ttl=ttl, color=color))
        del self.toasts[: -self.limit]

    def update(self, dt: float) -> None:
        for t in self.toasts:
            t.ttl -= dt
        self.toasts = [t for t in self.toasts if t.ttl > 0]

    def draw(self, surface: pygame.Surface, theme: Theme) -> None:
        pad = 8
        x = surface.get_width() - 12
        y = 12
        for t in self.toasts:
            text = theme.render_text(theme.font_small, t.text, t.color or theme.colors.text)
            rect = text.get_rect(topright=(x - pad, y + pad))
            bg = rect.inflate(pad * 2, pad * 2)
            pygame.draw.rect(surface, theme.colors.panel, bg)
            pygame.draw.rect(surface, theme.colors.border, bg, 1)
            surface.blit(text, rect)
            y = bg.bottom + 6
