from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

from unbox.ui.toasts import ToastManager

if TYPE_CHECKING:
    from unbox.core.app import UnboxApp


class Scene:
    """Base class for screens driven by the app loop."""

    def __init__(self, app: "UnboxApp") -> None:
        self.app = app
        self.theme = app.theme
        self.toasts = ToastManager()
        self._last_screen_size = self.app.screen.get_size()

    def handle_event(self, event: pygame.event.Event) -> None:
        _ = event

    def update(self, dt: float) -> None:
        if self.app.screen.get_size() != self._last_screen_size:
            self._last_screen_size = self.app.screen.get_size()
            self.layout()
        self.toasts.update(dt)

    def layout(self) -> None:
        """Recompute widget rects after a resize."""

    def draw(self, surface: pygame.Surface) -> None:
        _ = surface

    def draw_overlays(self, surface: pygame.Surface) -> None:
        self.toasts.draw(surface, self.theme)
