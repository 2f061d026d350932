from __future__ import annotations

import logging

import pygame

from unbox.config import FPS
from unbox.core.input import InputMap
from unbox.core.session import Session
from unbox.remote.credentials import CredentialStore
from unbox.scenes.case_scene import CaseScene
from unbox.ui.theme import Theme

log = logging.getLogger(__name__)


class UnboxApp:
    """Window, frame loop and developer console around one Session."""

    def __init__(self, screen: pygame.Surface, session: Session | None = None) -> None:
        self.screen = screen
        self.clock = pygame.time.Clock()
        self.input_map = InputMap()
        self.theme = Theme()
        self.session = session or Session(CredentialStore())
        self.console_open = False
        self.console_text = ""
        self.console_history: list[str] = []
        self.console_max_history = 6
        self.running = True
        self.scene = CaseScene(self)
        self.session.start()

    def run(self) -> None:
        try:
            while self.running:
                dt = self.clock.tick(FPS) / 1000.0
                # Clamp hitches; the roll timer and the strip share this clock so they stay aligned.
                dt = min(dt, 1 / 20)
                self._handle_events()
                self.session.update(dt * 1000.0)
                self.scene.update(dt)
                self._draw()
        finally:
            self.session.shutdown()

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                return
            if self.input_map.is_action(event, "console"):
                self.console_open = not self.console_open
                self.console_text = ""
                continue
            if self.console_open:
                self._handle_console_event(event)
                continue
            if self.input_map.is_action(event, "quit"):
                self.running = False
                return
            self.scene.handle_event(event)

    def _handle_console_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_RETURN:
            self._execute_console()
        elif event.key == pygame.K_BACKSPACE:
            self.console_text = self.console_text[:-1]
        elif event.key == pygame.K_v and event.mod & pygame.KMOD_CTRL:
            pasted = pygame.scrap.get_text() if pygame.scrap.get_init() else ""
            self.console_text += (pasted or "").strip()
        elif event.unicode and event.unicode.isprintable():
            self.console_text += event.unicode

    def _execute_console(self) -> None:
        text = self.console_text.strip()
        self.console_text = ""
        if not text:
            return
        self.console_history.append(text.split()[0] if text.lower().startswith("login") else text)
        self.console_history = self.console_history[-self.console_max_history :]
        self.run_console_command(text)

    def run_console_command(self, text: str) -> None:
        parts = text.split()
        if not parts:
            return
        cmd = parts[0].lower()
        log.debug("console command: %s", cmd)
        toasts = self.scene.toasts
        if cmd == "login" and len(parts) > 1:
            if self.session.login(parts[1]):
                account = self.session.account()
                toasts.push(f"Logged in ({account.project_id if account else '?'})", color=self.theme.colors.good)
            else:
                toasts.push("Invalid credentials token.", color=self.theme.colors.danger)
        elif cmd == "logout":
            self.session.logout()
            toasts.push("Logged out.")
        elif cmd == "reload":
            self.session.reload()
        else:
            toasts.push(f"Unknown command: {cmd}")

    def _draw(self) -> None:
        self.screen.fill(self.theme.colors.bg)
        self.scene.draw(self.screen)
        if self.console_open:
            self._draw_console()
        pygame.display.flip()

    def _draw_console(self) -> None:
        w, h = self.screen.get_size()
        rect = pygame.Rect(12, h - 192, min(620, w - 24), 180)
        pygame.draw.rect(self.screen, (0, 0, 0), rect)
        pygame.draw.rect(self.screen, self.theme.colors.panel, rect, 2)
        font = self.theme.font_small
        y = rect.y + 8
        for line in self.console_history[-self.console_max_history :]:
            self.screen.blit(self.theme.render_text(font, line, self.theme.colors.text_light), (rect.x + 8, y))
            y += 18
        prompt = self.theme.fit_text(font, f"> {self.console_text}", rect.width - 16)
        self.screen.blit(self.theme.render_text(font, prompt, self.theme.colors.text_light), (rect.x + 8, rect.bottom - 26))
