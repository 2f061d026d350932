import logging
import os

import pygame

from unbox.config import LOG_FORMAT, LOG_LEVEL, WINDOW_SIZE, WINDOW_TITLE
from unbox.core.app import UnboxApp


def main() -> None:
    logging.basicConfig(level=os.environ.get("UNBOX_LOG_LEVEL", LOG_LEVEL), format=LOG_FORMAT)
    # Suppress ALSA audio errors on Linux systems without proper audio setup
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    pygame.init()
    pygame.display.set_caption(WINDOW_TITLE)
    screen = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)
    try:
        pygame.scrap.init()
    except pygame.error:
        logging.getLogger(__name__).debug("clipboard unavailable; paste disabled in console")
    app = UnboxApp(screen)
    app.run()
    pygame.quit()


if __name__ == "__main__":
    main()
