from __future__ import annotations

import pygame


_glow_cache: dict[tuple[int, int, tuple[int, int, int], int, int], pygame.Surface] = {}


def draw_glow_border(
    surface: pygame.Surface,
    rect: pygame.Rect,
    color: tuple[int, int, int],
    *,
    border_width: int = 3,
    glow_radius: int = 6,
    glow_alpha: int = 110,
) -> None:
    """Soft colored halo plus a crisp border; used on the revealed item."""
    key = (rect.width, rect.height, color, glow_radius, glow_alpha)
    glow = _glow_cache.get(key)
    if glow is None:
        glow = pygame.Surface((rect.width + glow_radius * 2, rect.height + glow_radius * 2), pygame.SRCALPHA)
        for i in range(glow_radius, 0, -1):
            a = int(glow_alpha * (i / glow_radius) ** 2)
            ring = pygame.Rect(glow_radius - i, glow_radius - i, rect.width + i * 2, rect.height + i * 2)
            pygame.draw.rect(glow, (color[0], color[1], color[2], a), ring, width=1)
        if len(_glow_cache) > 32:
            _glow_cache.clear()
        _glow_cache[key] = glow
    surface.blit(glow, (rect.x - glow_radius, rect.y - glow_radius))
    pygame.draw.rect(surface, color, rect, width=border_width)
