from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, Sequence

from unbox.cases.items import Item
from unbox.cases.selector import select_item
from unbox.config import (
    FILLER_PADDING,
    ITEM_WIDTH,
    JITTER_RANGE,
    ROLL_DURATION_MS,
    ROLL_EASING,
    ROLLER_VIEWPORT_WIDTH,
    WIN_SLOT_INDEX,
)
from unbox.core.events import ROLL_CANCELLED, ROLL_REVEALED, ROLL_STARTED, EventBus
from unbox.core.scheduler import Scheduler, TimerHandle
from unbox.errors import InvalidPool

log = logging.getLogger(__name__)

RevealHandler = Callable[[Item], None]


class RevealState(enum.Enum):
    IDLE = "idle"
    ROLLING = "rolling"
    REVEALED = "revealed"


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> Callable[[float], float]:
    """Return an easing function matching CSS `cubic-bezier(x1, y1, x2, y2)`."""

    def axis(t: float, p1: float, p2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * t * p1 + 3 * u * t * t * p2 + t * t * t

    def ease(progress: float) -> float:
        if progress <= 0.0:
            return 0.0
        if progress >= 1.0:
            return 1.0
        # x(t) is monotonic for control points inside [0, 1]; bisect for t.
        lo, hi = 0.0, 1.0
        for _ in range(40):
            mid = (lo + hi) / 2
            if axis(mid, x1, x2) < progress:
                lo = mid
            else:
                hi = mid
        return axis((lo + hi) / 2, y1, y2)

    return ease


_ROLL_EASE = cubic_bezier(*ROLL_EASING)


@dataclass(frozen=True)
class RollPlan:
    """Everything the roller needs to play one roll, fixed before it starts."""

    filler: tuple[Item, ...]
    winning_item: Item
    win_slot_index: int
    travel_distance: float
    duration_ms: float
    jitter: int
    item_width: int
    viewport_width: float
    started_ms: float = 0.0

    def progress(self, elapsed_ms: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return max(0.0, min(1.0, elapsed_ms / self.duration_ms))

    def offset_at(self, elapsed_ms: float) -> float:
        """Strip offset in pixels after `elapsed_ms` of the roll animation."""
        return self.travel_distance * _ROLL_EASE(self.progress(elapsed_ms))

    def slot_under_marker(self, offset: float | None = None) -> int:
        """Index of the item under the centre marker at `offset` (default: landed)."""
        travel = self.travel_distance if offset is None else offset
        return int((travel + self.viewport_width / 2) // self.item_width)


def build_filler(
    pool: Sequence[Item],
    rng: random.Random,
    length: int,
    winner: Item | None = None,
    win_slot_index: int = WIN_SLOT_INDEX,
) -> list[Item]:
    """Independent weighted draws for every slot; `winner` pinned at its slot."""
    strip: list[Item] = []
    for i in range(length):
        if winner is not None and i == win_slot_index:
            strip.append(winner)
        else:
            strip.append(select_item(pool, rng))
    return strip


class RevealEngine:
    """Single-flight roll orchestration.

    The winner is drawn synchronously in `start_roll`; the animation only
    displays it. Completion is a scheduler timer with the same duration the
    roller animates over, so the reveal never depends on frame events.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        rng: random.Random,
        events: EventBus | None = None,
        *,
        win_slot_index: int = WIN_SLOT_INDEX,
        padding: int = FILLER_PADDING,
        item_width: int = ITEM_WIDTH,
        viewport_width: int = ROLLER_VIEWPORT_WIDTH,
        duration_ms: float = ROLL_DURATION_MS,
        jitter_range: tuple[int, int] = JITTER_RANGE,
    ) -> None:
        self.scheduler = scheduler
        self.rng = rng
        self.events = events or EventBus()
        self.win_slot_index = int(win_slot_index)
        self.padding = int(padding)
        self.item_width = int(item_width)
        self.viewport_width = int(viewport_width)
        self.duration_ms = float(duration_ms)
        self.jitter_range = jitter_range
        self.state = RevealState.IDLE
        self.plan: RollPlan | None = None
        self.last_result: Item | None = None
        self._rolling = False
        self._timer: TimerHandle | None = None
        self._reveal_handlers: list[RevealHandler] = []

    @property
    def rolling(self) -> bool:
        return self._rolling

    @property
    def strip_length(self) -> int:
        return self.win_slot_index + self.padding

    def on_reveal(self, handler: RevealHandler) -> None:
        self._reveal_handlers.append(handler)

    def preview(self, pool: Sequence[Item]) -> list[Item]:
        """Idle strip shown before a roll; carries no winner."""
        if not pool:
            return []
        return build_filler(pool, self.rng, self.strip_length)

    def travel_for(self, jitter: int, viewport_width: float | None = None) -> float:
        viewport = self.viewport_width if viewport_width is None else viewport_width
        return self.win_slot_index * self.item_width + self.item_width / 2 - viewport / 2 + jitter

    def start_roll(self, pool: Sequence[Item], viewport_width: float | None = None) -> RollPlan | None:
        """Begin a roll. Returns None while another roll is in flight."""
        if self._rolling:
            log.debug("start_roll ignored: roll already in flight")
            return None
        pool = list(pool)
        viewport = self.viewport_width if viewport_width is None else float(viewport_width)
        if not pool:
            raise InvalidPool("cannot roll an empty pool")
        winner = select_item(pool, self.rng)
        self._rolling = True
        filler = build_filler(pool, self.rng, self.strip_length, winner, self.win_slot_index)
        low, high = self.jitter_range
        jitter = self.rng.randrange(low, high) if high > low else 0
        plan = RollPlan(
            filler=tuple(filler),
            winning_item=winner,
            win_slot_index=self.win_slot_index,
            travel_distance=self.travel_for(jitter, viewport),
            duration_ms=self.duration_ms,
            jitter=jitter,
            item_width=self.item_width,
            viewport_width=viewport,
            started_ms=self.scheduler.now_ms,
        )
        self.plan = plan
        self.state = RevealState.ROLLING
        self._timer = self.scheduler.schedule_after(self.duration_ms, lambda: self._complete(plan))
        log.debug("roll started: winner=%s jitter=%d", winner.name, jitter)
        self.events.emit(ROLL_STARTED, {"plan": plan})
        return plan

    def cancel(self) -> bool:
        """Abort the roll in flight. The reveal handlers never run for it."""
        if not self._rolling:
            return False
        if self._timer is not None:
            self._timer.cancel()
        plan = self.plan
        self._timer = None
        self.plan = None
        self._rolling = False
        self.state = RevealState.IDLE
        self.events.emit(ROLL_CANCELLED, {"plan": plan})
        return True

    def _complete(self, plan: RollPlan) -> None:
        if plan is not self.plan:
            return
        item = plan.winning_item
        self._timer = None
        self.plan = None
        self._rolling = False
        self.state = RevealState.REVEALED
        self.last_result = item
        log.info("revealed %s (%s)", item.name, item.rarity.name)
        for handler in list(self._reveal_handlers):
            handler(item)
        self.events.emit(ROLL_REVEALED, {"item": item, "plan": plan})
