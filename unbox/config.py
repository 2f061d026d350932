from __future__ import annotations

from dataclasses import dataclass


WINDOW_SIZE = (1280, 800)
WINDOW_TITLE = "Unbox"
FPS = 60

# None seeds from the OS; set an int for reproducible sessions.
SEED: int | None = None


@dataclass(frozen=True)
class RarityWeights:
    # Only the ratio between tiers matters; the reference table sums to 1000.
    common: int = 450
    uncommon: int = 350
    rare: int = 150
    legendary: int = 50


RARITY_WEIGHTS = RarityWeights()

# --- Reveal geometry ---
# The winner always sits at WIN_SLOT_INDEX; the strip is padded past it so the
# viewport never runs out of items when it stops.
WIN_SLOT_INDEX = 155
FILLER_PADDING = 20
ITEM_WIDTH = 200
ROLLER_VIEWPORT_WIDTH = 1000
# Must match the easing duration played by the roller.
ROLL_DURATION_MS = 6300
# Landing wiggle in pixels, [low, high).
JITTER_RANGE = (-25, 25)
ROLL_EASING = (0.08, 0.6, 0.0, 1.0)

# --- Remote document store ---
DATABASE_URL_TEMPLATE = "https://{project_id}-default-rtdb.firebaseio.com/{path}.json"
CASES_PATH = "cases"
INVENTORY_PATH = "inventory"
REQUEST_TIMEOUT_S = 10.0

# --- Local key/value storage (credential token lives here) ---
STORAGE_DIR = ".unbox"
STORAGE_FILE = "storage.json"
TOKEN_KEY = "firebaseToken"
PROJECT_ID_KEY = "firebaseProjectId"

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
