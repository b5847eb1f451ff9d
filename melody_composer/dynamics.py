"""Mood-driven velocity helpers.

``generate_velocity`` picks a MIDI velocity for a note based on the requested
mood.  Most moods draw uniformly from a range; ``dramatic`` instead contrasts
loud strong beats with quiet off-beats.  Unknown moods use the neutral range.
Values are always rounded to integers so they can be written straight into a
note event.
"""

from __future__ import annotations

import random
from typing import Dict, Tuple

__all__ = ["MOOD_VELOCITY_RANGES", "NEUTRAL_RANGE", "generate_velocity"]

# Inclusive ``(low, high)`` bounds for moods drawing a uniform velocity.
MOOD_VELOCITY_RANGES: Dict[str, Tuple[float, float]] = {
    "energetic": (80.0, 110.0),
    "calm": (50.0, 70.0),
}
NEUTRAL_RANGE: Tuple[float, float] = (60.0, 90.0)

DRAMATIC_ACCENT = 90
DRAMATIC_REST = 60


def generate_velocity(position: int, length: int, mood: str, *, rng: random.Random) -> int:
    """Return the velocity for the note at ``position``.

    ``dramatic`` is deterministic: strong beats (``position % 4 == 0``) get
    :data:`DRAMATIC_ACCENT`, everything else :data:`DRAMATIC_REST`.
    """

    if mood == "dramatic":
        return DRAMATIC_ACCENT if position % 4 == 0 else DRAMATIC_REST
    low, high = MOOD_VELOCITY_RANGES.get(mood, NEUTRAL_RANGE)
    return int(round(rng.uniform(low, high)))
