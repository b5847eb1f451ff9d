"""Voice-leading rule shared by every counterpoint species.

A counterpoint pitch is the cantus pitch plus one consonant-leaning offset
from :data:`COUNTERPOINT_INTERVALS`.  When the candidate would sit a unison or
a perfect fifth away from the previous counterpoint note it is nudged by a
major second, discouraging the static or hollow motion that leads to parallel
unisons and fifths.  A single nudge always suffices: distances of ``0`` and
``7`` become ``2``, ``5`` or ``9``.

Example
-------
>>> import random
>>> pitch = counterpoint_note(60, 67, rng=random.Random(3))
>>> forms_forbidden_interval(pitch, 67)
False
"""

from __future__ import annotations

import random
from typing import Optional

__all__ = [
    "COUNTERPOINT_INTERVALS",
    "FORBIDDEN_INTERVALS",
    "ADJUSTMENT_STEPS",
    "forms_forbidden_interval",
    "counterpoint_note",
]

COUNTERPOINT_INTERVALS = (-7, -5, -4, -3, -2, 2, 3, 4, 5, 7)

# Absolute distances to the previous counterpoint note that trigger a nudge.
FORBIDDEN_INTERVALS = frozenset({0, 7})

ADJUSTMENT_STEPS = (-2, 2)


def forms_forbidden_interval(pitch: int, previous: Optional[int]) -> bool:
    """Return ``True`` if ``pitch`` is a unison or fifth away from ``previous``."""

    if previous is None:
        return False
    return abs(pitch - previous) in FORBIDDEN_INTERVALS


def counterpoint_note(cantus_pitch: int, previous: Optional[int], *, rng: random.Random) -> int:
    """Return a counterpoint pitch against ``cantus_pitch``.

    Parameters
    ----------
    cantus_pitch:
        Pitch of the cantus firmus note being accompanied.
    previous:
        Pitch of the preceding counterpoint note, or ``None`` when there is
        nothing to lead from.
    rng:
        Source of randomness.
    """

    pitch = cantus_pitch + rng.choice(COUNTERPOINT_INTERVALS)
    if forms_forbidden_interval(pitch, previous):
        pitch += rng.choice(ADJUSTMENT_STEPS)
    return pitch
