"""Beat-salience rhythm generation.

This file exposes a small :class:`RhythmGenerator` class choosing note lengths
(in beats) from the position of a note within the bar.  Melody assembly asks
the engine for one duration per note and scales it by the beat length in
seconds, so rhythm stays independent from pitch choices.

Positions divisible by four are *strong* beats and positions divisible by two
are *medium* beats; each draws from its own pool.  Every other position is a
*weak* beat whose pool depends on the requested complexity.
``generate_duration`` simply proxies to a module-level ``RhythmGenerator``
instance for convenience.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence


STRONG_DURATIONS = (1.0, 1.5)
MEDIUM_DURATIONS = (0.5, 1.0)

# Weak-beat pools keyed by complexity. Unknown complexities use ``medium``.
WEAK_DURATIONS: Dict[str, Sequence[float]] = {
    "simple": (1.0, 2.0),
    "complex": (0.5, 1.0, 1.5, 2.0),
    "medium": (0.5, 1.0, 1.5),
}


class RhythmGenerator:
    """Pick durations from strong, medium and weak beat pools."""

    def __init__(
        self,
        weak: Optional[Dict[str, Sequence[float]]] = None,
        *,
        strong: Sequence[float] = STRONG_DURATIONS,
        medium: Sequence[float] = MEDIUM_DURATIONS,
    ) -> None:
        """Create a new generator with optional custom pools.

        Parameters
        ----------
        weak:
            Mapping ``complexity -> durations`` used off the beat. Must contain
            a ``"medium"`` entry which acts as the fallback for unknown
            complexity tags. When ``None`` :data:`WEAK_DURATIONS` is used.
        strong:
            Durations available on positions divisible by four.
        medium:
            Durations available on the remaining even positions.
        """

        self.weak = dict(weak or WEAK_DURATIONS)
        if "medium" not in self.weak:
            raise ValueError("weak pools must define a 'medium' fallback")
        self.strong = tuple(strong)
        self.medium = tuple(medium)

    def pool_for(self, position: int, complexity: str) -> Sequence[float]:
        """Return the durations eligible at ``position``."""

        if position % 4 == 0:
            return self.strong
        if position % 2 == 0:
            return self.medium
        return self.weak.get(complexity, self.weak["medium"])

    def duration(self, position: int, length: int, complexity: str, *, rng: random.Random) -> float:
        """Return a duration in beats for the note at ``position``.

        ``length`` is accepted for symmetry with the velocity helpers; the
        choice depends only on the position within the bar.
        """

        return rng.choice(self.pool_for(position, complexity))

    def generate(self, length: int, complexity: str, *, rng: random.Random) -> List[float]:
        """Return ``length`` consecutive durations."""

        if length < 0:
            raise ValueError("length must be non-negative")
        return [self.duration(i, length, complexity, rng=rng) for i in range(length)]


_DEFAULT_GENERATOR = RhythmGenerator()


def generate_duration(position: int, length: int, complexity: str, *, rng: random.Random) -> float:
    """Return a duration in beats using the default generator."""

    return _DEFAULT_GENERATOR.duration(position, length, complexity, rng=rng)
