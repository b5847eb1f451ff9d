"""Motif catalogue and motif variation operators.

A motif is a short tuple of semitone offsets relative to the tonal centre.  The
built-in :data:`DEFAULT_CATALOG` groups curated motifs into three pools:

``basic``
    Two to four note cells used for simple melodies.
``developmental``
    Longer five to eight note phrases used for complex melodies.
``rhythmic``
    Offset sequences paired with relative durations.

:func:`generate_motifs` draws one *primary* motif per melody and repeats it,
swapping in a varied copy at some phrase boundaries.  The result is flattened
into one long offset stream which the assembler indexes note by note.

Example
-------
>>> import random
>>> rng = random.Random(1)
>>> offsets = generate_motifs(8, "simple", rng=rng)
>>> len(offsets) >= 8
True
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

__all__ = [
    "Motif",
    "RhythmicMotif",
    "MotifCatalog",
    "DEFAULT_CATALOG",
    "VARIATIONS",
    "TRANSPOSE_STEPS",
    "INSPIRED_PROBABILITY",
    "VARIATION_PROBABILITY",
    "motif_pool",
    "vary_motif",
    "generate_motifs",
]

Motif = Tuple[int, ...]

# Probability that a caller-supplied pool replaces the built-in one when
# choosing the primary motif.
INSPIRED_PROBABILITY = 0.6

# Probability that every fourth position receives a varied motif copy.
VARIATION_PROBABILITY = 0.3

VARIATIONS = ("original", "transpose", "invert", "retrograde")
TRANSPOSE_STEPS = (2, 4, -2, -4)


@dataclass(frozen=True)
class RhythmicMotif:
    """Offsets paired with relative durations of equal length."""

    notes: Motif
    durations: Tuple[float, ...]


@dataclass(frozen=True)
class MotifCatalog:
    """Immutable collection of motif pools."""

    basic: Tuple[Motif, ...]
    developmental: Tuple[Motif, ...]
    rhythmic: Tuple[RhythmicMotif, ...]


DEFAULT_CATALOG = MotifCatalog(
    basic=(
        (0, 2, 4, 2),  # up a third and back a step
        (0, -2, 0, 2),  # neighbour below, then above
        (0, 2, 0, -2),  # neighbour above, then below
        (0, 4, 2, 0),  # skip up, step down to the tonic
        (0, -2, -4, -2),  # descending with return
    ),
    developmental=(
        (0, 2, 4, 5, 4, 2, 0, -2),  # arch
        (0, 2, 0, 2, 4, 2, 4, 5),  # stepwise development
        (0, 4, 2, 0, -2, 0, 2, 4),  # wave
        (0, 2, 4, 7, 4, 2, 0, -2),  # leap and return
    ),
    rhythmic=(
        RhythmicMotif((0, 2, 4), (1.0, 0.5, 1.5)),
        RhythmicMotif((0, -2, 0), (0.5, 1.0, 0.5)),
        RhythmicMotif((0, 2, 0, 2), (0.75, 0.75, 0.5, 1.0)),
    ),
)


def motif_pool(complexity: str, catalog: MotifCatalog = DEFAULT_CATALOG) -> List[Motif]:
    """Return the motifs eligible for ``complexity``.

    ``simple`` uses the basic pool, ``complex`` the developmental pool and any
    other value the union of both.
    """

    if complexity == "simple":
        return list(catalog.basic)
    if complexity == "complex":
        return list(catalog.developmental)
    return list(catalog.basic) + list(catalog.developmental)


def vary_motif(motif: Sequence[int], *, rng: random.Random) -> Motif:
    """Return a new motif derived from ``motif``.

    One of four operators is chosen uniformly:

    * ``original`` returns an unchanged copy.
    * ``transpose`` adds one of ``±2`` or ``±4`` to every offset.
    * ``invert`` reflects each offset about the motif maximum (``max - n``).
    * ``retrograde`` reverses the order.
    """

    variation = rng.choice(VARIATIONS)
    if not motif:
        return tuple(motif)
    if variation == "transpose":
        step = rng.choice(TRANSPOSE_STEPS)
        return tuple(n + step for n in motif)
    if variation == "invert":
        peak = max(motif)
        return tuple(peak - n for n in motif)
    if variation == "retrograde":
        return tuple(reversed(motif))
    return tuple(motif)


def generate_motifs(
    length: int,
    complexity: str,
    *,
    rng: random.Random,
    catalog: MotifCatalog = DEFAULT_CATALOG,
    external_pool: Optional[Sequence[Sequence[int]]] = None,
) -> List[int]:
    """Return the flattened motif offset stream for a melody of ``length``.

    A primary motif is drawn once, from ``external_pool`` with probability
    :data:`INSPIRED_PROBABILITY` when that pool is non-empty, otherwise from
    :func:`motif_pool`. Each position contributes one motif segment; positions
    divisible by four use a freshly varied copy with probability
    :data:`VARIATION_PROBABILITY`.

    Parameters
    ----------
    length:
        Number of melody positions. Zero yields an empty stream.
    complexity:
        Complexity tag selecting the built-in pool.
    rng:
        Source of randomness.
    catalog:
        Built-in motif pools.
    external_pool:
        Optional library-learned motifs. Empty or missing pools fall back to
        the catalogue.

    Returns
    -------
    List[int]
        Concatenated segments. The stream is at least ``length`` long unless
        every segment is empty.
    """

    pool = motif_pool(complexity, catalog)
    inspired = [tuple(m) for m in external_pool or () if len(m) > 0]
    if inspired and rng.random() < INSPIRED_PROBABILITY:
        primary: Motif = rng.choice(inspired)
        logging.debug("Using library motif %s as primary motif", primary)
    else:
        primary = rng.choice(pool)

    segments: List[Motif] = []
    for i in range(length):
        if i % 4 == 0 and rng.random() < VARIATION_PROBABILITY:
            segments.append(vary_motif(primary, rng=rng))
        else:
            segments.append(primary)
    return [offset for segment in segments for offset in segment]
