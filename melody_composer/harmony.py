"""Chord lookup and harmonic biasing helpers.

Chord symbols resolve to three pitch-class offsets (``0``-``11``) ordered as
root, third and fifth.  Unknown symbols resolve to the C major triad so an
unexpected chord never interrupts generation.

Two deliberately different uses of the table exist in the engine:

* :func:`get_harmonic_adjustment` nudges the assembler by a *random* tone of
  the active chord.
* The refiner in :mod:`melody_composer.feedback` snaps weak notes to the
  *nearest* chord tone.

Example
-------
>>> get_chord_tones("Am")
(9, 0, 4)
>>> get_chord_tones("Unknown")
(0, 4, 7)
>>> chord_index(5, 8, 2)
1
"""

from __future__ import annotations

import logging
import math
import random
from typing import Dict, Optional, Sequence, Tuple

from .note_utils import NOTE_TO_SEMITONE

__all__ = [
    "ChordTones",
    "CHORD_TONES",
    "DEFAULT_CHORD_TONES",
    "ROMAN_NUMERALS",
    "get_chord_tones",
    "chord_index",
    "chord_at",
    "get_harmonic_adjustment",
    "roman_numeral_degrees",
]

ChordTones = Tuple[int, int, int]

DEFAULT_CHORD_TONES: ChordTones = (0, 4, 7)

# Semitone stacks for the supported triad qualities.
_QUALITIES: Dict[str, Tuple[int, int, int]] = {
    "": (0, 4, 7),
    "m": (0, 3, 7),
    "dim": (0, 3, 6),
}


def _build_chord_table() -> Dict[str, ChordTones]:
    """Return every root spelling combined with every triad quality."""

    table: Dict[str, ChordTones] = {}
    for name, root in NOTE_TO_SEMITONE.items():
        for suffix, stack in _QUALITIES.items():
            table[name + suffix] = tuple((root + step) % 12 for step in stack)  # type: ignore[assignment]
    return table


CHORD_TONES: Dict[str, ChordTones] = _build_chord_table()

# Case-insensitive view so ``"am"`` and ``"Am"`` resolve identically.
_CHORD_LOOKUP: Dict[str, ChordTones] = {name.lower(): tones for name, tones in CHORD_TONES.items()}

# Roman numerals used by library analyses, mapped to pitch-class degrees
# relative to the key root.
ROMAN_NUMERALS: Dict[str, Tuple[int, ...]] = {
    "I": (0, 4, 7),
    "II": (2, 5, 9),
    "III": (4, 7, 11),
    "IV": (5, 9, 0),
    "V": (7, 11, 2),
    "VI": (9, 0, 4),
    "VII": (11, 2, 5),
    "i": (0, 3, 7),
    "ii": (2, 5, 8),
    "iii": (3, 7, 10),
    "iv": (5, 8, 0),
    "v": (7, 10, 2),
    "vi": (8, 0, 3),
    "vii°": (10, 2, 5),
}


def get_chord_tones(chord: Optional[str]) -> ChordTones:
    """Return the pitch classes of ``chord`` or the C major triad."""

    if chord:
        tones = _CHORD_LOOKUP.get(chord.strip().lower())
        if tones is not None:
            return tones
    logging.debug("Unknown chord %r; using C major triad", chord)
    return DEFAULT_CHORD_TONES


def chord_index(position: int, length: int, num_chords: int) -> int:
    """Return which chord of a ``num_chords`` progression covers ``position``.

    The progression is spread evenly across ``length`` notes:
    ``floor(position / (length / num_chords)) mod num_chords``. Empty
    progressions and empty melodies return ``0`` instead of dividing by zero.
    """

    if num_chords <= 0 or length <= 0:
        return 0
    return math.floor(position / (length / num_chords)) % num_chords


def chord_at(progression: Optional[Sequence[str]], position: int, length: int) -> Optional[str]:
    """Return the chord symbol active at ``position`` or ``None`` without a progression."""

    if not progression:
        return None
    return progression[chord_index(position, length, len(progression))]


def get_harmonic_adjustment(chord: Optional[str], *, rng: random.Random) -> int:
    """Return one randomly chosen tone of ``chord`` as a pitch offset."""

    return rng.choice(get_chord_tones(chord))


def roman_numeral_degrees(numeral: str) -> Optional[Tuple[int, ...]]:
    """Return the degrees for ``numeral`` or ``None`` when unrecognised.

    ``"viio"`` and ``"viidim"`` are accepted as ASCII spellings of ``vii°``.
    """

    numeral = numeral.strip()
    if numeral in ("viio", "viidim"):
        numeral = "vii°"
    return ROMAN_NUMERALS.get(numeral)
