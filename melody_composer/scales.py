"""Scale resolution and pitch quantisation.

Scales are stored as ascending semitone offsets from the root, always starting
at ``0`` and closing on the octave (``12``).  :func:`get_scale_notes` turns a
key and scale name into absolute MIDI pitches while :func:`constrain_to_scale`
snaps an arbitrary offset onto the nearest member of such a list.

Unknown scale names silently fall back to the major scale.  Names are matched
case-insensitively and hyphens, underscores and spaces are interchangeable, so
``"pentatonic-major"``, ``"Pentatonic Major"`` and ``"pentatonic_major"`` all
resolve to the same table entry.

Example
-------
>>> notes = get_scale_notes("C", "major")
>>> notes
[60, 62, 64, 65, 67, 69, 71, 72]
>>> constrain_to_scale(6, notes)
5
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, List, Sequence, Union

from .note_utils import note_to_midi

__all__ = [
    "SCALE_PATTERNS",
    "DEFAULT_SCALE",
    "canonical_scale",
    "root_pitch",
    "get_scale_notes",
    "constrain_to_scale",
]

DEFAULT_SCALE = "major"

# Offsets in semitones from the root. Each pattern includes the octave so
# quantised offsets may land on the upper tonic.
SCALE_PATTERNS: Dict[str, List[int]] = {
    "major": [0, 2, 4, 5, 7, 9, 11, 12],
    "minor": [0, 2, 3, 5, 7, 8, 10, 12],
    "dorian": [0, 2, 3, 5, 7, 9, 10, 12],
    "mixolydian": [0, 2, 4, 5, 7, 9, 10, 12],
    "lydian": [0, 2, 4, 6, 7, 9, 11, 12],
    "phrygian": [0, 1, 3, 5, 7, 8, 10, 12],
    "locrian": [0, 1, 3, 5, 6, 8, 10, 12],
    "pentatonic_major": [0, 2, 4, 7, 9, 12],
    "pentatonic_minor": [0, 3, 5, 7, 10, 12],
    "blues": [0, 3, 5, 6, 7, 10, 12],
}


@lru_cache(maxsize=None)
def canonical_scale(name: str | None) -> str:
    """Return the table name for ``name`` or :data:`DEFAULT_SCALE`."""

    if not name:
        return DEFAULT_SCALE
    normalised = name.strip().lower().replace("-", "_").replace(" ", "_")
    if normalised not in SCALE_PATTERNS:
        logging.debug("Unknown scale %r; falling back to %s", name, DEFAULT_SCALE)
        return DEFAULT_SCALE
    return normalised


def root_pitch(key: Union[str, int], octave: int = 4) -> int:
    """Return the MIDI pitch of ``key`` in ``octave``.

    Integers are treated as an already resolved MIDI pitch and returned
    unchanged. Unparsable key names resolve to middle C.
    """

    if isinstance(key, int):
        return key
    return note_to_midi(f"{key.strip()}{octave}")


def get_scale_notes(root: Union[str, int], scale_name: str | None = None) -> List[int]:
    """Return the absolute pitches of ``scale_name`` built on ``root``.

    Parameters
    ----------
    root:
        Key name such as ``"F#"`` (placed in octave 4) or a MIDI pitch.
    scale_name:
        Name of a scale in :data:`SCALE_PATTERNS`. Unknown or missing names use
        the major scale.

    Returns
    -------
    List[int]
        Ascending MIDI pitches, first element equal to the root.
    """

    base = root_pitch(root)
    return [base + offset for offset in SCALE_PATTERNS[canonical_scale(scale_name)]]


def constrain_to_scale(offset: float, scale_notes: Sequence[int]) -> int:
    """Quantise ``offset`` (relative to ``scale_notes[0]``) onto the scale.

    The scale is scanned in table order and the first element with the
    smallest absolute distance to the target wins, so ties always resolve to
    the lower scale member. There is no octave wrapping: targets beyond the
    top of the table snap to its last element.

    Returns
    -------
    int
        Offset of the chosen scale member relative to ``scale_notes[0]``.
    """

    if not scale_notes:
        return 0
    target = scale_notes[0] + offset
    closest = scale_notes[0]
    min_distance = abs(target - closest)
    for note in scale_notes:
        distance = abs(target - note)
        if distance < min_distance:
            min_distance = distance
            closest = note
    return int(closest - scale_notes[0])
