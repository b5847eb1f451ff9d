"""Value-returning melody transformations.

Every helper here builds new :class:`~melody_composer.note_utils.Note`
objects, so a melody shared between the evaluator, counterpoint and
ornamentation stages can be transformed without aliasing surprises.

Example
-------
>>> from melody_composer.note_utils import Note
>>> melody = [Note(60, 80, 0.0, 0.5), Note(64, 80, 0.5, 1.0)]
>>> [n.pitch for n in invert_melody(melody)]
[60, 56]
>>> [n.start_time for n in retrograde_melody(melody)]
[0.0, 1.0]
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, Sequence

from .note_utils import Melody, Note

__all__ = [
    "FIFTH",
    "TRANSFORMATIONS",
    "transpose_melody",
    "invert_melody",
    "retrograde_melody",
    "augment_melody",
    "diminish_melody",
    "transform_melody",
    "apply_transformations",
]

# ``transform_melody(m, "transpose")`` moves the melody up a perfect fifth.
FIFTH = 7


def transpose_melody(melody: Sequence[Note], interval: int) -> Melody:
    """Return ``melody`` shifted by ``interval`` semitones."""

    return [replace(note, pitch=note.pitch + interval) for note in melody]


def invert_melody(melody: Sequence[Note]) -> Melody:
    """Return ``melody`` mirrored about its first pitch."""

    if not melody:
        return []
    axis = melody[0].pitch
    return [replace(note, pitch=2 * axis - note.pitch) for note in melody]


def retrograde_melody(melody: Sequence[Note]) -> Melody:
    """Return ``melody`` backwards.

    Start times are recomputed from the reversed order, laying the notes end
    to end from the original first start time. Applying the transformation
    twice restores the pitch sequence but not necessarily the original
    timing (rests and overlaps are not preserved).
    """

    if not melody:
        return []
    current = melody[0].start_time
    reversed_notes: Melody = []
    for note in reversed(melody):
        reversed_notes.append(replace(note, start_time=current))
        current += note.duration
    return reversed_notes


def augment_melody(melody: Sequence[Note]) -> Melody:
    """Return ``melody`` with every duration doubled."""

    return [replace(note, duration=note.duration * 2) for note in melody]


def diminish_melody(melody: Sequence[Note]) -> Melody:
    """Return ``melody`` with every duration halved."""

    return [replace(note, duration=note.duration * 0.5) for note in melody]


TRANSFORMATIONS: Dict[str, Callable[[Sequence[Note]], Melody]] = {
    "invert": invert_melody,
    "retrograde": retrograde_melody,
    "augment": augment_melody,
    "diminish": diminish_melody,
    "transpose": lambda melody: transpose_melody(melody, FIFTH),
}


def transform_melody(melody: Sequence[Note], transformation: str) -> Melody:
    """Apply the named transformation; unknown names return a plain copy."""

    func = TRANSFORMATIONS.get((transformation or "").strip().lower())
    if func is None:
        logging.debug("Unknown transformation %r; melody unchanged", transformation)
        return [replace(note) for note in melody]
    return func(melody)


def apply_transformations(melody: Sequence[Note], transformations: Iterable[str]) -> Melody:
    """Apply ``transformations`` in order and return the final melody."""

    result: Melody = [replace(note) for note in melody]
    for name in transformations:
        result = transform_melody(result, name)
    return result
