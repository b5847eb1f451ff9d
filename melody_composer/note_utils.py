"""Note records and helpers for translating note names to MIDI numbers.

This module groups the small value types shared by every stage of the
composition pipeline together with the pitch-name conversions used to locate
the tonal centre of a melody.  Keeping them separate from the generators means
the evaluator, counterpoint and ornamentation code can import them without
pulling in the assembler.

Example
-------
>>> from melody_composer.note_utils import note_to_midi
>>> note_to_midi("C4")
60
"""

# Modification Summary
# ---------------------
# * ``note_to_midi`` falls back to middle C instead of raising so malformed key
#   names degrade silently like every other musical lookup in the engine.
# * ``Note`` and ``EvaluationScore`` replaced the loose dictionaries previously
#   passed between the assembler, evaluator and refiner.

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, List

__all__ = [
    "NOTE_TO_SEMITONE",
    "NOTES",
    "DEFAULT_MIDI",
    "Note",
    "Melody",
    "EvaluationScore",
    "note_to_midi",
    "midi_to_note",
    "pitch_class",
]

# NOTE_TO_SEMITONE maps both sharp and flat spellings to the correct semitone
# offset within an octave so enharmonic keys (``Db`` and ``C#``) resolve to the
# same root.
NOTE_TO_SEMITONE: Dict[str, int] = {
    "C": 0,
    "B#": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "Fb": 4,
    "E#": 5,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
    "Cb": 11,
}

NOTES: List[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Middle C. Returned whenever a note name cannot be parsed.
DEFAULT_MIDI = 60


@dataclass
class Note:
    """A single timed note.

    ``start_time`` and ``duration`` are measured in seconds. Instances are
    mutable because the refiner adjusts pitches and durations in place; every
    other stage builds new notes instead.
    """

    pitch: int
    velocity: int
    start_time: float
    duration: float

    def to_dict(self) -> dict:
        return asdict(self)


# A melody is simply an ordered list of notes.
Melody = List[Note]


@dataclass(frozen=True)
class EvaluationScore:
    """Per-criterion musicality scores, each in ``[0, 1]``."""

    contour: float
    rhythm: float
    harmony: float
    repetition: float
    range: float
    overall: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@lru_cache(maxsize=None)
def note_to_midi(note: str) -> int:
    """Convert a note string such as ``C#4`` into a MIDI number.

    Parameters
    ----------
    note:
        Note name including a non-negative octave number.

    Returns
    -------
    int
        MIDI note number. Malformed names return :data:`DEFAULT_MIDI` rather
        than raising so an unrecognised key silently falls back to C.
    """

    match = re.fullmatch(r"([A-Ga-g][#b]?)(\d+)", note.strip())
    if not match:
        logging.debug("Unparsable note name %r; using middle C", note)
        return DEFAULT_MIDI

    name, octave_str = match.groups()
    name = name[0].upper() + name[1:]
    # MIDI octave numbers are offset by one relative to scientific pitch
    # notation, hence the ``+ 1``.
    return NOTE_TO_SEMITONE[name] + (int(octave_str) + 1) * 12


def midi_to_note(midi_note: int) -> str:
    """Convert a MIDI number into a note name using sharps.

    >>> midi_to_note(61)
    'C#4'
    """

    octave = midi_note // 12 - 1
    return f"{NOTES[midi_note % 12]}{octave}"


def pitch_class(pitch: int) -> int:
    """Return ``pitch`` reduced to one of the twelve pitch classes."""

    return pitch % 12
