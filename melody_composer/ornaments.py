"""Ornamentation pass for finished melodies.

``add_ornamentation`` returns a new note list in which every original note is
followed by any ornament notes generated for it.  Ornament notes overlap the
note they decorate, so the result is ordered by source note rather than by
start time.

Supported styles
----------------
``trill``
    Notes longer than half a second alternate with the upper semitone every
    0.1 s for up to 30% of their length (capped at 0.8 s).
``grace``
    With 30% probability a quiet note a semitone below is inserted 0.1 s
    before the main note.
``turn``
    Recognised but not realised: eligible notes are selected and left
    undecorated until the figure's note content is defined.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import List, Sequence

from .note_utils import Melody, Note

__all__ = [
    "ORNAMENT_STYLES",
    "TRILL_STEP",
    "generate_trill",
    "generate_grace_note",
    "add_ornamentation",
]

ORNAMENT_STYLES = ("trill", "grace", "turn")

TRILL_STEP = 0.1
TRILL_FRACTION = 0.3
TRILL_MAX = 0.8
TRILL_MIN_DURATION = 0.5
TRILL_VELOCITY = 0.7

GRACE_PROBABILITY = 0.3
GRACE_LEAD = 0.1
GRACE_DURATION = 0.08
GRACE_VELOCITY = 0.6

TURN_MIN_DURATION = 1.0
TURN_PROBABILITY = 0.2


def generate_trill(note: Note) -> List[Note]:
    """Return the trill notes decorating ``note``."""

    length = min(note.duration * TRILL_FRACTION, TRILL_MAX)
    velocity = int(round(note.velocity * TRILL_VELOCITY))
    trill: List[Note] = []
    step = 0
    while step * TRILL_STEP < length:
        pitch = note.pitch if step % 2 == 0 else note.pitch + 1
        trill.append(Note(pitch, velocity, note.start_time + step * TRILL_STEP, TRILL_STEP))
        step += 1
    return trill


def generate_grace_note(note: Note) -> Note:
    """Return a grace note approaching ``note`` from a semitone below.

    The grace note may start before zero when decorating the very first note.
    """

    return Note(
        note.pitch - 1,
        int(round(note.velocity * GRACE_VELOCITY)),
        note.start_time - GRACE_LEAD,
        GRACE_DURATION,
    )


def add_ornamentation(melody: Sequence[Note], style: str = "trill", *, rng: random.Random) -> Melody:
    """Return ``melody`` decorated with ``style`` ornaments.

    Unknown styles return an unornamented copy.
    """

    style = (style or "").strip().lower()
    ornamented: Melody = []
    skipped_turns = 0
    for note in melody:
        ornamented.append(replace(note))
        if style == "trill":
            if note.duration > TRILL_MIN_DURATION:
                ornamented.extend(generate_trill(note))
        elif style == "grace":
            if rng.random() < GRACE_PROBABILITY:
                ornamented.append(generate_grace_note(note))
        elif style == "turn":
            if note.duration > TURN_MIN_DURATION and rng.random() < TURN_PROBABILITY:
                skipped_turns += 1
    if skipped_turns:
        logging.warning("Turn ornaments are not realised; %d eligible notes left plain", skipped_turns)
    if style not in ORNAMENT_STYLES:
        logging.debug("Unknown ornament style %r; melody left unornamented", style)
    return ornamented
