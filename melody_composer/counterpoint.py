"""Species counterpoint generation against a finished melody.

The input melody acts as the cantus firmus and a new, independent line is
derived from it.  Four species are available:

``first_species``
    One note against one, sharing the cantus durations.
``second_species``
    Two half-length notes against every cantus note lasting at least one
    second; shorter notes fall back to first species.
``third_species``
    Four quarter-length notes against the same long cantus notes.
``free``
    One to three equal subdivisions per cantus note.

Every pitch comes from :func:`melody_composer.voice_leading.counterpoint_note`.
Sub-beat groups in the second and third species start a fresh chain, so their
first pitch is not checked against the preceding group.  Start times are laid
out back to back from zero using the cantus durations, and velocities are 80%
of the cantus velocity.

Example
-------
>>> import random
>>> from melody_composer.note_utils import Note
>>> cantus = [Note(60 + i, 80, float(i), 1.0) for i in range(4)]
>>> len(generate_counterpoint(cantus, "first_species", rng=random.Random(0)))
4
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Sequence

from .note_utils import Melody, Note
from .voice_leading import counterpoint_note

__all__ = [
    "SPECIES",
    "DEFAULT_SPECIES",
    "SUBDIVISION_THRESHOLD",
    "canonical_species",
    "first_species",
    "second_species",
    "third_species",
    "free_counterpoint",
    "generate_counterpoint",
]

DEFAULT_SPECIES = "first_species"

# Cantus notes at least this long (seconds) are subdivided by the second and
# third species.
SUBDIVISION_THRESHOLD = 1.0
VELOCITY_SCALE = 0.8


def _velocity(note: Note) -> int:
    return int(round(note.velocity * VELOCITY_SCALE))


def _last_pitch(line: Sequence[Note]) -> Optional[int]:
    return line[-1].pitch if line else None


def _chain(cantus_pitch: int, count: int, rng: random.Random) -> List[int]:
    """Return ``count`` pitches, each led from its predecessor in the group."""

    pitches: List[int] = []
    previous: Optional[int] = None
    for _ in range(count):
        previous = counterpoint_note(cantus_pitch, previous, rng=rng)
        pitches.append(previous)
    return pitches


def first_species(cantus: Sequence[Note], *, rng: random.Random) -> Melody:
    """Return one counterpoint note per cantus note."""

    line: Melody = []
    current = 0.0
    for note in cantus:
        pitch = counterpoint_note(note.pitch, _last_pitch(line), rng=rng)
        line.append(Note(pitch, _velocity(note), current, note.duration))
        current += note.duration
    return line


def _subdivided(cantus: Sequence[Note], parts: int, rng: random.Random) -> Melody:
    line: Melody = []
    current = 0.0
    for note in cantus:
        if note.duration >= SUBDIVISION_THRESHOLD:
            step = note.duration / parts
            for index, pitch in enumerate(_chain(note.pitch, parts, rng)):
                line.append(Note(pitch, _velocity(note), current + index * step, step))
        else:
            pitch = counterpoint_note(note.pitch, _last_pitch(line), rng=rng)
            line.append(Note(pitch, _velocity(note), current, note.duration))
        current += note.duration
    return line


def second_species(cantus: Sequence[Note], *, rng: random.Random) -> Melody:
    """Return two notes against each long cantus note."""

    return _subdivided(cantus, 2, rng)


def third_species(cantus: Sequence[Note], *, rng: random.Random) -> Melody:
    """Return four notes against each long cantus note."""

    return _subdivided(cantus, 4, rng)


def free_counterpoint(cantus: Sequence[Note], *, rng: random.Random) -> Melody:
    """Return one to three evenly split notes per cantus note."""

    line: Melody = []
    current = 0.0
    for note in cantus:
        count = rng.randint(1, 3)
        step = note.duration / count
        for index in range(count):
            pitch = counterpoint_note(note.pitch, _last_pitch(line), rng=rng)
            line.append(Note(pitch, _velocity(note), current + index * step, step))
        current += note.duration
    return line


SPECIES: Dict[str, Callable[..., Melody]] = {
    "first_species": first_species,
    "second_species": second_species,
    "third_species": third_species,
    "free": free_counterpoint,
}


def canonical_species(name: Optional[str]) -> str:
    """Return the table name for ``name``.

    ``"first"``, ``"first species"`` and ``"first-species"`` all resolve to
    ``first_species``. Unknown names fall back to :data:`DEFAULT_SPECIES`.
    """

    if not name:
        return DEFAULT_SPECIES
    normalised = name.strip().lower().replace("-", "_").replace(" ", "_")
    if normalised in SPECIES:
        return normalised
    if f"{normalised}_species" in SPECIES:
        return f"{normalised}_species"
    logging.debug("Unknown counterpoint species %r; using %s", name, DEFAULT_SPECIES)
    return DEFAULT_SPECIES


def generate_counterpoint(
    cantus: Sequence[Note], species: Optional[str] = DEFAULT_SPECIES, *, rng: random.Random
) -> Melody:
    """Return a counterpoint line against ``cantus`` in ``species``.

    The cantus is never modified. The result has at least as many notes as the
    cantus.
    """

    return SPECIES[canonical_species(species)](cantus, rng=rng)
