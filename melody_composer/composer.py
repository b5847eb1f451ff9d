"""Melody assembly, genre presets and description-driven tracks.

:func:`generate_melody` is the heart of the package.  It combines the motif
stream, a contour curve, optional chord-tone nudges, beat-salience rhythm and
mood-driven dynamics into a timed list of :class:`Note` objects, scores the
result and, when the weighted score falls below :data:`REFINE_THRESHOLD`,
applies one refinement pass.

Two convenience layers sit on top:

* :func:`generate_genre_melody` applies one of :data:`GENRE_PRESETS` and
  :func:`apply_genre_style` adds the matching post-processing.
* :func:`generate_melody_track` derives every option from a free-text prompt,
  then optionally ornaments, transforms and accompanies the melody.

Example
-------
>>> import random
>>> result = generate_melody(key="C", scale="major", length=8, rng=random.Random(1))
>>> len(result.melody)
8

Design Notes
------------
The evaluation stored on :class:`GenerationResult` is the score that decided
whether refinement ran.  The refined melody is deliberately not re-scored.
"""

# ---------------------------------------------------------------
# Modification Summary
# ---------------------------------------------------------------
# * Option defaulting moved to :mod:`melody_composer.options` so every
#   fallback is explicit and tested.
# * Counterpoint requested from a prompt is now returned on the track
#   instead of being generated and discarded.
# * Electronic quantisation keeps at least a sixteenth so no note collapses
#   to zero length.
# ---------------------------------------------------------------

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

from .counterpoint import canonical_species, generate_counterpoint
from .dynamics import generate_velocity
from .feedback import evaluate_melody, refine_melody
from .harmony import chord_at, get_harmonic_adjustment
from .learning import LearnedPatterns, inspired_motifs, inspired_shape
from .motifs import DEFAULT_CATALOG, MotifCatalog, generate_motifs
from .note_utils import EvaluationScore, Melody, Note
from .options import GenerationOptions, resolve_options
from .ornaments import add_ornamentation
from .rhythm_engine import generate_duration
from .scales import constrain_to_scale, get_scale_notes
from .shapes import generate_shape
from .transformations import apply_transformations

__all__ = [
    "REFINE_THRESHOLD",
    "GENRE_PRESETS",
    "DEFAULT_GENRE",
    "GenerationResult",
    "MelodyTrack",
    "compose",
    "generate_melody",
    "canonical_genre",
    "generate_genre_melody",
    "apply_genre_style",
    "options_from_description",
    "generate_melody_track",
]

# Melodies scoring below this overall value get one refinement pass.
REFINE_THRESHOLD = 0.7

DEFAULT_GENRE = "pop"

GENRE_PRESETS: Dict[str, Dict[str, str]] = {
    "classical": {"shape": "arch", "complexity": "complex", "scale": "major"},
    "jazz": {"shape": "wave", "complexity": "complex", "scale": "mixolydian"},
    "pop": {"shape": "arch", "complexity": "medium", "scale": "major"},
    "blues": {"shape": "call_response", "complexity": "medium", "scale": "blues"},
    "electronic": {"shape": "zigzag", "complexity": "simple", "scale": "minor"},
    "folk": {"shape": "plateau", "complexity": "medium", "scale": "pentatonic_major"},
}

# Probability of a flattened "blue" note per genre.
BLUE_NOTE_PROBABILITY: Dict[str, float] = {"jazz": 0.1, "blues": 0.15}

# Electronic durations snap to this grid.
QUANTISE_STEP = 0.25

NOTES_PER_BAR = 4

# Keyword tables are scanned in order; the first match wins.
SCALE_KEYWORDS = (
    ("minor", "minor"),
    ("major", "major"),
    ("jazz", "mixolydian"),
    ("blues", "blues"),
    ("pentatonic", "pentatonic_minor"),
)
SHAPE_KEYWORDS = (
    ("ascending", "ascending"),
    ("descending", "descending"),
    ("arch", "arch"),
    ("wave", "wave"),
    ("rising", "ascending"),
    ("falling", "descending"),
)
ORNAMENT_KEYWORDS = (("trill", "trill"), ("grace", "grace"), ("turn", "turn"))
COUNTERPOINT_KEYWORDS = (
    ("first species", "first_species"),
    ("second species", "second_species"),
    ("third species", "third_species"),
    ("free", "free"),
)


@dataclass
class GenerationResult:
    """Melody produced by :func:`compose` with the score that judged it."""

    melody: Melody
    evaluation: EvaluationScore
    refined: bool
    options: GenerationOptions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notes": [note.to_dict() for note in self.melody],
            "evaluation": self.evaluation.to_dict(),
            "refined": self.refined,
        }


@dataclass
class MelodyTrack:
    """Result of :func:`generate_melody_track`."""

    notes: Melody
    evaluation: EvaluationScore
    genre: str
    options: GenerationOptions
    counterpoint: Optional[Melody] = None
    name: str = "Melody"
    settings: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "genre": self.genre,
            "notes": [note.to_dict() for note in self.notes],
            "evaluation": self.evaluation.to_dict(),
        }
        if self.counterpoint is not None:
            data["counterpoint"] = [note.to_dict() for note in self.counterpoint]
        return data


def compose(
    options: GenerationOptions,
    *,
    rng: random.Random,
    patterns: Optional[LearnedPatterns] = None,
    catalog: MotifCatalog = DEFAULT_CATALOG,
) -> GenerationResult:
    """Assemble, score and possibly refine a melody for ``options``.

    Parameters
    ----------
    options:
        Resolved generation parameters.
    rng:
        Source of randomness for every stochastic step.
    patterns:
        Optional library-learned motifs and shapes. They feed the motif stream
        and resolve ``shape="auto"``.
    catalog:
        Built-in motif pools.

    Returns
    -------
    GenerationResult
        Exactly ``options.length`` notes whose start times never decrease.
    """

    length = options.length
    progression = options.chord_progression
    scale_notes = get_scale_notes(options.key, options.scale)
    root = scale_notes[0]
    beat = options.beat_duration

    motifs = generate_motifs(
        length,
        options.complexity,
        rng=rng,
        catalog=catalog,
        external_pool=inspired_motifs(patterns),
    )
    curve = generate_shape(
        options.shape,
        length,
        inspired_shape=inspired_shape(patterns) if patterns is not None else None,
    )

    melody: Melody = []
    current_time = 0.0
    for i in range(length):
        motif_offset = motifs[i] if i < len(motifs) else 0
        harmonic_offset = 0
        chord = chord_at(progression, i, length)
        if chord is not None:
            harmonic_offset = get_harmonic_adjustment(chord, rng=rng)
        raw_offset = motif_offset + curve[i] + harmonic_offset
        pitch = root + constrain_to_scale(raw_offset, scale_notes)
        duration = generate_duration(i, length, options.complexity, rng=rng) * beat
        velocity = generate_velocity(i, length, options.mood, rng=rng)
        melody.append(Note(pitch, velocity, current_time, duration))
        current_time += duration

    evaluation = evaluate_melody(melody, progression)
    refined = False
    if evaluation.overall < REFINE_THRESHOLD:
        logging.info(
            "Melody scored %.3f (below %.2f); running a refinement pass",
            evaluation.overall,
            REFINE_THRESHOLD,
        )
        melody = refine_melody(
            melody,
            evaluation,
            rng=rng,
            chord_progression=progression,
            scale_notes=scale_notes,
        )
        refined = True
    return GenerationResult(melody, evaluation, refined, options)


def generate_melody(
    key: Any = None,
    scale: Optional[str] = None,
    length: Any = None,
    tempo: Any = None,
    shape: Optional[str] = None,
    complexity: Optional[str] = None,
    mood: Optional[str] = None,
    chord_progression: Optional[Sequence[str]] = None,
    *,
    rng: Optional[random.Random] = None,
    patterns: Optional[LearnedPatterns] = None,
    catalog: MotifCatalog = DEFAULT_CATALOG,
) -> GenerationResult:
    """Resolve raw options and return :func:`compose`'s result.

    Every argument is optional and falls back as described in
    :mod:`melody_composer.options`. ``rng`` defaults to a fresh unseeded
    generator; pass a seeded ``random.Random`` for reproducible output.
    """

    options = resolve_options(
        key=key,
        scale=scale,
        length=length,
        tempo=tempo,
        shape=shape,
        complexity=complexity,
        mood=mood,
        chord_progression=chord_progression,
    )
    return compose(options, rng=rng or random.Random(), patterns=patterns, catalog=catalog)


def canonical_genre(name: Optional[str]) -> str:
    """Return the preset name for ``name``; unknown genres map to ``pop``."""

    normalised = (name or "").strip().lower()
    if normalised in GENRE_PRESETS:
        return normalised
    if name:
        logging.debug("Unknown genre %r; using %s", name, DEFAULT_GENRE)
    return DEFAULT_GENRE


def generate_genre_melody(
    genre: Optional[str],
    *,
    rng: Optional[random.Random] = None,
    patterns: Optional[LearnedPatterns] = None,
    **options: Any,
) -> GenerationResult:
    """Generate a melody using the preset for ``genre``.

    The preset's shape, complexity and scale take precedence over the same
    keys in ``options``; every other option is passed through.
    """

    preset = GENRE_PRESETS[canonical_genre(genre)]
    merged = {**options, **preset}
    return generate_melody(rng=rng, patterns=patterns, **merged)


def _quantise(duration: float) -> float:
    steps = math.floor(duration / QUANTISE_STEP + 0.5)
    return max(1, steps) * QUANTISE_STEP


def apply_genre_style(notes: Sequence[Note], genre: Optional[str], *, rng: random.Random) -> Melody:
    """Return ``notes`` with the post-processing associated with ``genre``.

    ``jazz`` and ``blues`` flatten individual notes by a semitone (10% and 15%
    of the time), ``electronic`` snaps durations to quarter steps and other
    genres return an unchanged copy.
    """

    genre = canonical_genre(genre)
    if genre in BLUE_NOTE_PROBABILITY:
        probability = BLUE_NOTE_PROBABILITY[genre]
        return [
            replace(note, pitch=note.pitch - 1) if rng.random() < probability else replace(note)
            for note in notes
        ]
    if genre == "electronic":
        return [replace(note, duration=_quantise(note.duration)) for note in notes]
    return [replace(note) for note in notes]


def _detect(text: str, table: Sequence[tuple], default: str) -> str:
    for keyword, value in table:
        if keyword in text:
            return value
    return default


def options_from_description(prompt: str, style: Optional[str] = None) -> Dict[str, str]:
    """Return generation settings inferred from ``prompt`` and ``style``.

    The result always contains ``scale``, ``shape``, ``complexity``,
    ``genre``, ``ornament`` and ``counterpoint`` keys. Shape, ornament and
    counterpoint are detected from the prompt only; the remaining settings
    also look at ``style``.

    >>> options_from_description("A rising jazz line")["shape"]
    'ascending'
    """

    text = (prompt or "").lower()
    both = f"{(style or '').lower()} {text}"
    if "simple" in both:
        complexity = "simple"
    elif "complex" in both:
        complexity = "complex"
    else:
        complexity = "medium"
    genre = _detect(both, tuple((name, name) for name in GENRE_PRESETS), DEFAULT_GENRE)
    return {
        "scale": _detect(both, SCALE_KEYWORDS, "major"),
        "shape": _detect(text, SHAPE_KEYWORDS, "arch"),
        "complexity": complexity,
        "genre": genre,
        "ornament": _detect(text, ORNAMENT_KEYWORDS, "trill"),
        "counterpoint": _detect(text, COUNTERPOINT_KEYWORDS, "free"),
    }


def generate_melody_track(
    prompt: str,
    *,
    rng: Optional[random.Random] = None,
    key: Optional[str] = None,
    bars: Optional[float] = None,
    tempo: Optional[float] = None,
    mood: Optional[str] = None,
    style: Optional[str] = None,
    ornament: bool = False,
    counterpoint: bool = False,
    transformations: Sequence[str] = (),
    patterns: Optional[LearnedPatterns] = None,
) -> MelodyTrack:
    """Build a complete melody track from a free-text description.

    The pipeline runs in a fixed order:

    1.  Detect scale, shape, complexity and genre with
        :func:`options_from_description` and generate the melody
        (``bars * 4`` notes, 16 when ``bars`` is not given).
    2.  Apply the genre's post-processing.
    3.  Ornament the melody when ``ornament`` is set or the prompt mentions
        "ornament".
    4.  Derive a counterpoint line from the result when ``counterpoint`` is set
        or the prompt mentions "counterpoint".
    5.  Apply ``transformations`` in order to the main melody.

    @param prompt (str): Free-text description of the melody.
    @param rng (random.Random|None): Random source, unseeded when omitted.
    @param key (str|None): Key name, ``"C"`` when omitted.
    @param bars (float|None): Track length in bars of four notes.
    @returns MelodyTrack: Notes, score, genre and optional counterpoint.
    """

    rng = rng or random.Random()
    detected = options_from_description(prompt, style)
    text = (prompt or "").lower()
    length = int(bars * NOTES_PER_BAR) if bars else None

    result = generate_melody(
        key=key,
        scale=detected["scale"],
        length=length,
        tempo=tempo,
        shape=detected["shape"],
        complexity=detected["complexity"],
        mood=mood,
        rng=rng,
        patterns=patterns,
    )
    notes = apply_genre_style(result.melody, detected["genre"], rng=rng)

    if ornament or "ornament" in text:
        notes = add_ornamentation(notes, detected["ornament"], rng=rng)

    counter_line = None
    if counterpoint or "counterpoint" in text:
        species = canonical_species(detected["counterpoint"])
        counter_line = generate_counterpoint(notes, species, rng=rng)

    if transformations:
        notes = apply_transformations(notes, transformations)

    logging.info(
        "Generated %s melody track with %d notes (score %.3f)",
        detected["genre"],
        len(notes),
        result.evaluation.overall,
    )
    return MelodyTrack(
        notes=notes,
        evaluation=result.evaluation,
        genre=detected["genre"],
        options=result.options,
        counterpoint=counter_line,
        settings=detected,
    )
