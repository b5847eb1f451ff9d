"""Melody evaluation and criterion-gated refinement.

This module scores a finished melody on five independent heuristics and
offers a single-pass refiner that repairs whichever criteria scored poorly.

Criteria
--------
``contour``
    Balance between direction changes (about 30% of the notes is ideal) and
    overall melodic movement.
``rhythm``
    Variety of distinct durations traded off against their spread.
``harmony``
    Share of notes sitting within a semitone of the active chord's tones.
``repetition``
    Share of distinct three-note pitch windows that recur, clamped to
    ``[0.3, 0.8]`` so neither total repetition nor total novelty is rewarded.
``range``
    Distance between the lowest and highest pitch; one to two octaves is
    ideal.

The weighted ``overall`` score combines them with the weights in
:data:`CRITERIA_WEIGHTS`.  Each criterion is clamped to ``[0, 1]`` so the
overall score always lies in that interval.

Example
-------
>>> from melody_composer.note_utils import Note
>>> melody = [Note(p, 80, i * 0.5, 0.5) for i, p in enumerate([60, 64, 62, 67])]
>>> evaluate_melody(melody).harmony
0.7
"""

# Changelog
# ---------
# - ``refine_melody`` works on copies of the incoming notes so a melody shared
#   with a counterpoint or ornamentation pass is never modified behind the
#   caller's back.
# - Contour refinement re-quantises perturbed pitches when scale notes are
#   supplied, keeping refined melodies inside the requested scale.

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

import numpy as np

from .harmony import chord_at, get_chord_tones
from .note_utils import EvaluationScore, Melody, Note, pitch_class
from .scales import constrain_to_scale

__all__ = [
    "CRITERIA_WEIGHTS",
    "NO_HARMONY_SCORE",
    "REFINE_THRESHOLDS",
    "evaluate_contour",
    "evaluate_rhythm",
    "evaluate_harmony",
    "evaluate_repetition",
    "evaluate_range",
    "evaluate_melody",
    "refine_contour",
    "refine_harmony",
    "refine_rhythm",
    "add_motif_repetition",
    "refine_melody",
]

# ---------------------------------------------------------------------------
# Scoring constants
# ---------------------------------------------------------------------------

CRITERIA_WEIGHTS: Dict[str, float] = {
    "contour": 0.25,
    "rhythm": 0.20,
    "harmony": 0.25,
    "repetition": 0.15,
    "range": 0.15,
}

# Score returned for harmony when no chord progression is supplied.
NO_HARMONY_SCORE = 0.7

# Neutral score for melodies too short to judge a criterion.
NEUTRAL_SCORE = 0.5

IDEAL_RANGE = (12, 24)
REPETITION_BOUNDS = (0.3, 0.8)
WINDOW = 3

# A criterion is refined when its score falls below this value.
REFINE_THRESHOLDS: Dict[str, float] = {
    "contour": 0.6,
    "harmony": 0.6,
    "rhythm": 0.6,
    "repetition": 0.4,
}

CONTOUR_PROBABILITY = 0.3
HARMONY_PROBABILITY = 0.4
RHYTHM_PROBABILITY = 0.2
MIN_DURATION = 0.25


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return float(max(low, min(high, value)))


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def evaluate_contour(melody: Sequence[Note]) -> float:
    """Score the up/down shape of ``melody``."""

    n = len(melody)
    if n < 3:
        return NEUTRAL_SCORE
    deltas = np.diff(np.array([note.pitch for note in melody], dtype=float))
    changes = int(np.count_nonzero(deltas[1:] * deltas[:-1] < 0))
    movement = float(np.abs(deltas).sum())

    direction_score = max(0.0, 1 - abs(changes - n * 0.3) / n)
    movement_score = min(1.0, movement / (n * 7))
    return _clamp((direction_score + movement_score) / 2)


def evaluate_rhythm(melody: Sequence[Note]) -> float:
    """Score the variety and consistency of note durations."""

    if len(melody) < 2:
        return NEUTRAL_SCORE
    durations = np.array([note.duration for note in melody], dtype=float)
    mean = float(durations.mean())
    variety_score = min(1.0, len(set(durations.tolist())) / 4)
    consistency_score = 1 - float(durations.var()) / (mean * mean) if mean > 0 else 0.0
    return _clamp((variety_score + consistency_score) / 2)


def evaluate_harmony(melody: Sequence[Note], chord_progression: Optional[Sequence[str]] = None) -> float:
    """Return the fraction of notes within a semitone of their chord's tones.

    Pitch classes are compared without wrapping, so ``B`` (11) is not
    considered adjacent to ``C`` (0).
    """

    if not chord_progression or not melody:
        return NO_HARMONY_SCORE
    total = len(melody)
    hits = 0
    for index, note in enumerate(melody):
        tones = get_chord_tones(chord_at(chord_progression, index, total))
        pc = pitch_class(note.pitch)
        if any(abs(pc - tone) <= 1 for tone in tones):
            hits += 1
    return _clamp(hits / total)


def evaluate_repetition(melody: Sequence[Note]) -> float:
    """Score how many three-note pitch windows recur."""

    if len(melody) < 4:
        return NEUTRAL_SCORE
    pitches = [note.pitch for note in melody]
    counts = Counter(tuple(pitches[i : i + WINDOW]) for i in range(len(pitches) - WINDOW + 1))
    repeated = sum(1 for count in counts.values() if count > 1)
    low, high = REPETITION_BOUNDS
    return max(low, min(high, repeated / len(counts)))


def evaluate_range(melody: Sequence[Note]) -> float:
    """Score the pitch span of ``melody``; one to two octaves scores ``1.0``."""

    if not melody:
        return NEUTRAL_SCORE
    pitches = [note.pitch for note in melody]
    span = max(pitches) - min(pitches)
    ideal_min, ideal_max = IDEAL_RANGE
    if span < ideal_min:
        return _clamp(span / ideal_min)
    if span > ideal_max:
        return _clamp(max(0.3, 1 - (span - ideal_max) / ideal_max))
    return 1.0


def evaluate_melody(
    melody: Sequence[Note], chord_progression: Optional[Sequence[str]] = None
) -> EvaluationScore:
    """Return every criterion score plus the weighted overall score.

    Parameters
    ----------
    melody:
        Notes to evaluate. May be empty.
    chord_progression:
        Optional chord symbols spread evenly across the melody.

    Returns
    -------
    EvaluationScore
        Scores in ``[0, 1]``.
    """

    scores = {
        "contour": evaluate_contour(melody),
        "rhythm": evaluate_rhythm(melody),
        "harmony": evaluate_harmony(melody, chord_progression),
        "repetition": evaluate_repetition(melody),
        "range": evaluate_range(melody),
    }
    overall = sum(scores[name] * weight for name, weight in CRITERIA_WEIGHTS.items())
    return EvaluationScore(overall=_clamp(overall), **scores)


# ---------------------------------------------------------------------------
# Refinement
# ---------------------------------------------------------------------------

def refine_contour(
    melody: List[Note], *, rng: random.Random, scale_notes: Optional[Sequence[int]] = None
) -> None:
    """Perturb interior notes of three-note monotonic runs in place.

    Each qualifying note moves by a random integer in ``[-2, 2]`` with
    probability :data:`CONTOUR_PROBABILITY`. When ``scale_notes`` is given the
    result is snapped back onto the scale.
    """

    for i in range(1, len(melody) - 1):
        prev, curr, nxt = melody[i - 1].pitch, melody[i].pitch, melody[i + 1].pitch
        monotonic = (curr > prev and nxt > curr) or (curr < prev and nxt < curr)
        if monotonic and rng.random() < CONTOUR_PROBABILITY:
            pitch = curr + rng.randint(-2, 2)
            if scale_notes:
                root = scale_notes[0]
                pitch = root + constrain_to_scale(pitch - root, scale_notes)
            melody[i].pitch = pitch


def refine_harmony(melody: List[Note], chord_progression: Sequence[str], *, rng: random.Random) -> None:
    """Snap notes far from their chord to the nearest chord tone in place.

    A note is eligible when its pitch class lies more than a semitone from the
    nearest tone; it is then moved with probability
    :data:`HARMONY_PROBABILITY`, keeping its octave.
    """

    total = len(melody)
    for index, note in enumerate(melody):
        tones = get_chord_tones(chord_at(chord_progression, index, total))
        pc = pitch_class(note.pitch)
        closest = tones[0]
        for tone in tones:
            if abs(pc - tone) < abs(pc - closest):
                closest = tone
        if abs(pc - closest) > 1 and rng.random() < HARMONY_PROBABILITY:
            note.pitch = (note.pitch // 12) * 12 + closest


def refine_rhythm(melody: List[Note], *, rng: random.Random) -> None:
    """Jitter about a fifth of the durations by up to a quarter second."""

    for note in melody:
        if rng.random() < RHYTHM_PROBABILITY:
            variation = rng.uniform(-0.25, 0.25)
            note.duration = max(MIN_DURATION, note.duration + variation)


def add_motif_repetition(melody: List[Note], *, rng: random.Random) -> None:
    """Copy a random three-note window two notes past its own end.

    Melodies shorter than six notes are left alone, as is any copy that would
    run past the final note.
    """

    if len(melody) < WINDOW * 2:
        return
    start = rng.randrange(max(1, len(melody) - WINDOW * 2))
    repeat_start = start + WINDOW + 2
    if repeat_start + WINDOW <= len(melody):
        for i in range(WINDOW):
            melody[repeat_start + i].pitch = melody[start + i].pitch


def refine_melody(
    melody: Sequence[Note],
    evaluation: EvaluationScore,
    *,
    rng: random.Random,
    chord_progression: Optional[Sequence[str]] = None,
    scale_notes: Optional[Sequence[int]] = None,
) -> Melody:
    """Return a repaired copy of ``melody``.

    Only criteria scoring below :data:`REFINE_THRESHOLDS` are touched, in the
    order contour, harmony, rhythm, repetition. The result is not
    re-evaluated. Start times are left as generated even when durations move.
    """

    refined = [replace(note) for note in melody]
    if evaluation.contour < REFINE_THRESHOLDS["contour"]:
        logging.debug("Refining contour (score %.3f)", evaluation.contour)
        refine_contour(refined, rng=rng, scale_notes=scale_notes)
    if evaluation.harmony < REFINE_THRESHOLDS["harmony"] and chord_progression:
        logging.debug("Refining harmony (score %.3f)", evaluation.harmony)
        refine_harmony(refined, chord_progression, rng=rng)
    if evaluation.rhythm < REFINE_THRESHOLDS["rhythm"]:
        logging.debug("Refining rhythm (score %.3f)", evaluation.rhythm)
        refine_rhythm(refined, rng=rng)
    if evaluation.repetition < REFINE_THRESHOLDS["repetition"]:
        logging.debug("Adding motif repetition (score %.3f)", evaluation.repetition)
        add_motif_repetition(refined, rng=rng)
    return refined
