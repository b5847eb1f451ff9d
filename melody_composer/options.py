"""Explicit option resolution for melody generation.

Callers pass loosely typed values (CLI strings, settings files, keyword
arguments) and :func:`resolve_options` turns them into a validated
:class:`GenerationOptions`.  Every field has a documented fallback so a bad
value degrades to a sensible default instead of raising:

============ =====================================================
Field        Fallback
============ =====================================================
key          ``"C"`` when missing or not a recognised pitch class
scale        ``"major"`` when missing or unknown
length       ``16`` when missing, non-integer or negative (0 is kept)
tempo        ``120`` when missing, non-numeric, infinite or not positive
shape        ``"arch"`` when missing or unknown (``"auto"`` is kept)
complexity   ``"medium"`` unless one of simple, medium, complex
mood         ``"neutral"`` when missing
chords       ``None`` when missing or empty
============ =====================================================

Example
-------
>>> resolve_options(key="h", length="8", tempo=-1).key
'C'
>>> resolve_options(length="8").length
8
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from .note_utils import NOTE_TO_SEMITONE
from .scales import canonical_scale
from .shapes import canonical_shape

__all__ = [
    "GenerationOptions",
    "COMPLEXITIES",
    "DEFAULT_KEY",
    "DEFAULT_LENGTH",
    "DEFAULT_TEMPO",
    "DEFAULT_COMPLEXITY",
    "DEFAULT_MOOD",
    "canonical_key",
    "resolve_options",
]

COMPLEXITIES = ("simple", "medium", "complex")

DEFAULT_KEY = "C"
DEFAULT_LENGTH = 16
DEFAULT_TEMPO = 120.0
DEFAULT_COMPLEXITY = "medium"
DEFAULT_MOOD = "neutral"


@dataclass(frozen=True)
class GenerationOptions:
    """Fully resolved parameters for :func:`melody_composer.generate_melody`."""

    key: str = DEFAULT_KEY
    scale: str = "major"
    length: int = DEFAULT_LENGTH
    tempo: float = DEFAULT_TEMPO
    shape: str = "arch"
    complexity: str = DEFAULT_COMPLEXITY
    mood: str = DEFAULT_MOOD
    chord_progression: Optional[Tuple[str, ...]] = None

    @property
    def beat_duration(self) -> float:
        """Length of one beat in seconds."""

        return 60.0 / self.tempo


def canonical_key(key: Any) -> str:
    """Return ``key`` with its letter upper-cased, or ``"C"`` when unknown."""

    if isinstance(key, str) and key.strip():
        candidate = key.strip()
        candidate = candidate[0].upper() + candidate[1:]
        if candidate in NOTE_TO_SEMITONE:
            return candidate
    if key is not None:
        logging.debug("Unknown key %r; using %s", key, DEFAULT_KEY)
    return DEFAULT_KEY


def _resolve_length(value: Any) -> int:
    if value is None:
        return DEFAULT_LENGTH
    try:
        length = int(value)
    except (TypeError, ValueError):
        logging.debug("Invalid length %r; using %d", value, DEFAULT_LENGTH)
        return DEFAULT_LENGTH
    if length < 0:
        logging.debug("Negative length %r; using %d", value, DEFAULT_LENGTH)
        return DEFAULT_LENGTH
    return length


def _resolve_tempo(value: Any) -> float:
    if value is None:
        return DEFAULT_TEMPO
    try:
        tempo = float(value)
    except (TypeError, ValueError):
        tempo = 0.0
    if not (math.isfinite(tempo) and tempo > 0):
        logging.debug("Invalid tempo %r; using %s", value, DEFAULT_TEMPO)
        return DEFAULT_TEMPO
    return tempo


def _resolve_chords(value: Any) -> Optional[Tuple[str, ...]]:
    if not value:
        return None
    if isinstance(value, str):
        value = value.split(",")
    chords = tuple(str(chord).strip() for chord in value if str(chord).strip())
    return chords or None


def resolve_options(
    key: Any = None,
    scale: Optional[str] = None,
    length: Any = None,
    tempo: Any = None,
    shape: Optional[str] = None,
    complexity: Optional[str] = None,
    mood: Optional[str] = None,
    chord_progression: Optional[Sequence[str]] = None,
) -> GenerationOptions:
    """Apply the fallback table to raw option values."""

    resolved_complexity = (complexity or "").strip().lower()
    if resolved_complexity not in COMPLEXITIES:
        if complexity:
            logging.debug("Unknown complexity %r; using %s", complexity, DEFAULT_COMPLEXITY)
        resolved_complexity = DEFAULT_COMPLEXITY

    return GenerationOptions(
        key=canonical_key(key),
        scale=canonical_scale(scale),
        length=_resolve_length(length),
        tempo=_resolve_tempo(tempo),
        shape=canonical_shape(shape),
        complexity=resolved_complexity,
        mood=(mood or DEFAULT_MOOD).strip().lower() or DEFAULT_MOOD,
        chord_progression=_resolve_chords(chord_progression),
    )
