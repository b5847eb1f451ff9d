"""Library learning: weighted motif and shape pools from analysed files.

Callers that have analysed a music library (outside this package) can turn
those analyses into a :class:`LearnedPatterns` value and pass it to
:func:`melody_composer.generate_melody`.  The generator then draws its primary
motif from :func:`inspired_motifs` 60% of the time and resolves the ``"auto"``
shape through :func:`inspired_shape`.

An analysis is a mapping with any of the following keys:

``key``, ``genre``, ``tempo``
    Recorded with weight one each.
``chords``
    Roman numerals (``"I"``, ``"vi"``, ``"vii°"`` ...). Every recognised
    numeral contributes its degrees as a motif, plus its first three degrees
    and its retrograde.
``shape``
    Explicit contour name.
``notes``
    Pitches (or mappings with a ``pitch`` key) whose overall contour is
    classified with :func:`analyze_melody_shape`.
``type``
    Free-form source tag copied onto every recorded entry.

``load_learned_patterns`` reads either a list of analyses or pre-aggregated
pools from JSON or YAML so experiments can reuse earlier library scans.
"""

# ---------------------------------------------------------------
# Modification Summary
# ---------------------------------------------------------------
# * Chord-inspired motifs are stored as scale-degree offsets relative to the
#   key root so they combine with shape offsets like the built-in catalogue.
# * Learned state moved out of the generator into the immutable
#   ``LearnedPatterns`` value passed explicitly by callers.
# ---------------------------------------------------------------

from __future__ import annotations

import json
import logging
import os
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

import yaml

from .harmony import roman_numeral_degrees
from .shapes import DEFAULT_SHAPE, SHAPES

__all__ = [
    "Weighted",
    "LearnedPatterns",
    "EMPTY_PATTERNS",
    "MAX_INSPIRED_MOTIFS",
    "motifs_from_chords",
    "analyze_melody_shape",
    "learn_from_library",
    "most_common",
    "inspired_motifs",
    "inspired_shape",
    "load_learned_patterns",
]

MAX_INSPIRED_MOTIFS = 10


@dataclass(frozen=True)
class Weighted:
    """A learned value with its weight and optional source tag."""

    value: Any
    weight: float = 1.0
    source: Optional[str] = None


@dataclass(frozen=True)
class LearnedPatterns:
    """Immutable pools of patterns learned from a library."""

    motifs: Tuple[Weighted, ...] = ()
    shapes: Tuple[Weighted, ...] = ()
    harmonies: Tuple[Weighted, ...] = ()
    keys: Tuple[Weighted, ...] = ()
    genres: Tuple[Weighted, ...] = ()
    tempos: Tuple[Weighted, ...] = ()


EMPTY_PATTERNS = LearnedPatterns()


def motifs_from_chords(numerals: Sequence[str]) -> List[Tuple[int, ...]]:
    """Return chord-inspired motifs for ``numerals``.

    Unknown numerals are skipped.
    """

    motifs: List[Tuple[int, ...]] = []
    for numeral in numerals:
        degrees = roman_numeral_degrees(str(numeral))
        if not degrees:
            continue
        motifs.append(tuple(degrees))
        if len(degrees) >= 3:
            motifs.append(tuple(degrees[:3]))
            motifs.append(tuple(reversed(degrees)))
    return motifs


def analyze_melody_shape(pitches: Sequence[int]) -> Optional[str]:
    """Classify the overall contour of ``pitches``.

    Returns ``arch`` when the line ends near where it started relative to its
    range, otherwise ``ascending`` or ``descending``. Fewer than three pitches
    cannot be classified and return ``None``.
    """

    if len(pitches) < 3:
        return None
    span = max(pitches) - min(pitches)
    direction = pitches[-1] - pitches[0]
    if abs(direction) < span * 0.3:
        return "arch"
    return "ascending" if direction > 0 else "descending"


def _pitches(notes: Iterable[Any]) -> List[int]:
    result = []
    for note in notes:
        if isinstance(note, Mapping):
            note = note.get("pitch")
        if isinstance(note, (int, float)):
            result.append(int(note))
    return result


def learn_from_library(analyses: Iterable[Mapping[str, Any]]) -> LearnedPatterns:
    """Aggregate ``analyses`` into a :class:`LearnedPatterns` value."""

    motifs: List[Weighted] = []
    shapes: List[Weighted] = []
    harmonies: List[Weighted] = []
    keys: List[Weighted] = []
    genres: List[Weighted] = []
    tempos: List[Weighted] = []

    count = 0
    for analysis in analyses:
        count += 1
        source = analysis.get("type")
        if analysis.get("key"):
            keys.append(Weighted(analysis["key"], source=source))
        if analysis.get("genre"):
            genres.append(Weighted(analysis["genre"], source=source))
        if analysis.get("tempo"):
            tempos.append(Weighted(analysis["tempo"], source=source))

        chords = analysis.get("chords") or []
        if chords:
            harmonies.append(Weighted(tuple(chords), source=source))
            motifs.extend(Weighted(m, source=source) for m in motifs_from_chords(chords))

        shape = analysis.get("shape")
        if not shape and analysis.get("notes"):
            shape = analyze_melody_shape(_pitches(analysis["notes"]))
        if isinstance(shape, str) and shape in SHAPES:
            shapes.append(Weighted(shape, source=source))

    logging.info(
        "Learned %d motifs, %d shapes and %d harmonies from %d analyses",
        len(motifs),
        len(shapes),
        len(harmonies),
        count,
    )
    return LearnedPatterns(
        motifs=tuple(motifs),
        shapes=tuple(shapes),
        harmonies=tuple(harmonies),
        keys=tuple(keys),
        genres=tuple(genres),
        tempos=tuple(tempos),
    )


def _aggregate(entries: Iterable[Weighted]) -> "OrderedDict[Hashable, float]":
    totals: "OrderedDict[Hashable, float]" = OrderedDict()
    for entry in entries:
        value = tuple(entry.value) if isinstance(entry.value, list) else entry.value
        totals[value] = totals.get(value, 0.0) + entry.weight
    return totals


def most_common(entries: Iterable[Weighted], default: Any = None) -> Any:
    """Return the value with the largest total weight.

    Ties go to the value seen first. Empty pools return ``default``.
    """

    totals = _aggregate(entries)
    if not totals:
        return default
    return max(totals.items(), key=lambda item: item[1])[0]


def inspired_motifs(
    patterns: Optional[LearnedPatterns], limit: int = MAX_INSPIRED_MOTIFS
) -> List[Tuple[int, ...]]:
    """Return up to ``limit`` distinct motifs ordered by total weight."""

    if patterns is None or not patterns.motifs:
        return []
    totals = _aggregate(patterns.motifs)
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [tuple(motif) for motif, _ in ranked[:limit]]


def inspired_shape(patterns: Optional[LearnedPatterns]) -> str:
    """Return the heaviest learned shape or :data:`DEFAULT_SHAPE`."""

    if patterns is None:
        return DEFAULT_SHAPE
    return most_common(patterns.shapes, DEFAULT_SHAPE)


def _check_motif(value: Any) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or not value:
        raise ValueError(f"motif pattern must be a non-empty list of integers: {value!r}")
    if not all(isinstance(n, int) and not isinstance(n, bool) for n in value):
        raise ValueError(f"motif pattern must contain only integers: {value!r}")
    return tuple(value)


def _check_shape(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"shape must be a string: {value!r}")
    return value


# Value checks for pools the generator consumes directly.
_VALUE_CHECKS = {"pattern": _check_motif, "shape": _check_shape}


def _weighted_entries(raw: Any, value_key: str) -> Tuple[Weighted, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValueError(f"'{value_key}' entries must be a list")
    check = _VALUE_CHECKS.get(value_key)
    entries = []
    for item in raw:
        if isinstance(item, Mapping):
            if value_key not in item:
                raise ValueError(f"entry missing '{value_key}': {item!r}")
            value = item[value_key]
            try:
                weight = float(item.get("weight", 1.0))
            except (TypeError, ValueError) as exc:
                raise ValueError(f"invalid weight in {item!r}") from exc
            source = item.get("source")
        else:
            value, weight, source = item, 1.0, None
        if check is not None:
            value = check(value)
        elif isinstance(value, list):
            value = tuple(value)
        entries.append(Weighted(value, weight, source))
    return tuple(entries)


def load_learned_patterns(path: str) -> LearnedPatterns:
    """Read a :class:`LearnedPatterns` value from a JSON or YAML file.

    The file holds either ``{"analyses": [...]}`` (passed through
    :func:`learn_from_library`) or pre-aggregated pools such as
    ``{"motifs": [{"pattern": [0, 2, 4], "weight": 3}], "shapes": ["wave"]}``.

    Raises
    ------
    ValueError
        If the file cannot be parsed or does not describe pattern pools.
    """

    ext = os.path.splitext(path)[1].lower()
    with open(path, "r", encoding="utf-8") as fh:
        try:
            if ext == ".json":
                data = json.load(fh)
            elif ext in {".yaml", ".yml"}:
                data = yaml.safe_load(fh)
            else:
                raise ValueError(f"unsupported pattern file type: {ext or path}")
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ValueError(f"invalid pattern file: {path}") from exc

    if not isinstance(data, Mapping):
        raise ValueError("pattern file must contain a mapping")
    if "analyses" in data:
        analyses = data["analyses"]
        if not isinstance(analyses, list) or not all(isinstance(a, Mapping) for a in analyses):
            raise ValueError("'analyses' must be a list of mappings")
        return learn_from_library(analyses)

    return LearnedPatterns(
        motifs=_weighted_entries(data.get("motifs"), "pattern"),
        shapes=_weighted_entries(data.get("shapes"), "shape"),
        harmonies=_weighted_entries(data.get("harmonies"), "progression"),
        keys=_weighted_entries(data.get("keys"), "key"),
        genres=_weighted_entries(data.get("genres"), "genre"),
        tempos=_weighted_entries(data.get("tempos"), "tempo"),
    )
