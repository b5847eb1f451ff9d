"""Parametric pitch-contour generators.

Each shape is a pure function ``shape(length) -> List[float]`` returning one
pitch offset per melody position.  The assembler adds these offsets to the
motif stream before quantising to the scale, so the shape decides the broad
up/down trajectory while motifs supply local detail.

Available shapes: ``ascending``, ``descending``, ``arch``, ``wave``,
``zigzag``, ``plateau``, ``call_response`` and ``spiral``.  Unknown names fall
back to ``arch``; ``"auto"`` defers to a library-inspired shape name supplied
by the caller.

Example
-------
>>> ascending(4)
[0.0, 2.0, 4.0, 6.0]
>>> generate_shape("zigzag", 5)
[0.0, 0.0, 4.0, 4.0, 8.0]
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np

__all__ = [
    "DEFAULT_SHAPE",
    "AUTO_SHAPE",
    "SHAPES",
    "ascending",
    "descending",
    "arch",
    "wave",
    "zigzag",
    "plateau",
    "call_response",
    "spiral",
    "canonical_shape",
    "generate_shape",
]

DEFAULT_SHAPE = "arch"
AUTO_SHAPE = "auto"


def _check_length(length: int) -> None:
    if length < 0:
        raise ValueError("length must be non-negative")


def ascending(length: int) -> List[float]:
    """Rise by two semitones per note."""

    _check_length(length)
    return [float(i * 2) for i in range(length)]


def descending(length: int) -> List[float]:
    """Fall by two semitones per note, ending on zero."""

    _check_length(length)
    return [float((length - 1 - i) * -2) for i in range(length)]


def arch(length: int) -> List[float]:
    """Rise up to the midpoint then fall back toward zero."""

    _check_length(length)
    midpoint = length // 2
    return [float(i * 2 if i <= midpoint else (length - 1 - i) * 2) for i in range(length)]


def wave(length: int) -> List[float]:
    """Sine wave with an amplitude of four semitones."""

    _check_length(length)
    return (np.sin(np.arange(length) * 0.5) * 4).tolist()


def zigzag(length: int) -> List[float]:
    """Hold every even step for one extra note, producing a stair pattern."""

    _check_length(length)
    return [float(i * 2 if i % 2 == 0 else (i - 1) * 2) for i in range(length)]


def plateau(length: int) -> List[float]:
    """Climb for the first 30%, hold until 70%, then step back down."""

    _check_length(length)
    start = math.floor(length * 0.3)
    end = math.floor(length * 0.7)
    shape = []
    for i in range(length):
        if i < start:
            shape.append(float(i))
        elif i <= end:
            shape.append(float(start))
        else:
            shape.append(float(start - (i - end)))
    return shape


def call_response(length: int) -> List[float]:
    """Ascending call over 40% of the length answered by a descending response."""

    _check_length(length)
    call_length = math.floor(length * 0.4)
    response_length = length - call_length
    call = [i * 1.5 for i in range(call_length)]
    response = [(response_length - 1 - i) * -1.5 for i in range(response_length)]
    return [float(v) for v in call + response]


def spiral(length: int) -> List[float]:
    """Two full turns of a combined sine/cosine curve."""

    _check_length(length)
    if length == 0:
        return []
    angles = np.arange(length) / length * math.pi * 4
    return (np.sin(angles) * 3 + np.cos(angles) * 2).tolist()


SHAPES: Dict[str, Callable[[int], List[float]]] = {
    "ascending": ascending,
    "descending": descending,
    "arch": arch,
    "wave": wave,
    "zigzag": zigzag,
    "plateau": plateau,
    "call_response": call_response,
    "spiral": spiral,
}


def canonical_shape(name: Optional[str]) -> str:
    """Return the table name for ``name``; ``auto`` is preserved.

    Hyphens and spaces are accepted in place of underscores. Unknown or
    missing names return :data:`DEFAULT_SHAPE`.
    """

    if not name:
        return DEFAULT_SHAPE
    normalised = name.strip().lower().replace("-", "_").replace(" ", "_")
    if normalised == AUTO_SHAPE or normalised in SHAPES:
        return normalised
    logging.debug("Unknown shape %r; falling back to %s", name, DEFAULT_SHAPE)
    return DEFAULT_SHAPE


def generate_shape(
    name: Optional[str], length: int, *, inspired_shape: Optional[str] = None
) -> List[float]:
    """Return the contour curve for ``name`` over ``length`` positions.

    ``name == "auto"`` uses ``inspired_shape`` (typically the most common shape
    learned from a library) and falls back to ``arch`` when none is given.
    """

    shape_name = canonical_shape(name)
    if shape_name == AUTO_SHAPE:
        shape_name = canonical_shape(inspired_shape)
        if shape_name == AUTO_SHAPE:
            shape_name = DEFAULT_SHAPE
    return SHAPES[shape_name](length)
