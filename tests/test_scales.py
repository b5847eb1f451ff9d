"""Tests for scale lookup and quantisation."""

import importlib
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

scales = importlib.import_module("melody_composer.scales")


def test_major_scale_from_key_name():
    """Key names are placed in octave four."""

    assert scales.get_scale_notes("C", "major") == [60, 62, 64, 65, 67, 69, 71, 72]


def test_integer_root_passes_through():
    """A MIDI pitch root is used unchanged."""

    assert scales.get_scale_notes(57, "minor")[:3] == [57, 59, 60]


def test_unknown_scale_falls_back_to_major():
    """Unrecognised names silently use the major scale."""

    assert scales.get_scale_notes("C", "klingon") == scales.get_scale_notes("C", "major")


def test_scale_names_accept_hyphens_and_case():
    """``Pentatonic-Major`` resolves to the ``pentatonic_major`` table."""

    assert scales.canonical_scale("Pentatonic-Major") == "pentatonic_major"
    assert scales.get_scale_notes("D", "pentatonic-major") == [62, 64, 66, 69, 71, 74]


def test_constrain_ties_prefer_first_scale_member():
    """Offset 1 is equidistant from 0 and 2 in C major; 0 wins."""

    notes = scales.get_scale_notes("C", "major")
    assert scales.constrain_to_scale(1, notes) == 0
    assert scales.constrain_to_scale(8, notes) == 7


def test_constrain_does_not_wrap_octaves():
    """Targets above or below the table clamp to its ends."""

    notes = scales.get_scale_notes("C", "major")
    assert scales.constrain_to_scale(19, notes) == 12
    assert scales.constrain_to_scale(-5, notes) == 0


def test_constrain_handles_float_offsets():
    """Shape offsets are floats and still map onto the scale."""

    notes = scales.get_scale_notes("C", "major")
    assert scales.constrain_to_scale(3.9, notes) == 4


@pytest.mark.parametrize("scale_name", sorted(scales.SCALE_PATTERNS))
def test_constrained_offsets_are_scale_members(scale_name):
    """Every quantised offset belongs to the scale's offset table."""

    notes = scales.get_scale_notes("F#", scale_name)
    allowed = set(scales.SCALE_PATTERNS[scale_name])
    for offset in range(-24, 25):
        assert scales.constrain_to_scale(offset, notes) in allowed


def test_constrain_empty_scale_returns_zero():
    """An empty scale cannot be quantised against and yields ``0``."""

    assert scales.constrain_to_scale(5, []) == 0
