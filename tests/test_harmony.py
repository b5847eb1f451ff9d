"""Tests for chord lookup and harmonic biasing."""

import importlib
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

harmony = importlib.import_module("melody_composer.harmony")


def test_known_chords():
    """Major, minor and diminished triads resolve to pitch classes."""

    assert harmony.get_chord_tones("C") == (0, 4, 7)
    assert harmony.get_chord_tones("Dm") == (2, 5, 9)
    assert harmony.get_chord_tones("Bdim") == (11, 2, 5)
    assert harmony.get_chord_tones("Bb") == (10, 2, 5)


def test_chord_lookup_is_case_insensitive():
    """``am`` and ``Am`` are the same chord."""

    assert harmony.get_chord_tones("am") == harmony.get_chord_tones("Am") == (9, 0, 4)


def test_unknown_chord_falls_back_to_c_major():
    """Unknown symbols resolve to the C major triad."""

    assert harmony.get_chord_tones("Unknown") == (0, 4, 7)
    assert harmony.get_chord_tones(None) == (0, 4, 7)


def test_chord_index_spreads_progression():
    """Chords are spread evenly across the melody."""

    assert [harmony.chord_index(i, 8, 2) for i in range(8)] == [0, 0, 0, 0, 1, 1, 1, 1]
    assert [harmony.chord_index(i, 4, 3) for i in range(4)] == [0, 0, 1, 2]


def test_chord_index_guards_against_zero():
    """Empty progressions and melodies never divide by zero."""

    assert harmony.chord_index(3, 0, 2) == 0
    assert harmony.chord_index(3, 8, 0) == 0
    assert harmony.chord_at([], 2, 8) is None
    assert harmony.chord_at(None, 2, 8) is None


def test_harmonic_adjustment_is_a_chord_tone():
    """The nudge is always one of the active chord's tones."""

    rng = random.Random(2)
    for _ in range(30):
        assert harmony.get_harmonic_adjustment("F", rng=rng) in (5, 9, 0)


def test_roman_numeral_degrees():
    """Roman numerals map to degree tuples with ASCII aliases for vii°."""

    assert harmony.roman_numeral_degrees("V") == (7, 11, 2)
    assert harmony.roman_numeral_degrees("viio") == harmony.roman_numeral_degrees("vii°")
    assert harmony.roman_numeral_degrees("IX") is None
