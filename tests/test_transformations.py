"""Tests for value-returning melody transformations."""

import importlib
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

tf = importlib.import_module("melody_composer.transformations")
Note = importlib.import_module("melody_composer.note_utils").Note


def _melody():
    return [
        Note(60, 80, 0.0, 0.5),
        Note(64, 80, 0.5, 1.0),
        Note(67, 80, 1.5, 0.5),
        Note(62, 80, 2.0, 1.5),
    ]


def test_retrograde_is_a_pitch_involution():
    """Reversing twice restores the pitch order."""

    melody = _melody()
    twice = tf.retrograde_melody(tf.retrograde_melody(melody))
    assert [n.pitch for n in twice] == [n.pitch for n in melody]


def test_retrograde_recomputes_start_times():
    """Reversed notes are laid end to end from the first start time."""

    result = tf.retrograde_melody(_melody())
    assert [n.pitch for n in result] == [62, 67, 64, 60]
    assert [n.start_time for n in result] == [0.0, 1.5, 2.0, 3.0]


def test_invert_mirrors_about_first_pitch():
    """Intervals above the first note move below it."""

    assert [n.pitch for n in tf.invert_melody(_melody())] == [60, 56, 53, 58]


def test_augment_and_diminish():
    """Durations double or halve; pitches are untouched."""

    assert [n.duration for n in tf.augment_melody(_melody())] == [1.0, 2.0, 1.0, 3.0]
    assert [n.duration for n in tf.diminish_melody(_melody())] == [0.25, 0.5, 0.25, 0.75]


def test_named_transpose_moves_up_a_fifth():
    """``transpose`` by name adds seven semitones."""

    assert [n.pitch for n in tf.transform_melody(_melody(), "transpose")] == [67, 71, 74, 69]


def test_transformations_do_not_mutate_input():
    """Every helper returns new notes."""

    melody = _melody()
    result = tf.apply_transformations(melody, ["invert", "augment", "retrograde"])
    assert melody == _melody()
    assert all(a is not b for a, b in zip(result, melody))


def test_unknown_transformation_returns_copy():
    """Unrecognised names leave the melody unchanged."""

    melody = _melody()
    assert tf.transform_melody(melody, "shuffle") == melody


def test_empty_melody():
    """Empty melodies pass through every transformation."""

    for name in tf.TRANSFORMATIONS:
        assert tf.transform_melody([], name) == []
