"""Tests for melody assembly, genre presets and description-driven tracks."""

import importlib
import logging
import math
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

composer = importlib.import_module("melody_composer.composer")
learning = importlib.import_module("melody_composer.learning")
note_utils = importlib.import_module("melody_composer.note_utils")

C_MAJOR = {0, 2, 4, 5, 7, 9, 11}


@pytest.mark.parametrize("length", [0, 1, 5, 16, 33])
def test_generate_melody_length_and_timing(length):
    """The melody has exactly ``length`` notes with non-decreasing onsets."""

    result = composer.generate_melody(key="G", scale="dorian", length=length, rng=random.Random(length))
    melody = result.melody
    assert len(melody) == length
    starts = [n.start_time for n in melody]
    assert starts == sorted(starts)
    if melody:
        assert melody[0].start_time == 0.0


@pytest.mark.parametrize("seed", range(15))
def test_c_major_pitches_stay_in_scale(seed):
    """Every pitch of a C major melody is a C major pitch class."""

    result = composer.generate_melody(
        key="C",
        scale="major",
        length=24,
        shape=random.Random(seed).choice(["arch", "wave", "spiral", "zigzag"]),
        complexity="complex",
        chord_progression=["C", "Am", "F", "G"],
        rng=random.Random(seed),
    )
    assert {n.pitch % 12 for n in result.melody} <= C_MAJOR


def test_seeded_generation_is_deterministic():
    """Equal seeds reproduce identical melodies and scores."""

    kwargs = dict(key="D", scale="minor", length=12, mood="energetic", chord_progression=["Dm", "A"])
    first = composer.generate_melody(rng=random.Random(42), **kwargs)
    second = composer.generate_melody(rng=random.Random(42), **kwargs)
    assert first.melody == second.melody
    assert first.evaluation == second.evaluation


@pytest.mark.parametrize("seed", range(10))
def test_ascending_scenario(seed):
    """An ascending C major line rises and produces a finite score."""

    result = composer.generate_melody(
        key="C",
        scale="major",
        length=8,
        tempo=120,
        shape="ascending",
        complexity="simple",
        rng=random.Random(seed),
    )
    pitches = [n.pitch for n in result.melody]
    assert len(pitches) == 8
    assert pitches[4] > pitches[0]
    assert math.isfinite(result.evaluation.overall)
    assert 0.0 <= result.evaluation.overall <= 1.0


def test_durations_scale_with_tempo():
    """At 60 BPM a beat lasts one second, so durations are beat values."""

    result = composer.generate_melody(length=16, tempo=60, complexity="medium", rng=random.Random(3))
    if not result.refined:
        assert {n.duration for n in result.melody} <= {0.5, 1.0, 1.5}


def test_low_score_triggers_single_refinement(monkeypatch, caplog):
    """Scores below 0.7 run the refiner once and keep the original score."""

    low = note_utils.EvaluationScore(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    calls = []

    def fake_refine(melody, evaluation, **kwargs):
        calls.append(evaluation)
        return list(melody)

    monkeypatch.setattr(composer, "evaluate_melody", lambda melody, chords=None: low)
    monkeypatch.setattr(composer, "refine_melody", fake_refine)
    with caplog.at_level(logging.INFO):
        result = composer.generate_melody(length=8, rng=random.Random(1))
    assert result.refined
    assert result.evaluation is low
    assert calls == [low]
    assert "refinement" in caplog.text


def test_high_score_skips_refinement(monkeypatch):
    """Melodies scoring at least 0.7 are returned unrefined."""

    high = note_utils.EvaluationScore(1.0, 1.0, 1.0, 1.0, 1.0, 0.7)
    monkeypatch.setattr(composer, "evaluate_melody", lambda melody, chords=None: high)
    result = composer.generate_melody(length=8, rng=random.Random(1))
    assert not result.refined


def test_auto_shape_uses_learned_shape(monkeypatch):
    """``shape="auto"`` asks the learned patterns for a contour."""

    seen = {}
    original = composer.generate_shape

    def spy(name, length, *, inspired_shape=None):
        seen["inspired"] = inspired_shape
        return original(name, length, inspired_shape=inspired_shape)

    monkeypatch.setattr(composer, "generate_shape", spy)
    patterns = learning.learn_from_library([{"shape": "spiral"}, {"chords": ["I"]}])
    composer.generate_melody(length=8, shape="auto", patterns=patterns, rng=random.Random(2))
    assert seen["inspired"] == "spiral"


def test_genre_preset_uses_genre_scale():
    """Blues melodies without chords stay in the blues scale."""

    blues = {0, 3, 5, 6, 7, 10}
    for seed in range(10):
        result = composer.generate_genre_melody("blues", key="C", length=16, rng=random.Random(seed))
        assert result.options.scale == "blues"
        assert result.options.shape == "call_response"
        assert {n.pitch % 12 for n in result.melody} <= blues


def test_unknown_genre_uses_pop():
    """Unknown genres fall back to the pop preset."""

    result = composer.generate_genre_melody("polka", length=4, rng=random.Random(0))
    assert result.options.complexity == "medium"
    assert result.options.scale == "major"
    assert composer.canonical_genre("polka") == "pop"


def test_electronic_style_quantises_durations():
    """Electronic durations snap to quarter steps and never vanish."""

    notes = [note_utils.Note(60, 80, 0.0, d) for d in (0.1, 0.3, 0.6, 1.37)]
    styled = composer.apply_genre_style(notes, "electronic", rng=random.Random(0))
    assert [n.duration for n in styled] == [0.25, 0.25, 0.5, 1.25]
    assert [n.duration for n in notes] == [0.1, 0.3, 0.6, 1.37]


def test_blues_style_flattens_some_notes():
    """Blues styling only ever lowers pitches by one semitone."""

    notes = [note_utils.Note(60, 80, float(i), 1.0) for i in range(200)]
    styled = composer.apply_genre_style(notes, "blues", rng=random.Random(4))
    offsets = {a.pitch - b.pitch for a, b in zip(styled, notes)}
    assert offsets == {0, -1}


def test_other_genres_return_copies():
    """Classical styling changes nothing but still copies the notes."""

    notes = [note_utils.Note(60, 80, 0.0, 1.0)]
    styled = composer.apply_genre_style(notes, "classical", rng=random.Random(0))
    assert styled == notes and styled[0] is not notes[0]


def test_options_from_description():
    """Keywords select scale, shape, complexity, genre, ornament and species."""

    detected = composer.options_from_description(
        "A complex falling blues line with grace notes in second species counterpoint"
    )
    assert detected == {
        "scale": "blues",
        "shape": "descending",
        "complexity": "complex",
        "genre": "blues",
        "ornament": "grace",
        "counterpoint": "second_species",
    }


def test_description_defaults():
    """An empty description uses every default."""

    assert composer.options_from_description("") == {
        "scale": "major",
        "shape": "arch",
        "complexity": "medium",
        "genre": "pop",
        "ornament": "trill",
        "counterpoint": "free",
    }


def test_style_contributes_to_detection():
    """Genre and complexity also look at the style string."""

    detected = composer.options_from_description("a tune", style="simple jazz")
    assert detected["genre"] == "jazz"
    assert detected["complexity"] == "simple"
    assert detected["scale"] == "mixolydian"


def test_melody_track_length_and_counterpoint():
    """Two bars give eight notes and a counterpoint line when asked for."""

    track = composer.generate_melody_track(
        "calm rising melody with counterpoint", bars=2, rng=random.Random(6)
    )
    assert len(track.notes) == 8
    assert track.counterpoint is not None and len(track.counterpoint) >= 8
    assert track.name == "Melody"
    data = track.to_dict()
    assert len(data["notes"]) == 8 and "counterpoint" in data


def test_melody_track_defaults_to_sixteen_notes():
    """Without a bar count the track has sixteen notes and no extra voice."""

    track = composer.generate_melody_track("pop song", rng=random.Random(1))
    assert len(track.notes) == 16
    assert track.counterpoint is None
    assert track.genre == "pop"


def test_melody_track_ornaments_and_transforms():
    """Ornamented tracks grow; transformations run last."""

    plain = composer.generate_melody_track("folk tune", bars=2, rng=random.Random(3))
    ornamented = composer.generate_melody_track(
        "folk tune with trill ornament", bars=2, rng=random.Random(3)
    )
    assert len(ornamented.notes) >= len(plain.notes)
    transformed = composer.generate_melody_track(
        "folk tune", bars=2, rng=random.Random(3), transformations=["transpose"]
    )
    assert [n.pitch for n in transformed.notes] == [n.pitch + 7 for n in plain.notes]
