"""Tests for the criterion-gated refiner."""

import importlib
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

fb = importlib.import_module("melody_composer.feedback")
note_utils = importlib.import_module("melody_composer.note_utils")
scales = importlib.import_module("melody_composer.scales")
Note = note_utils.Note
EvaluationScore = note_utils.EvaluationScore


class ZeroRandom(random.Random):
    """Random source that always draws its minimum value."""

    def random(self):
        return 0.0


def _melody(pitches, duration=0.5):
    return [Note(p, 80, i * duration, duration) for i, p in enumerate(pitches)]


def _score(**overrides):
    values = dict(contour=1.0, rhythm=1.0, harmony=1.0, repetition=1.0, range=1.0, overall=1.0)
    values.update(overrides)
    return EvaluationScore(**values)


def test_refine_melody_returns_copy():
    """The incoming melody is never modified."""

    melody = _melody([60, 62, 64, 65, 67, 69, 71, 72])
    before = [n.pitch for n in melody]
    low = _score(contour=0.0, rhythm=0.0, harmony=0.0, repetition=0.0, overall=0.0)
    refined = fb.refine_melody(melody, low, rng=random.Random(3), chord_progression=["C"])
    assert [n.pitch for n in melody] == before
    assert refined is not melody
    assert len(refined) == len(melody)


def test_good_scores_leave_melody_untouched():
    """Criteria above threshold trigger no mutation."""

    melody = _melody([60, 62, 64, 65, 67, 69, 71, 72])
    refined = fb.refine_melody(melody, _score(), rng=random.Random(1), chord_progression=["C"])
    assert refined == melody


def test_refine_harmony_snaps_far_notes():
    """Notes more than a semitone from the chord move to the nearest tone."""

    melody = _melody([62, 61, 74])
    fb.refine_harmony(melody, ["C"], rng=ZeroRandom())
    # D snaps down to C in its own octave; C# is close enough to stay.
    assert [n.pitch for n in melody] == [60, 61, 72]


def test_refine_contour_stays_in_scale():
    """Perturbed pitches are re-quantised when scale notes are supplied."""

    scale_notes = scales.get_scale_notes("C", "major")
    allowed = {p % 12 for p in scale_notes}
    for seed in range(20):
        melody = _melody([60, 62, 64, 65, 67, 69, 71, 72])
        fb.refine_contour(melody, rng=random.Random(seed), scale_notes=scale_notes)
        assert all(n.pitch % 12 in allowed for n in melody)
        assert melody[0].pitch == 60 and melody[-1].pitch == 72


def test_refine_rhythm_respects_minimum():
    """Durations never drop below a quarter."""

    melody = _melody([60] * 40, duration=0.25)
    fb.refine_rhythm(melody, rng=random.Random(4))
    assert all(n.duration >= 0.25 for n in melody)
    assert all(n.duration <= 0.5 for n in melody)


def test_motif_repetition_copies_window():
    """The first window is copied two notes past its end."""

    melody = _melody([60, 62, 64, 65, 67, 69, 71, 72])
    fb.add_motif_repetition(melody, rng=ZeroRandom())
    assert [n.pitch for n in melody] == [60, 62, 64, 65, 67, 60, 62, 64]


def test_motif_repetition_ignores_short_melodies():
    """Fewer than six notes are left unchanged."""

    melody = _melody([60, 62, 64, 65, 67])
    fb.add_motif_repetition(melody, rng=ZeroRandom())
    assert [n.pitch for n in melody] == [60, 62, 64, 65, 67]


def test_harmony_refinement_requires_progression():
    """Without chords a low harmony score changes nothing."""

    melody = _melody([61, 63, 66, 68, 70, 73])
    refined = fb.refine_melody(melody, _score(harmony=0.0), rng=ZeroRandom())
    assert refined == melody
