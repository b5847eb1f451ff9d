"""Tests for mood-driven velocities."""

import importlib
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

dynamics = importlib.import_module("melody_composer.dynamics")


def test_mood_ranges():
    """Energetic and calm velocities stay inside their ranges."""

    rng = random.Random(8)
    for i in range(50):
        energetic = dynamics.generate_velocity(i, 50, "energetic", rng=rng)
        calm = dynamics.generate_velocity(i, 50, "calm", rng=rng)
        assert 80 <= energetic <= 110
        assert 50 <= calm <= 70
        assert isinstance(energetic, int)


def test_dramatic_accents_strong_beats():
    """Dramatic melodies alternate 90 on strong beats with 60 elsewhere."""

    rng = random.Random(0)
    values = [dynamics.generate_velocity(i, 8, "dramatic", rng=rng) for i in range(8)]
    assert values == [90, 60, 60, 60, 90, 60, 60, 60]


def test_unknown_mood_uses_neutral_range():
    """Unrecognised moods draw from 60-90."""

    rng = random.Random(2)
    for i in range(50):
        assert 60 <= dynamics.generate_velocity(i, 50, "wistful", rng=rng) <= 90
