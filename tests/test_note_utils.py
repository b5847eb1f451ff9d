"""Tests for note-name conversion and pitch classes."""

import importlib
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

note_utils = importlib.import_module("melody_composer.note_utils")


@pytest.mark.parametrize("name, midi", [("C4", 60), ("c#4", 61), ("Bb3", 58), ("A0", 21)])
def test_note_to_midi(name, midi):
    assert note_utils.note_to_midi(name) == midi


def test_unparsable_note_falls_back_to_middle_c(caplog):
    """Malformed names log at debug level and return middle C."""

    with caplog.at_level(logging.DEBUG):
        assert note_utils.note_to_midi("H2") == note_utils.DEFAULT_MIDI
    assert "Unparsable note name" in caplog.text


def test_midi_to_note_uses_sharps():
    assert note_utils.midi_to_note(61) == "C#4"
    assert note_utils.midi_to_note(note_utils.note_to_midi("G5")) == "G5"


@pytest.mark.parametrize("pitch, expected", [(60, 0), (71, 11), (-1, 11), (133, 1)])
def test_pitch_class(pitch, expected):
    assert note_utils.pitch_class(pitch) == expected
