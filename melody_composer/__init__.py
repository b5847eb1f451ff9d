"""Melody Composer library.

This package turns a handful of musical parameters (key, scale, length, tempo,
contour, complexity, mood and an optional chord progression) into a timed list
of notes, scores the result against five musicality heuristics and repairs
weak spots in a single refinement pass.  Counterpoint, ornamentation and
melody transformations operate on the finished note list.

Underlying Algorithm
--------------------
A primary *motif* is drawn from a curated catalogue (or from library-learned
motifs) and occasionally varied every fourth note.  Its offsets are added to a
parametric contour curve and, when chords are supplied, to a random tone of
the active chord.  The sum is quantised onto the scale::

    motifs = generate_motifs(length, complexity)
    curve = generate_shape(shape, length)
    for i in range(length):
        offset = motifs[i] + curve[i] + chord_nudge(i)
        pitch = root + constrain_to_scale(offset, scale_notes)
        duration = beat_salience_duration(i) * beat
        velocity = mood_velocity(i)
    score = evaluate_melody(melody)
    if score.overall < 0.7:
        melody = refine_melody(melody, score)

Every stochastic function takes an explicit ``random.Random`` through its
``rng`` keyword so a seed reproduces a melody exactly.

Features include:
- Seven contour shapes plus a spiral and a library-driven ``auto`` mode.
- Ten scales, triad chord lookup and Roman-numeral chord motifs.
- A weighted five-criterion evaluator and criterion-gated refiner.
- First, second, third and free species counterpoint.
- Trill and grace-note ornamentation.
- Genre presets and description-driven track generation.
- A JSON-printing command line interface.
"""

__version__ = "0.1.0"

# ---------------------------------------------------------------
# Modification Summary
# ---------------------------------------------------------------
# * Public API re-exported here so callers can ``import melody_composer`` and
#   reach the generators, evaluator and post-processing passes directly.
# * ``run_cli`` and ``main`` import the CLI lazily so library users never pay
#   for ``argparse`` setup.
# ---------------------------------------------------------------

from .note_utils import EvaluationScore, Melody, Note, midi_to_note, note_to_midi  # noqa: F401
from .scales import SCALE_PATTERNS, constrain_to_scale, get_scale_notes  # noqa: F401
from .motifs import DEFAULT_CATALOG, MotifCatalog, generate_motifs, vary_motif  # noqa: F401
from .shapes import SHAPES, generate_shape  # noqa: F401
from .harmony import get_chord_tones, get_harmonic_adjustment  # noqa: F401
from .rhythm_engine import RhythmGenerator, generate_duration  # noqa: F401
from .dynamics import generate_velocity  # noqa: F401
from .feedback import evaluate_melody, refine_melody  # noqa: F401
from .counterpoint import generate_counterpoint  # noqa: F401
from .ornaments import add_ornamentation  # noqa: F401
from .transformations import (  # noqa: F401
    apply_transformations,
    augment_melody,
    diminish_melody,
    invert_melody,
    retrograde_melody,
    transform_melody,
    transpose_melody,
)
from .learning import LearnedPatterns, learn_from_library, load_learned_patterns  # noqa: F401
from .options import GenerationOptions, resolve_options  # noqa: F401
from .composer import (  # noqa: F401
    GenerationResult,
    MelodyTrack,
    apply_genre_style,
    compose,
    generate_genre_melody,
    generate_melody,
    generate_melody_track,
    options_from_description,
)
from .utils import load_settings, make_rng  # noqa: F401


def run_cli():
    from .cli import run_cli as _run_cli
    _run_cli()


def main():
    from .cli import main as _main
    _main()
