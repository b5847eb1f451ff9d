"""Command line interface for Melody Composer.

Modification summary
--------------------
* Output is printed as JSON so the generated notes can be piped into other
  tools; writing note-event files is left to downstream encoders.
* ``--settings-file`` supplies defaults for any generation option; explicit
  flags always win over the file.
* ``--prompt`` switches to description-driven track generation.

The :func:`run_cli` function parses arguments and performs generation while
:func:`main` configures logging first.  Keeping the parsing separate from the
composition modules means other applications can reuse the generators without
importing ``argparse``.

Example
-------
Running ``python -m melody_composer --key D --scale dorian --length 8 \
    --chords Dm,G --seed 7 --counterpoint second`` prints an eight-note melody,
its evaluation and a second-species counterpoint line.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .composer import (
    apply_genre_style,
    generate_genre_melody,
    generate_melody,
    generate_melody_track,
)
from .counterpoint import SPECIES, generate_counterpoint
from .learning import LearnedPatterns, load_learned_patterns
from .ornaments import ORNAMENT_STYLES, add_ornamentation
from .scales import SCALE_PATTERNS
from .shapes import AUTO_SHAPE, SHAPES
from .transformations import TRANSFORMATIONS, apply_transformations
from .utils import load_settings, make_rng

__all__ = ["build_parser", "run_cli", "main"]

# Generation options that may come from the settings file.
SETTINGS_KEYS = ("key", "scale", "length", "tempo", "shape", "complexity", "mood", "chords", "genre")


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser used by :func:`run_cli`."""

    parser = argparse.ArgumentParser(
        description="Compose a melody, score it and print the result as JSON."
    )
    parser.add_argument("--key", type=str, help="Key root such as C, F# or Bb (default: C).")
    parser.add_argument(
        "--scale", type=str, help=f"Scale name, one of: {', '.join(sorted(SCALE_PATTERNS))}."
    )
    parser.add_argument("--length", type=int, help="Number of notes (default: 16).")
    parser.add_argument("--tempo", type=float, help="Beats per minute (default: 120).")
    parser.add_argument(
        "--shape",
        type=str,
        help=f"Contour, one of: {', '.join(sorted(SHAPES))} or {AUTO_SHAPE}.",
    )
    parser.add_argument("--complexity", type=str, help="simple, medium or complex.")
    parser.add_argument("--mood", type=str, help="energetic, calm, dramatic or neutral.")
    parser.add_argument("--chords", type=str, help="Comma-separated chord progression (e.g., C,Am,F,G).")
    parser.add_argument("--genre", type=str, help="Apply a genre preset and its post-processing.")
    parser.add_argument(
        "--counterpoint",
        type=str,
        metavar="SPECIES",
        help=f"Add a counterpoint line: {', '.join(SPECIES)} (or first, second, third).",
    )
    parser.add_argument(
        "--ornament", type=str, choices=ORNAMENT_STYLES, help="Ornament the melody."
    )
    parser.add_argument(
        "--transform",
        action="append",
        default=[],
        choices=sorted(TRANSFORMATIONS),
        help="Transformation to apply; may be repeated.",
    )
    parser.add_argument("--prompt", type=str, help="Generate a track from a free-text description instead.")
    parser.add_argument("--bars", type=float, help="Track length in bars when --prompt is used.")
    parser.add_argument("--patterns", type=str, help="JSON or YAML file with learned motif and shape pools.")
    parser.add_argument("--settings-file", type=str, help="JSON file providing default options.")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _settings_defaults(path: Optional[str]) -> Dict[str, Any]:
    settings = load_settings(Path(path).expanduser()) if path else load_settings()
    return {name: settings[name] for name in SETTINGS_KEYS if name in settings}


def run_cli(argv: Optional[List[str]] = None) -> None:
    """Parse ``argv`` (``sys.argv[1:]`` by default) and print a JSON result.

    Invalid pattern files are logged and terminate with exit status 1.
    """

    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    pre_args, _ = parser.parse_known_args(argv)
    if pre_args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    parser.set_defaults(**_settings_defaults(pre_args.settings_file))
    args = parser.parse_args(argv)

    patterns: Optional[LearnedPatterns] = None
    if args.patterns:
        try:
            patterns = load_learned_patterns(args.patterns)
        except (OSError, ValueError) as exc:
            logging.error(f"Could not load learned patterns: {exc}")
            sys.exit(1)

    rng = make_rng(args.seed)

    if args.prompt:
        track = generate_melody_track(
            args.prompt,
            rng=rng,
            key=args.key,
            bars=args.bars,
            tempo=args.tempo,
            mood=args.mood,
            style=args.genre,
            ornament=bool(args.ornament),
            counterpoint=bool(args.counterpoint),
            transformations=args.transform,
            patterns=patterns,
        )
        print(json.dumps(track.to_dict(), indent=2))
        return

    chords = args.chords.split(",") if isinstance(args.chords, str) else args.chords
    options = dict(
        key=args.key,
        scale=args.scale,
        length=args.length,
        tempo=args.tempo,
        shape=args.shape,
        complexity=args.complexity,
        mood=args.mood,
        chord_progression=chords,
    )
    if args.genre:
        result = generate_genre_melody(args.genre, rng=rng, patterns=patterns, **options)
        melody = apply_genre_style(result.melody, args.genre, rng=rng)
    else:
        result = generate_melody(rng=rng, patterns=patterns, **options)
        melody = result.melody

    if args.ornament:
        melody = add_ornamentation(melody, args.ornament, rng=rng)
    counter_line = None
    if args.counterpoint:
        counter_line = generate_counterpoint(melody, args.counterpoint, rng=rng)
    if args.transform:
        melody = apply_transformations(melody, args.transform)

    output: Dict[str, Any] = {
        "notes": [n.to_dict() for n in melody],
        "evaluation": result.evaluation.to_dict(),
        "refined": result.refined,
    }
    if counter_line is not None:
        output["counterpoint"] = [n.to_dict() for n in counter_line]
    print(json.dumps(output, indent=2))
    logging.info("Melody generation complete.")


def main(argv: Optional[List[str]] = None) -> None:
    """Configure logging and run the CLI."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    run_cli(argv)


if __name__ == "__main__":
    main()
