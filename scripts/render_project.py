#!/usr/bin/env python3
"""Render a PULSEFX project file (mixdown) or a single preset to WAV.

Usage:
    python scripts/render_project.py project.json -o mix.wav
    python scripts/render_project.py coins.json      # from PULSEFX_PROJECTS_DIR
    python scripts/render_project.py --preset laser -o laser.wav
    python scripts/render_project.py --random 7 -o random.wav
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pulsefx.config import settings
from pulsefx.console.export import export_mix, write_wav
from pulsefx.console.mixer import plan_timeline
from pulsefx.console.project import load_project
from pulsefx.errors import EmptyMixdown, PulseFXError
from pulsefx.hands.presets import get_preset, random_parameters
from pulsefx.hands.synth import generate


def _find_project(path: Path) -> Path:
    """Relative paths that don't exist are looked up in the projects dir."""
    if path.exists() or path.is_absolute():
        return path
    candidate = settings.projects_dir / path
    return candidate if candidate.exists() else path


def _default_name(args: argparse.Namespace) -> str:
    if args.project is not None:
        return args.project.stem
    if args.preset:
        return args.preset
    return f"random-{args.random}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("project", nargs="?", type=Path, help="Project JSON file")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", help="Render a named preset instead")
    source.add_argument("--random", type=int, metavar="SEED", help="Render a random recipe")
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help=f"Output WAV path (default: {settings.export_dir}/<name>.wav)",
    )
    parser.add_argument(
        "--sample-rate", type=int, default=None,
        help=f"Sample rate in Hz (default: project's, or {settings.sample_rate})",
    )
    args = parser.parse_args(argv)
    if (args.project is None) == (args.preset is None and args.random is None):
        parser.error("give exactly one of: a project file, --preset, --random")

    if args.project is not None:
        args.project = _find_project(args.project)
    output = args.output or settings.export_dir / f"{_default_name(args)}.wav"

    try:
        if args.project is not None:
            project = load_project(args.project)
            plan = plan_timeline(project.placements(), args.sample_rate or project.sample_rate)
            for failure in plan.failures:
                print(f"  skipped track {failure.index} ({failure.name}): "
                      f"{failure.field} {failure.reason}", file=sys.stderr)
            path = export_mix(plan, output)
        else:
            params = get_preset(args.preset) if args.preset else random_parameters(args.random)
            buffer = generate(params, args.sample_rate or settings.sample_rate)
            path = write_wav(buffer, output)
    except EmptyMixdown:
        print("Nothing to render: no active tracks.", file=sys.stderr)
        return 1
    except (PulseFXError, KeyError, OSError) as e:
        print(f"Render failed: {e}", file=sys.stderr)
        return 2

    print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
