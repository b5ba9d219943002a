"""
cli.py – Command-line front end.

Usage::

    fitslizard mean --reference data/flats/

    fitslizard subtract \\
        --subjects  data/science/ \\
        --reference data/background/*.fits \\
        --workers 8 --config config/default.yaml

Directory arguments expand to their sorted *.fits / *.fit / *.fts files.
Nothing is written to disk; a summary is printed to stdout.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
import yaml

from .config import load_config, resolve_workers
from .exceptions import FitsLizardError
from .reduction import compute_mean_image, subtract_mean_from_list

FITS_SUFFIXES = (".fits", ".fit", ".fts")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def expand_paths(args: list[str]) -> list[Path]:
    """Expand directories to their FITS files; keep file arguments in order."""
    paths: list[Path] = []
    for arg in args:
        p = Path(arg)
        if p.is_dir():
            paths.extend(sorted(f for f in p.iterdir()
                                if f.suffix.lower() in FITS_SUFFIXES))
        else:
            paths.append(p)
    return paths


def _stats(img: np.ndarray) -> str:
    return f"min={img.min():.4g}  max={img.max():.4g}  mean={img.mean():.4g}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fitslizard",
        description="Average FITS reference frames and subtract them from subjects.",
    )
    parser.add_argument("--config",    default=None,
                        help="YAML settings file (default: built-in defaults)")
    parser.add_argument("--workers",   type=int, default=None,
                        help="Thread-pool size (default: all cores)")
    parser.add_argument("--log-level", default=None,
                        help="Logging level, e.g. INFO or DEBUG")
    sub = parser.add_subparsers(dest="command", required=True)

    mean_p = sub.add_parser("mean", help="Print statistics of the mean image")
    mean_p.add_argument("--reference", nargs="+", required=True,
                        help="Reference FITS files or directories")

    subtract_p = sub.add_parser("subtract",
                                help="Subtract the reference mean from subjects")
    subtract_p.add_argument("--subjects",  nargs="+", required=True,
                            help="Subject FITS files or directories")
    subtract_p.add_argument("--reference", nargs="+", required=True,
                            help="Reference FITS files or directories")
    return parser


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = load_config(args.config, workers=args.workers,
                             log_level=args.log_level)
        resolve_workers(config["workers"])
        level = str(config["log_level"]).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {config['log_level']}")
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    except (OSError, ValueError, yaml.YAMLError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    options = dict(
        chunks_per_worker=config["chunks_per_worker"],
        rotation_key=config["rotation_key"],
        timestamp_key=config["timestamp_key"],
    )
    reference = expand_paths(args.reference)

    try:
        if args.command == "mean":
            mean = compute_mean_image(reference, config["workers"], **options)
            print(f"Mean of {len(reference)} files")
            print(f"  shape : {mean.shape}  dtype={mean.dtype}")
            print(f"  stats : {_stats(mean)}")
        else:
            subjects = expand_paths(args.subjects)
            results = subtract_mean_from_list(subjects, reference,
                                              config["workers"], **options)
            print(f"Subtracted mean of {len(reference)} files "
                  f"from {len(results)} subjects")
            for path, res in zip(subjects, results):
                print(f"  {path.name}: rotation={res.rotation_angle:.4f}  "
                      f"timestamp={res.timestamp:.6f}  {_stats(res.image)}")
    except (FitsLizardError, OSError, ValueError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
