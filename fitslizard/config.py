"""
config.py – YAML-backed settings shared by the library entry points and CLI.

Precedence (lowest first): DEFAULT_CONFIG, YAML file, keyword overrides.
"""
from __future__ import annotations

import os
from pathlib import Path

import yaml

DEFAULT_CONFIG: dict = {
    "workers": None,            # None -> os.cpu_count()
    "chunks_per_worker": 4,     # map-phase chunking for the mean reducer
    "rotation_key": "LBT_PARA",
    "timestamp_key": "PCJD",
    "log_level": "WARNING",
}


def load_config(path: str | Path | None = None, **overrides) -> dict:
    """
    Build a settings dict.

    Parameters
    ----------
    path      : optional YAML file with a top-level mapping.
    overrides : keyword values applied last; ``None`` values are ignored.

    Returns
    -------
    dict with every key of DEFAULT_CONFIG.
    """
    config = dict(DEFAULT_CONFIG)

    if path is not None:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(
                f"Config file {path} must contain a mapping, "
                f"got {type(loaded).__name__}."
            )
        _check_keys(loaded, source=str(path))
        config.update(loaded)

    overrides = {k: v for k, v in overrides.items() if v is not None}
    _check_keys(overrides, source="overrides")
    config.update(overrides)

    if int(config["chunks_per_worker"]) < 1:
        raise ValueError(
            f"chunks_per_worker must be >= 1, got {config['chunks_per_worker']}."
        )
    return config


def resolve_workers(workers: int | None) -> int:
    """Return a positive thread count; ``None`` means all available cores."""
    if workers is None:
        return os.cpu_count() or 1
    workers = int(workers)
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}.")
    return workers


def _check_keys(values: dict, source: str) -> None:
    unknown = sorted(set(values) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config keys in {source}: {unknown}")
