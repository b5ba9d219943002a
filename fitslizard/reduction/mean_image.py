"""
mean_image.py – Parallel mean of a list of FITS images.

Map:    paths are split into chunks; each worker folds its chunk into an
        Accumulator starting from the identity.
Reduce: partial accumulators are combined pairwise on the pool.
Mean:   sum / count, float32.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import numpy as np

from ..config import DEFAULT_CONFIG, resolve_workers
from ..data.load_image import load_image
from ..exceptions import EmptyInputError, ShapeMismatchError
from .pool import parallel_map, tree_reduce

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Accumulator:
    """Running (sum, count) pair; a zero-size sum is the fold identity."""
    sum: np.ndarray
    count: float

    @classmethod
    def identity(cls) -> "Accumulator":
        return cls(np.zeros((0, 0), dtype=np.float32), 0.0)

    @classmethod
    def of(cls, pixels: np.ndarray) -> "Accumulator":
        return cls(pixels, 1.0)

    @property
    def is_identity(self) -> bool:
        return self.sum.size == 0


def combine(a: Accumulator, b: Accumulator) -> Accumulator:
    """Associative, commutative sum of two accumulators.  Never mutates inputs."""
    if a.is_identity:
        return b
    if b.is_identity:
        return a
    if a.sum.shape != b.sum.shape:
        raise ShapeMismatchError(a.sum.shape, b.sum.shape)
    return Accumulator(a.sum + b.sum, a.count + b.count)


def _chunk(paths: list, n_chunks: int) -> list[list]:
    size = math.ceil(len(paths) / n_chunks)
    return [paths[i:i + size] for i in range(0, len(paths), size)]


def _fold_paths(paths: list, rotation_key: str, timestamp_key: str) -> Accumulator:
    acc = Accumulator.identity()
    for path in paths:
        record = load_image(path, rotation_key=rotation_key, timestamp_key=timestamp_key)
        acc = combine(acc, Accumulator.of(record.pixels))
    return acc


def compute_mean_image(
    paths: list[str | Path],
    workers: int | None = None,
    *,
    chunks_per_worker: int = DEFAULT_CONFIG["chunks_per_worker"],
    rotation_key: str = DEFAULT_CONFIG["rotation_key"],
    timestamp_key: str = DEFAULT_CONFIG["timestamp_key"],
) -> np.ndarray:
    """
    Average the primary images of a list of FITS files.

    Parameters
    ----------
    paths             : FITS file paths; order does not affect the result.
    workers           : thread-pool size; None uses every core.
    chunks_per_worker : map-phase chunks per thread (load balancing).
    rotation_key, timestamp_key : header cards passed to the loader.

    Returns
    -------
    mean : float32 array, shape (H, W)

    Raises
    ------
    EmptyInputError    : no images contributed.
    ShapeMismatchError : images differ in shape.
    Any loader error for the first bad file observed.
    """
    paths = list(paths)
    n_threads = resolve_workers(workers)

    if paths:
        chunks = _chunk(paths, min(len(paths), n_threads * chunks_per_worker))
    else:
        chunks = []
    logger.debug("Averaging %d files in %d chunks on %d threads",
                 len(paths), len(chunks), n_threads)

    fold = partial(_fold_paths, rotation_key=rotation_key, timestamp_key=timestamp_key)
    partials = parallel_map(fold, chunks, n_threads)
    total = tree_reduce(combine, partials, Accumulator.identity(), n_threads)

    if total.count == 0:
        raise EmptyInputError("No images to average")

    mean = (total.sum / np.float32(total.count)).astype(np.float32, copy=False)
    logger.info("Mean image of %d files, shape %s", int(total.count), mean.shape)
    return mean
