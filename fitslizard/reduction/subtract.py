"""
subtract.py – Subtract a reference mean from every subject image.

Stage 1 (barrier): mean of the reference files.
Stage 2:           per subject, load and subtract the shared read-only mean.

All-or-nothing: the first failure in either stage aborts the call and no
partial results are returned.
"""
from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import NamedTuple

import numpy as np

from ..config import DEFAULT_CONFIG, resolve_workers
from ..data.load_image import load_image
from ..exceptions import (
    ReferenceStageError,
    ShapeMismatchError,
    SubjectStageError,
)
from .mean_image import compute_mean_image
from .pool import parallel_map

logger = logging.getLogger(__name__)


class ResultRecord(NamedTuple):
    image: np.ndarray        # float32, shape (H, W)
    rotation_angle: float    # 0.0 when the header had none
    timestamp: float         # 0.0 when the header had none


def _subtract_one(
    path: str | Path,
    mean: np.ndarray,
    rotation_key: str,
    timestamp_key: str,
) -> ResultRecord:
    try:
        record = load_image(path, rotation_key=rotation_key, timestamp_key=timestamp_key)
        if record.pixels.shape != mean.shape:
            raise ShapeMismatchError(mean.shape, record.pixels.shape)
        image = record.pixels - mean
    except Exception as err:
        raise SubjectStageError(path, str(err)) from err

    return ResultRecord(
        image=image,
        rotation_angle=record.rotation_angle if record.rotation_angle is not None else 0.0,
        timestamp=record.timestamp if record.timestamp is not None else 0.0,
    )


def subtract_mean_from_list(
    subject_paths: list[str | Path],
    reference_paths: list[str | Path],
    workers: int | None = None,
    *,
    chunks_per_worker: int = DEFAULT_CONFIG["chunks_per_worker"],
    rotation_key: str = DEFAULT_CONFIG["rotation_key"],
    timestamp_key: str = DEFAULT_CONFIG["timestamp_key"],
) -> list[ResultRecord]:
    """
    Subtract mean(reference_paths) from each image in subject_paths.

    Returns
    -------
    list of ResultRecord(image, rotation_angle, timestamp), one per subject
    path and in the same order.

    Raises
    ------
    ReferenceStageError : the reference mean could not be computed.
    SubjectStageError   : a subject file failed to load or its shape differs
                          from the mean; ``__cause__`` holds the underlying error.
    """
    n_threads = resolve_workers(workers)

    try:
        mean = compute_mean_image(
            reference_paths,
            n_threads,
            chunks_per_worker=chunks_per_worker,
            rotation_key=rotation_key,
            timestamp_key=timestamp_key,
        )
    except Exception as err:
        raise ReferenceStageError(f"Reference mean failed: {err}") from err
    mean.setflags(write=False)

    work = partial(_subtract_one, mean=mean,
                   rotation_key=rotation_key, timestamp_key=timestamp_key)
    results = parallel_map(work, list(subject_paths), n_threads)
    logger.info("Subtracted reference mean from %d subject images", len(results))
    return results
