"""fitslizard – reference-mean subtraction for FITS image sequences."""

from .config import load_config
from .data import ImageRecord, load_image
from .exceptions import (
    EmptyInputError,
    FitsIOError,
    FitsLizardError,
    MalformedDataError,
    ReferenceStageError,
    ShapeMismatchError,
    SubjectStageError,
    UnsupportedShapeError,
)
from .reduction import ResultRecord, compute_mean_image, subtract_mean_from_list

__all__ = [
    "compute_mean_image",
    "subtract_mean_from_list",
    "load_image",
    "load_config",
    "ImageRecord",
    "ResultRecord",
    "FitsLizardError",
    "FitsIOError",
    "MalformedDataError",
    "UnsupportedShapeError",
    "ShapeMismatchError",
    "EmptyInputError",
    "ReferenceStageError",
    "SubjectStageError",
]
