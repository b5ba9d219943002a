"""
exceptions.py – Error taxonomy for image loading and mean subtraction.

Every error is fatal to the batch call that raised it.  Header metadata
misses are never reported through these classes.
"""
from __future__ import annotations


class FitsLizardError(Exception):
    """Base class for all fitslizard failures."""


class FitsIOError(FitsLizardError, OSError):
    """The file could not be opened or parsed as FITS."""


class MalformedDataError(FitsLizardError, ValueError):
    """The primary HDU holds no image, or its payload disagrees with NAXISn."""


class UnsupportedShapeError(FitsLizardError, ValueError):
    """Image dimensionality is neither 2 nor 3."""

    def __init__(self, shape: tuple[int, ...], path=None):
        self.shape = tuple(shape)
        self.path = path
        where = f" in {path}" if path is not None else ""
        super().__init__(f"Unsupported image dimensions{where}: {self.shape}")


class ShapeMismatchError(FitsLizardError, ValueError):
    """Arithmetic between arrays of different shapes."""

    def __init__(self, expected: tuple[int, ...], actual: tuple[int, ...]):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"Image shape mismatch: expected {self.expected}, got {self.actual}"
        )


class EmptyInputError(FitsLizardError, ValueError):
    """Reduction over zero images."""


class ReferenceStageError(FitsLizardError, OSError):
    """Computing the reference mean failed."""


class SubjectStageError(FitsLizardError, RuntimeError):
    """Loading or correcting one subject image failed."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
