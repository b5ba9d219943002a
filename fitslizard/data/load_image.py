"""
load_image.py – Read one FITS file into a 2-D float32 image plus header scalars.

Primary HDU layout expected:
  data   : 2-D image (H, W), or a 3-D cube (T, H, W) of which only the
           last frame cube[T-1] is kept
  header : 'LBT_PARA' rotation angle (deg), 'PCJD' observation Julian date;
           both optional

Returns an ImageRecord(pixels, rotation_angle, timestamp).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from astropy.io import fits
from astropy.io.fits.verify import VerifyError

from ..exceptions import FitsIOError, MalformedDataError, UnsupportedShapeError

logger = logging.getLogger(__name__)

ROTATION_KEY = "LBT_PARA"
TIMESTAMP_KEY = "PCJD"


@dataclass(frozen=True)
class ImageRecord:
    """One loaded frame.  Metadata is None when the header could not supply it."""
    pixels: np.ndarray                # float32, shape (H, W)
    rotation_angle: float | None      # 32-bit precision
    timestamp: float | None           # 64-bit


# ---------------------------------------------------------------------------
# Header helpers
# ---------------------------------------------------------------------------

def _header_float(header, key: str, dtype=np.float64) -> float | None:
    """Parse header[key] through its text form; None on absence or bad value."""
    try:
        value = header.get(key)
    except VerifyError as err:
        # astropy parses card values lazily; a garbled card fails here
        logger.debug("Header key %s is unparsable: %s", key, err)
        return None
    if value is None:
        logger.debug("Header key %s not present", key)
        return None
    try:
        return float(dtype(float(str(value).strip())))
    except (TypeError, ValueError):
        logger.debug("Header key %s=%r is not a number", key, value)
        return None


def _declared_shape(header) -> tuple[int, ...]:
    """Array shape from NAXISn, slowest-varying axis first (numpy order)."""
    naxis = int(header.get("NAXIS", 0))
    return tuple(int(header[f"NAXIS{i}"]) for i in range(naxis, 0, -1))


# ---------------------------------------------------------------------------
# Pixel helpers
# ---------------------------------------------------------------------------

def _to_plane(arr: np.ndarray, path) -> np.ndarray:
    """Keep 2-D images as-is; reduce a (T, H, W) cube to its last frame."""
    if arr.ndim == 2:
        return arr
    if arr.ndim == 3:
        return np.ascontiguousarray(arr[arr.shape[0] - 1])
    raise UnsupportedShapeError(arr.shape, path)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_image(
    path: str | Path,
    rotation_key: str = ROTATION_KEY,
    timestamp_key: str = TIMESTAMP_KEY,
) -> ImageRecord:
    """
    Read the primary HDU of a FITS file.

    Parameters
    ----------
    path          : FITS file path.
    rotation_key  : header card holding the rotation angle.
    timestamp_key : header card holding the observation timestamp.

    Returns
    -------
    ImageRecord with float32 pixels of shape (H, W).

    Raises
    ------
    FitsIOError           : file missing, unreadable, or not FITS.
    MalformedDataError    : no image in the primary HDU, or its payload
                            size disagrees with the NAXISn cards.
    UnsupportedShapeError : image is neither 2-D nor 3-D.
    """
    try:
        hdul = fits.open(path, memmap=False)
    except (OSError, ValueError, VerifyError) as err:
        raise FitsIOError(f"Cannot open FITS file {path}: {err}") from err

    with hdul:
        try:
            hdu = hdul[0]
        except (OSError, ValueError, IndexError, VerifyError) as err:
            raise FitsIOError(f"Cannot read primary HDU of {path}: {err}") from err
        header = hdu.header

        rotation = _header_float(header, rotation_key, dtype=np.float32)
        timestamp = _header_float(header, timestamp_key, dtype=np.float64)

        if not hdu.is_image:
            raise MalformedDataError(f"Primary HDU of {path} is not an image")
        # astropy sizes the payload from NAXISn and fails here when the
        # file holds fewer bytes than declared
        try:
            data = hdu.data
            shape = _declared_shape(header)
        except (OSError, ValueError, TypeError, KeyError, VerifyError) as err:
            raise MalformedDataError(
                f"Cannot read image payload of {path}: {err}"
            ) from err
        if data is None:
            raise MalformedDataError(f"Primary HDU of {path} holds no image data")

        flat = np.asarray(data, dtype=np.float32).ravel()

    arr = flat.reshape(shape)
    pixels = _to_plane(arr, path)
    logger.debug("Loaded %s shape=%s rotation=%s timestamp=%s",
                 path, pixels.shape, rotation, timestamp)
    return ImageRecord(pixels=pixels, rotation_angle=rotation, timestamp=timestamp)
