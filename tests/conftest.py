# tests/conftest.py
"""Shared pytest fixtures and helpers for fitslizard tests."""
from pathlib import Path
import numpy as np
from astropy.io import fits


def write_fake_fits(path: Path, data=None, shape=(16, 16), seed=0,
                    rotation=None, pcjd=None, header=None):
    """
    Write a single-HDU FITS file with the image in the primary HDU.

    data defaults to seeded normal noise of the given shape.  rotation and
    pcjd, when given, are stored in 'LBT_PARA' and 'PCJD'.
    """
    if data is None:
        rng = np.random.default_rng(seed)
        data = rng.normal(100, 5, shape).astype(np.float32)

    primary = fits.PrimaryHDU(data=np.asarray(data))
    if rotation is not None:
        primary.header["LBT_PARA"] = rotation
    if pcjd is not None:
        primary.header["PCJD"] = pcjd
    for key, value in (header or {}).items():
        primary.header[key] = value

    primary.writeto(path, overwrite=True)
    return path


def write_uniform_fits(path: Path, value: float, shape=(2, 2), **kwargs):
    """Write an image filled with a single value."""
    data = np.full(shape, value, dtype=np.float32)
    return write_fake_fits(path, data=data, **kwargs)


def garble_card(path: Path, key: str, card_text: str):
    """Overwrite the raw 80-byte header card for key, bypassing astropy checks."""
    raw = bytearray(Path(path).read_bytes())
    prefix = key.ljust(8).encode("ascii")
    for start in range(0, len(raw), 80):
        if raw[start:start + 8] == prefix:
            raw[start:start + 80] = card_text.ljust(80).encode("ascii")
            Path(path).write_bytes(bytes(raw))
            return path
    raise KeyError(key)
