"""
Image output.

Turns per-pixel linear color sums into display values:
divide by the sample count, gamma 2 (square root), clamp to [0, 0.999],
scale by 256 and truncate, giving integers in [0, 255].

`.ppm` files are written as plain-text Netpbm (P3); any other extension is
handed to Pillow.
"""

from __future__ import annotations
from pathlib import Path
from typing import TextIO, Union
import numpy as np

from .vec3 import Color

MAX_CHANNEL = 255


def _quantize(sums: np.ndarray, samples: int) -> np.ndarray:
    """Average, gamma-correct and quantize color sums to uint8."""
    if samples < 1:
        raise ValueError(f"samples must be positive, got {samples}")
    scaled = np.asarray(sums, dtype=np.float64) / samples
    corrected = np.sqrt(np.clip(scaled, 0.0, None))
    return (256 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)


def to_ldr(sums: np.ndarray, samples: int) -> np.ndarray:
    """Convert an HDR sum buffer to 8-bit RGB.

    Args:
        sums: Array of shape (height, width, 3) holding per-pixel sums
        samples: Number of samples summed into each pixel

    Returns:
        uint8 array of the same shape
    """
    return _quantize(sums, samples)


def write_color(stream: TextIO, pixel_sum: Color, samples: int) -> None:
    """Write one pixel as a line of three space-separated integers."""
    r, g, b = _quantize(pixel_sum.to_array(), samples)
    stream.write(f"{r} {g} {b}\n")


def write_ppm(stream: TextIO, sums: np.ndarray, samples: int) -> None:
    """Write a full P3 image, top scanline first.

    Args:
        stream: Text stream to write to
        sums: Array of shape (height, width, 3) holding per-pixel sums
        samples: Number of samples summed into each pixel
    """
    height, width = sums.shape[:2]
    ldr = _quantize(sums, samples)

    stream.write(f"P3\n{width} {height}\n{MAX_CHANNEL}\n")
    for row in ldr:
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row))


def save_image(sums: np.ndarray, samples: int, filename: Union[str, Path]) -> None:
    """Save a sum buffer to file.

    Args:
        sums: Array of shape (height, width, 3) holding per-pixel sums
        samples: Number of samples summed into each pixel
        filename: Output filename (extension determines format)
    """
    path = Path(filename)
    if path.suffix.lower() == '.ppm':
        with path.open('w', encoding='ascii', newline='\n') as f:
            write_ppm(f, sums, samples)
        return

    from PIL import Image as PILImage

    PILImage.fromarray(to_ldr(sums, samples)).save(path)
