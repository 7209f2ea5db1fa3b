from __future__ import annotations

import logging
import math

import numpy as np
from PIL import Image

from .contracts import ColorizedArtifact, ColorizeError, ColorSpec, SourceImage, ToneCurve

log = logging.getLogger(__name__)

# Rec. 601 luma weights. Golden outputs depend on these exact values.
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

# Pixels per vectorized pass; bounds float64 temporaries for 8x renders.
_CHUNK_PIXELS = 1 << 20


def compute_tone_curve(boldness: float) -> ToneCurve:
    """
    Map boldness (0..100) to curve parameters.

    0   -> black point 0,   white point 245, gamma 1.0 (linear, softest)
    50  -> black point 100, white point 250, gamma 2.5
    100 -> black point 200, white point 255, gamma 4.0 (near-threshold)
    """

    black_point = math.floor((boldness / 100) * 200)
    white_point = 255 - math.floor(((100 - boldness) / 100) * 10)
    gamma = 1.0 + (boldness / 100) * 3.0
    return ToneCurve(black_point=black_point, white_point=white_point, gamma=gamma)


def _colorize_chunk(
    src: np.ndarray,
    dst: np.ndarray,
    *,
    curve: ToneCurve,
    target: np.ndarray,
) -> None:
    rgb = src[:, :3].astype(np.float64)
    luminance = LUMA_R * rgb[:, 0] + LUMA_G * rgb[:, 1] + LUMA_B * rgb[:, 2]

    t = (luminance - curve.black_point) / (curve.white_point - curve.black_point)
    np.clip(t, 0.0, 1.0, out=t)

    # The power curve is skipped at exactly 0 and 1.
    inner = (t > 0.0) & (t < 1.0)
    t[inner] = np.power(t[inner], curve.gamma)

    mixed = target[np.newaxis, :] * (1.0 - t)[:, np.newaxis] + 255.0 * t[:, np.newaxis]
    rounded = np.floor(mixed + 0.5)  # round half up

    opaque = src[:, 3] != 0
    dst[opaque, :3] = rounded[opaque].astype(np.uint8)


def colorize_rgba(pixels: bytes, *, width: int, height: int, color: ColorSpec) -> bytes:
    """
    Remap an RGBA buffer from grayscale luminance to `color`.

    Fully transparent pixels are copied through untouched; alpha is never
    modified. Boldness is used as given (callers clamp).
    """

    if width <= 0 or height <= 0:
        raise ColorizeError(f"Invalid raster size {width}x{height}")
    expected = width * height * 4
    if len(pixels) != expected:
        raise ColorizeError(
            f"RGBA buffer length mismatch: got {len(pixels)} bytes, expected {expected} for {width}x{height}"
        )

    curve = compute_tone_curve(color.boldness)
    target = np.asarray(color.target_rgb, dtype=np.float64)

    try:
        src = np.frombuffer(pixels, dtype=np.uint8).reshape(-1, 4)
        out = src.copy()
        for start in range(0, src.shape[0], _CHUNK_PIXELS):
            stop = start + _CHUNK_PIXELS
            _colorize_chunk(src[start:stop], out[start:stop], curve=curve, target=target)
        return out.tobytes()
    except MemoryError as e:
        raise ColorizeError(f"Out of memory colorizing {width}x{height} raster") from e


def colorize_source_image(image: SourceImage, color: ColorSpec) -> ColorizedArtifact:
    """
    Transform one rendered page into its colorized, PNG-encoded artifact.

    The artifact always has the source's width and height.
    """

    out_pixels = colorize_rgba(image.pixels, width=image.width, height=image.height, color=color)

    try:
        pil_img = Image.frombytes("RGBA", (image.width, image.height), out_pixels)
        artifact = ColorizedArtifact.from_pil_image(pil_img)
    except (MemoryError, ValueError, OSError) as e:
        raise ColorizeError(f"Failed to encode colorized page {image.page_num}: {e}") from e

    log.debug(
        "Colorized page %d (%dx%d) -> %d PNG bytes",
        image.page_num,
        image.width,
        image.height,
        len(artifact.image_bytes),
    )
    return artifact
