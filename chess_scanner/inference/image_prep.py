"""
Image Preparation – Decode, Downscale, Compress
===============================================

Photos from a phone camera are far larger than the vision model needs.
Before upload every image is:

  1. Decoded with OpenCV (any format ``cv2.imdecode`` understands).
     A base64 ``data:image/...`` URL is unwrapped first.
  2. Shrunk so its longest side is at most ``max_size`` px, keeping the
     aspect ratio.  Smaller images are left as they are.
  3. Re-encoded as JPEG at a fixed quality.

Decoding is the only validation: bytes OpenCV cannot read raise
:class:`~chess_scanner.errors.ImageDecodeError`.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re

import cv2
import numpy as np

from chess_scanner.config import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_IMAGE_SIZE
from chess_scanner.errors import ImageDecodeError

log = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,")


# ── Decoding ───────────────────────────────────────────────────────────

def decode_image(data: bytes) -> np.ndarray:
    """Decode raw image bytes into a BGR array."""
    if not data:
        raise ImageDecodeError("Empty image payload")
    buf = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageDecodeError("Could not decode image bytes")
    return image


def decode_data_url(data_url: str) -> bytes:
    """Strip an optional ``data:image/...;base64,`` prefix and decode."""
    payload = _DATA_URL_PREFIX.sub("", data_url.strip())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError("Invalid base64 image payload") from exc


def unwrap_payload(data: bytes) -> bytes:
    """Return raw image bytes, decoding *data* first if it is a data URL."""
    if not data.lstrip().startswith(b"data:image/"):
        return data
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as exc:
        raise ImageDecodeError("Data URL is not ASCII") from exc
    return decode_data_url(text)


# ── Resizing & compression ─────────────────────────────────────────────

def downscale(image: np.ndarray, max_size: int = DEFAULT_MAX_IMAGE_SIZE) -> np.ndarray:
    """Shrink *image* so that neither side exceeds *max_size*.

    Parameters
    ----------
    image : np.ndarray
        BGR image (OpenCV convention).
    max_size : int
        Upper bound for the longest side, in pixels.

    Returns
    -------
    np.ndarray
        The resized image, or *image* itself when it already fits.
    """
    h, w = image.shape[:2]
    longest = max(h, w)
    if longest <= max_size:
        return image

    scale = max_size / longest
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    log.debug("Downscaling %dx%d -> %dx%d", w, h, new_w, new_h)
    return cv2.resize(image, (new_w, new_h), interpolation=cv2.INTER_AREA)


def encode_jpeg(image: np.ndarray, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode a BGR image as JPEG bytes."""
    ok, buf = cv2.imencode(".jpg", image, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise ImageDecodeError("Could not encode image as JPEG")
    return buf.tobytes()


def prepare_image(
    data: bytes,
    max_size: int = DEFAULT_MAX_IMAGE_SIZE,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """Decode, downscale and JPEG-compress an uploaded image.

    *data* is either raw file bytes or a ``data:image/...;base64,`` URL.
    """
    image = decode_image(unwrap_payload(data))
    small = downscale(image, max_size)
    jpeg = encode_jpeg(small, quality)
    log.info(
        "Prepared image  %dx%d -> %dx%d  (%d bytes)",
        image.shape[1], image.shape[0], small.shape[1], small.shape[0], len(jpeg),
    )
    return jpeg
