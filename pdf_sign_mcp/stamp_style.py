"""
Black-ink stamp look for signature images.

The transform is fixed: grayscale, then a contrast boost, then a slight
darkening. Transparency is carried over untouched so that scanned signatures
cut out on a transparent background stay cut out.
"""
from __future__ import annotations

import io

from PIL import Image, ImageEnhance, ImageOps, UnidentifiedImageError

from .errors import ImageDecodeError, UnsupportedFormatError

STAMP_CONTRAST = 2.0
STAMP_BRIGHTNESS = 0.9

# MIME type -> Pillow format name.
IMAGE_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
}


def pillow_format(mime_type: str) -> str:
    fmt = IMAGE_FORMATS.get((mime_type or "").strip().lower())
    if fmt is None:
        raise UnsupportedFormatError(
            f"Unsupported image format: {mime_type!r}. Please use PNG or JPG."
        )
    return fmt


def open_image(image_bytes: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Could not decode signature image: {exc}") from exc
    return img


def to_stamp_style(image_bytes: bytes, mime_type: str) -> bytes:
    fmt = pillow_format(mime_type)
    img = open_image(image_bytes)

    alpha = None
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        alpha = img.convert("RGBA").getchannel("A")

    gray = ImageOps.grayscale(img)
    gray = ImageEnhance.Contrast(gray).enhance(STAMP_CONTRAST)
    gray = ImageEnhance.Brightness(gray).enhance(STAMP_BRIGHTNESS)

    if alpha is not None and fmt == "PNG":
        gray = gray.convert("LA")
        gray.putalpha(alpha)

    out = io.BytesIO()
    gray.save(out, format=fmt)
    return out.getvalue()
