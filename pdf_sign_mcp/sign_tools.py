from __future__ import annotations

import io
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import pymupdf
from PIL import ImageEnhance
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from . import config
from .errors import (
    DocumentDecodeError,
    ImageDecodeError,
    InvalidSettingsError,
    PdfToolError,
    UnsupportedFormatError,
)
from .placement import ImageSize, PlacementRecord, resolve_placements
from .settings import SignatureSettings, parse_page_range
from .stamp_style import open_image, pillow_format, to_stamp_style

__all__ = [
    "DocumentDecodeError",
    "ImageDecodeError",
    "InvalidSettingsError",
    "PdfToolError",
    "UnsupportedFormatError",
    "apply_signature",
    "get_pdf_page_info",
    "parse_pages",
    "preview_placements",
    "sign_pdf",
]

logger = logging.getLogger(__name__)

SettingsLike = Union[SignatureSettings, Mapping[str, Any], None]


def _ensure_file(path: str) -> Path:
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        resolved = resolved.resolve()
    if not resolved.exists():
        raise PdfToolError(f"File not found: {resolved}")
    if not resolved.is_file():
        raise PdfToolError(f"Not a file: {resolved}")
    return resolved


def _prepare_output(path: str) -> Path:
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        resolved = resolved.resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved


def _default_output(src: Path) -> Path:
    return src.with_name(f"{config.get_output_prefix()}{src.name}")


def _as_settings(settings: SettingsLike) -> SignatureSettings:
    if isinstance(settings, SignatureSettings):
        return settings
    return SignatureSettings.from_dict(settings)


def _guess_mime_type(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path.name)
    return mime or "application/octet-stream"


def _open_document(document_bytes: bytes) -> pymupdf.Document:
    try:
        doc = pymupdf.open(stream=bytes(document_bytes), filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise DocumentDecodeError(f"Could not read PDF document: {exc}") from exc
    if doc.needs_pass:
        doc.close()
        raise DocumentDecodeError("PDF document is encrypted and needs a password")
    return doc


def _embed_image(image_bytes: bytes, fmt: str, opacity: float) -> Tuple[bytes, ImageSize]:
    """
    Validate the signature image and prepare the stream handed to the page.

    Returns the bytes to insert and the natural pixel size. Below full
    opacity the alpha channel is scaled and the image re-encoded as PNG,
    since JPEG has no alpha.
    """
    img = open_image(image_bytes)
    if img.format != fmt:
        raise ImageDecodeError(f"Signature image data is {img.format or 'unknown'}, expected {fmt}")
    size = ImageSize(float(img.width), float(img.height))

    if opacity >= 1.0:
        return bytes(image_bytes), size

    img = img.convert("RGBA")
    alpha = ImageEnhance.Brightness(img.getchannel("A")).enhance(opacity)
    img.putalpha(alpha)
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue(), size


def _draw(page: pymupdf.Page, record: PlacementRecord, stream: bytes, xref: int = 0) -> int:
    # Records use a bottom-left origin, PyMuPDF a top-left one. page.rect is the
    # visible (rotated, cropped) page, so placement follows what the viewer sees.
    y_top = page.rect.height - record.y - record.height
    rect = pymupdf.Rect(record.x, y_top, record.x + record.width, y_top + record.height)
    if xref:
        return page.insert_image(rect, xref=xref, keep_proportion=False, overlay=True)
    return page.insert_image(rect, stream=stream, keep_proportion=False, overlay=True)


def _apply(
    document_bytes: bytes,
    signature_bytes: bytes,
    signature_mime_type: str,
    settings: SignatureSettings,
) -> Tuple[bytes, List[PlacementRecord], int]:
    fmt = pillow_format(signature_mime_type)

    doc = _open_document(document_bytes)
    try:
        image_bytes = signature_bytes
        if settings.is_grayscale:
            image_bytes = to_stamp_style(image_bytes, signature_mime_type)
        stream, size = _embed_image(image_bytes, fmt, settings.opacity)

        page_count = doc.page_count
        records = resolve_placements(page_count, settings, size)

        # The image is stored once and referenced from every page after the first.
        xref = 0
        for record in records:
            logger.debug(
                "Drawing signature on page %d at (%.1f, %.1f) size %.1fx%.1f",
                record.page_index,
                record.x,
                record.y,
                record.width,
                record.height,
            )
            xref = _draw(doc[record.page_index], record, stream, xref)

        if page_count == 0:
            # PyMuPDF refuses to save a document without pages; hand back the input as is.
            output = bytes(document_bytes)
        else:
            output = doc.tobytes(garbage=3, deflate=True)
    finally:
        doc.close()
    return output, records, page_count


def apply_signature(
    document_bytes: bytes,
    signature_bytes: bytes,
    signature_mime_type: str,
    settings: SettingsLike = None,
) -> bytes:
    """
    Stamp the signature image onto every page the settings target.

    Raises ``UnsupportedFormatError`` for anything but PNG/JPEG,
    ``DocumentDecodeError`` when the PDF cannot be opened and
    ``ImageDecodeError`` when the image cannot be read. Nothing is returned
    on failure; the input buffers are left untouched.
    """
    output, _records, _count = _apply(
        document_bytes, signature_bytes, signature_mime_type, _as_settings(settings)
    )
    return output


def sign_pdf(
    input_path: str,
    signature_path: str,
    output_path: Optional[str] = None,
    settings: SettingsLike = None,
    signature_mime_type: Optional[str] = None,
) -> Dict:
    src = _ensure_file(input_path)
    sig = _ensure_file(signature_path)
    resolved_settings = _as_settings(settings)
    mime = signature_mime_type or _guess_mime_type(sig)

    output, records, page_count = _apply(
        src.read_bytes(), sig.read_bytes(), mime, resolved_settings
    )

    dst = _prepare_output(output_path) if output_path else _default_output(src)
    with dst.open("wb") as output_file:
        output_file.write(output)

    logger.info("Signed %d of %d page(s): %s", len(records), page_count, dst)
    return {
        "output_path": str(dst),
        "page_count": page_count,
        "pages_signed": len(records),
        "placements": [r.to_dict() for r in records],
    }


def get_pdf_page_info(pdf_path: str) -> Dict:
    path = _ensure_file(pdf_path)
    try:
        reader = PdfReader(str(path))
        pages = [
            {
                "index": idx,
                "width": float(page.mediabox.width),
                "height": float(page.mediabox.height),
                "rotation": int(page.rotation or 0),
            }
            for idx, page in enumerate(reader.pages)
        ]
    except PdfReadError as exc:
        raise DocumentDecodeError(f"Could not read PDF document: {exc}") from exc
    return {"page_count": len(pages), "pages": pages}


def preview_placements(
    input_path: str,
    signature_path: str,
    settings: SettingsLike = None,
) -> Dict:
    """Resolve placements for a document without writing anything."""
    resolved_settings = _as_settings(settings)
    page_count = get_pdf_page_info(input_path)["page_count"]
    sig = _ensure_file(signature_path)
    pillow_format(_guess_mime_type(sig))
    img = open_image(sig.read_bytes())
    records = resolve_placements(
        page_count, resolved_settings, ImageSize(float(img.width), float(img.height))
    )
    return {
        "page_count": page_count,
        "pages": [r.page_index for r in records],
        "placements": [r.to_dict() for r in records],
    }


def parse_pages(pdf_path: str, page_range: str) -> Dict:
    """Turn a ``"1, 3-5"`` selection into zero-based indices for ``pdf_path``."""
    page_count = get_pdf_page_info(pdf_path)["page_count"]
    selected = parse_page_range(page_range, page_count)
    return {"page_count": page_count, "selected_pages": selected}
