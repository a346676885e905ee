from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PdfToolError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class UnsupportedFormatError(PdfToolError):
    """Signature image is not PNG or JPEG."""


class DocumentDecodeError(PdfToolError):
    """Input document could not be opened as a PDF."""


class ImageDecodeError(PdfToolError):
    """Signature image bytes could not be decoded."""


class InvalidSettingsError(PdfToolError):
    """Placement settings are outside their allowed ranges."""
