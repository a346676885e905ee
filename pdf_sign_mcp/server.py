from __future__ import annotations

import functools
import logging
import traceback
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from . import config, sign_tools
from .errors import PdfToolError

logger = logging.getLogger(__name__)

mcp = FastMCP("PDF Signature Stamper")


def _handle_errors(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except PdfToolError as exc:
            return {"error": str(exc)}
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Unexpected error in %s", fn.__name__)
            return {"error": f"Unexpected error: {exc}", "trace": traceback.format_exc()}

    return wrapper


def _settings_dict(
    mode: str,
    selected_pages: Optional[List[int]],
    x: Optional[float],
    y: Optional[float],
    scale: Optional[float],
    opacity: Optional[float],
    grayscale: bool,
    per_page_positions: Optional[Dict[str, Dict[str, float]]],
) -> Dict[str, Any]:
    return {
        "mode": mode,
        "selected_pages": selected_pages,
        "x": x,
        "y": y,
        "scale": scale,
        "opacity": opacity,
        "is_grayscale": grayscale,
        "per_page_positions": per_page_positions,
    }


@mcp.tool()
@_handle_errors
def sign_pdf(
    input_path: str,
    signature_path: str,
    output_path: Optional[str] = None,
    mode: str = "all",
    selected_pages: Optional[List[int]] = None,
    x: Optional[float] = None,
    y: Optional[float] = None,
    scale: Optional[float] = None,
    opacity: Optional[float] = None,
    grayscale: bool = False,
    per_page_positions: Optional[Dict[str, Dict[str, float]]] = None,
) -> Dict[str, Any]:
    """Stamp a PNG/JPG signature onto all, last, or selected zero-based pages.

    Coordinates are PDF points from the bottom-left corner; scale is a percent
    of the image's pixel size. per_page_positions maps a page index to {x, y}.
    """
    settings = _settings_dict(
        mode, selected_pages, x, y, scale, opacity, grayscale, per_page_positions
    )
    return sign_tools.sign_pdf(input_path, signature_path, output_path, settings=settings)


@mcp.tool()
@_handle_errors
def preview_signature_placements(
    input_path: str,
    signature_path: str,
    mode: str = "all",
    selected_pages: Optional[List[int]] = None,
    x: Optional[float] = None,
    y: Optional[float] = None,
    scale: Optional[float] = None,
    opacity: Optional[float] = None,
    per_page_positions: Optional[Dict[str, Dict[str, float]]] = None,
) -> Dict[str, Any]:
    """Show which pages would be signed and where, without writing a file."""
    settings = _settings_dict(
        mode, selected_pages, x, y, scale, opacity, False, per_page_positions
    )
    return sign_tools.preview_placements(input_path, signature_path, settings=settings)


@mcp.tool()
@_handle_errors
def get_pdf_page_info(pdf_path: str) -> Dict[str, Any]:
    """Return the page count and page sizes (points) of a PDF."""
    return sign_tools.get_pdf_page_info(pdf_path)


@mcp.tool()
@_handle_errors
def parse_page_range(pdf_path: str, page_range: str) -> Dict[str, Any]:
    """Convert a 1-based selection like "1, 3-5, 10" into zero-based page indices."""
    return sign_tools.parse_pages(pdf_path, page_range)


def main() -> None:
    config.configure_logging()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
