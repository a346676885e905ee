"""
pdf-sign-mcp: MCP server that stamps a signature image onto selected PDF pages.

Version is read directly from pyproject.toml so that editable installs report
the checkout they run from rather than whatever pip recorded last.
"""
from __future__ import annotations

import re as _re
from pathlib import Path as _Path


def _get_version() -> str:
    """Read version from pyproject.toml.

    Fallback chain:
      1. Parse ``version = "X.Y.Z"`` from pyproject.toml in the repo root.
      2. importlib.metadata (non-editable installs).
      3. ``"0.0.0-dev"`` sentinel.
    """
    try:
        pyproject = _Path(__file__).resolve().parent.parent / "pyproject.toml"
        if pyproject.is_file():
            text = pyproject.read_text(encoding="utf-8")
            match = _re.search(r'^version\s*=\s*"([^"]+)"', text, _re.MULTILINE)
            if match:
                return match.group(1)
    except OSError:
        pass

    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("pdf-sign-mcp")
    except PackageNotFoundError:
        pass

    return "0.0.0-dev"


__version__: str = _get_version()
