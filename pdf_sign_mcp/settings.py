from __future__ import annotations

import enum
import types
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from . import config
from .errors import InvalidSettingsError

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


class PlacementMode(str, enum.Enum):
    """Which pages receive the signature."""

    ALL = "all"
    LAST = "last"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Position:
    """Point in PDF space (points, origin bottom-left)."""

    x: float
    y: float


@dataclass(frozen=True)
class SignatureSettings:
    """
    Placement policy for one signing run.

    Instances are immutable and hashable; produce a changed copy with
    :func:`dataclasses.replace`. ``selected_pages`` is only consulted in
    :attr:`PlacementMode.CUSTOM` and is normalised to a frozenset, so input
    order and duplicates do not matter. ``per_page_positions`` accepts
    ``Position`` values, ``{"x", "y"}`` mappings or ``(x, y)`` pairs and is
    stored as a read-only mapping keyed by int.
    """

    mode: PlacementMode = PlacementMode.ALL
    selected_pages: Iterable[int] = frozenset()
    scale: float = config.DEFAULT_SCALE
    opacity: float = config.DEFAULT_OPACITY
    is_grayscale: bool = False
    global_position: Position = Position(config.DEFAULT_X, config.DEFAULT_Y)
    per_page_positions: Mapping[int, Position] = field(default_factory=dict)

    def __post_init__(self) -> None:
        try:
            mode = PlacementMode(self.mode)
        except ValueError:
            raise InvalidSettingsError(
                f"Unknown placement mode: {self.mode!r} (expected all, last or custom)"
            ) from None
        try:
            scale_ok = self.scale > 0
            opacity_ok = 0.0 <= self.opacity <= 1.0
        except TypeError as exc:
            raise InvalidSettingsError(f"scale and opacity must be numbers: {exc}") from exc
        if not scale_ok:
            raise InvalidSettingsError(f"scale must be > 0, got {self.scale}")
        if not opacity_ok:
            raise InvalidSettingsError(f"opacity must be within [0, 1], got {self.opacity}")

        try:
            selected = frozenset(int(p) for p in self.selected_pages)
            overrides = {
                int(idx): _to_position(pos) for idx, pos in dict(self.per_page_positions).items()
            }
            global_position = _to_position(self.global_position)
            is_grayscale = _to_bool(self.is_grayscale)
        except (TypeError, ValueError, KeyError) as exc:
            raise InvalidSettingsError(f"Invalid signature settings: {exc}") from exc

        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "is_grayscale", is_grayscale)
        object.__setattr__(self, "selected_pages", selected)
        object.__setattr__(self, "global_position", global_position)
        object.__setattr__(self, "per_page_positions", types.MappingProxyType(overrides))

    def __hash__(self) -> int:
        return hash(
            (
                self.mode,
                self.selected_pages,
                self.scale,
                self.opacity,
                self.is_grayscale,
                self.global_position,
                frozenset(self.per_page_positions.items()),
            )
        )

    def position_for(self, page_index: int) -> Position:
        return self.per_page_positions.get(page_index, self.global_position)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SignatureSettings":
        """
        Build settings from plain JSON-style data.

        Recognised keys: ``mode``, ``selected_pages``, ``scale``, ``opacity``,
        ``is_grayscale``, ``x``, ``y`` and ``per_page_positions`` (a mapping of
        page index, possibly as a string, to ``{"x": ..., "y": ...}``).
        Missing keys keep their defaults.
        """
        data = dict(data or {})
        kwargs: Dict[str, Any] = {}
        try:
            mode = data.get("mode")
            if isinstance(mode, PlacementMode):
                kwargs["mode"] = mode
            elif mode is not None:
                kwargs["mode"] = str(mode).strip().lower()
            if data.get("selected_pages") is not None:
                kwargs["selected_pages"] = [int(p) for p in data["selected_pages"]]
            if data.get("scale") is not None:
                kwargs["scale"] = float(data["scale"])
            if data.get("opacity") is not None:
                kwargs["opacity"] = float(data["opacity"])
            if data.get("is_grayscale") is not None:
                kwargs["is_grayscale"] = data["is_grayscale"]
            x, y = data.get("x"), data.get("y")
            if x is not None or y is not None:
                kwargs["global_position"] = Position(
                    float(config.DEFAULT_X if x is None else x),
                    float(config.DEFAULT_Y if y is None else y),
                )
            kwargs["per_page_positions"] = data.get("per_page_positions") or {}
        except (TypeError, ValueError, KeyError) as exc:
            raise InvalidSettingsError(f"Invalid signature settings: {exc}") from exc
        return cls(**kwargs)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _to_position(value: Any) -> Position:
    if isinstance(value, Position):
        return value
    if isinstance(value, Mapping):
        return Position(float(value["x"]), float(value["y"]))
    x, y = value
    return Position(float(x), float(y))


def parse_page_range(text: str, page_count: int) -> List[int]:
    """
    Parse a page selection such as ``"1, 3-5, 10"``.

    Numbers are 1-based and ranges are inclusive in either direction. Parts
    that are not numbers, or numbers outside ``1..page_count``, are ignored.
    Returns sorted, unique, zero-based indices.
    """
    selected = set()
    for part in (text or "").split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            bounds = [b.strip() for b in part.split("-", 1)]
            try:
                start, end = int(bounds[0]), int(bounds[1])
            except ValueError:
                continue
            numbers: Iterable[int] = range(min(start, end), max(start, end) + 1)
        else:
            try:
                numbers = [int(part)]
            except ValueError:
                continue
        selected.update(n - 1 for n in numbers if 0 < n <= page_count)
    return sorted(selected)


def ui_to_pdf_point(left_pct: float, bottom_pct: float) -> Position:
    """Convert preview percentages (0-100) to PDF points on a US Letter page."""
    return Position(
        left_pct / 100.0 * config.UI_PAGE_WIDTH,
        bottom_pct / 100.0 * config.UI_PAGE_HEIGHT,
    )


def pdf_point_to_ui(position: Position) -> Tuple[float, float]:
    return (
        position.x / config.UI_PAGE_WIDTH * 100.0,
        position.y / config.UI_PAGE_HEIGHT * 100.0,
    )
