from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List

from .settings import PlacementMode, SignatureSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSize:
    """Natural pixel size of an embedded image; 1 px maps to 1 pt."""

    width: float
    height: float

    def scale(self, factor: float) -> "ImageSize":
        return ImageSize(self.width * factor, self.height * factor)


@dataclass(frozen=True)
class PlacementRecord:
    page_index: int
    x: float
    y: float
    width: float
    height: float
    opacity: float

    def to_dict(self) -> Dict:
        return asdict(self)


def target_pages(page_count: int, settings: SignatureSettings) -> List[int]:
    """Zero-based page indices the policy selects, ascending and unique."""
    page_count = max(int(page_count), 0)
    if page_count == 0:
        return []

    if settings.mode is PlacementMode.ALL:
        return list(range(page_count))
    if settings.mode is PlacementMode.LAST:
        return [page_count - 1]

    in_range = sorted(idx for idx in settings.selected_pages if 0 <= idx < page_count)
    dropped = len(settings.selected_pages) - len(in_range)
    if dropped:
        logger.debug(
            "Ignoring %d selected page(s) outside 0..%d", dropped, page_count - 1
        )
    return in_range


def is_page_targeted(page_index: int, page_count: int, settings: SignatureSettings) -> bool:
    return page_index in target_pages(page_count, settings)


def resolve_placements(
    page_count: int,
    settings: SignatureSettings,
    image_size: ImageSize,
) -> List[PlacementRecord]:
    """
    Compute one placement per targeted page.

    Pure and total: never raises for a valid settings object and returns an
    empty list when nothing is targeted. The signature size is derived once
    from ``image_size`` and ``settings.scale`` and shared by every record.
    """
    size = image_size.scale(settings.scale / 100.0)
    records: List[PlacementRecord] = []
    for idx in target_pages(page_count, settings):
        pos = settings.position_for(idx)
        records.append(
            PlacementRecord(
                page_index=idx,
                x=pos.x,
                y=pos.y,
                width=size.width,
                height=size.height,
                opacity=settings.opacity,
            )
        )
    return records
