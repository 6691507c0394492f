"""
Navigation - Index arithmetic and filtered views over a catalog.

Two coordinate spaces: absolute indices into the catalog, and rows of a
filtered view. All mutation happens in absolute space.
"""
from typing import Optional

from ..models import Catalog, FilteredView


def clamp_index(index: int, length: int) -> Optional[int]:
    """Clamp a direct selection into [0, length - 1]. None for empty lists."""
    if length <= 0:
        return None
    return max(0, min(index, length - 1))


def wrap_index(index: int, length: int) -> Optional[int]:
    """Circular adjacency for next/previous. None for empty lists."""
    if length <= 0:
        return None
    return index % length


def build_filtered_view(catalog: Catalog, text: str) -> FilteredView:
    """Tracks whose title or creator contains text (case-insensitive)."""
    if not text:
        return FilteredView(text, catalog.tracks, tuple(range(len(catalog))))
    matches = [(i, track) for i, track in enumerate(catalog) if track.matches(text)]
    return FilteredView(
        text=text,
        tracks=tuple(track for _, track in matches),
        indices=tuple(i for i, _ in matches),
    )
