"""Per-cell activity counts around a point.

The query window is the square of ``radius_in_cells`` cells on each side of
the center cell, for a single day key. Cells without messages are absent
from the result rather than reported as zero.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Protocol

from gridchat.core.errors import ValidationError
from gridchat.core.settings import settings
from gridchat.services.grid import (
    Coordinate,
    cell_index,
    neighborhood,
    parse_cell_id,
    radius_in_cells,
)
from gridchat.services.partition import day_key, parse_day_key

logger = logging.getLogger(__name__)


class CellCounter(Protocol):
    def count_cells(
        self,
        day_key: str,
        x_range: tuple[int, int],
        y_range: tuple[int, int],
    ) -> list[tuple[str, int]]: ...


def counts_near(
    store: CellCounter,
    center: Coordinate | tuple[float, float],
    radius_meters: float | None = None,
    day: date | datetime | str | None = None,
    *,
    max_radius_meters: float | None = None,
) -> dict[str, int]:
    """Return ``{cell_id: message_count}`` for one day around ``center``.

    Args:
        store: Anything exposing ``count_cells``, normally a DiscussionStore.
        center: Point the window is centered on.
        radius_meters: Half-width of the window; defaults to
            ``settings.heatmap_radius_meters``.
        day: Day to count, as a date, datetime or ``yyyy-MM-dd`` key.
            Defaults to today on the local clock.
        max_radius_meters: Upper bound on ``radius_meters``; defaults to
            ``settings.heatmap_max_radius_meters``.

    Raises:
        ValidationError: For a NaN center, a negative radius, a radius above
            the bound, or a malformed day key.
    """
    if radius_meters is None:
        radius_meters = settings.heatmap_radius_meters
    limit = settings.heatmap_max_radius_meters if max_radius_meters is None else max_radius_meters
    radius_cells = radius_in_cells(radius_meters)
    if radius_meters > limit:
        raise ValidationError(f"Radius must not exceed {limit:g} meters")

    key = parse_day_key(day) if isinstance(day, str) else day_key(day)
    origin = cell_index(center)
    rows = store.count_cells(
        key,
        (origin.x - radius_cells, origin.x + radius_cells),
        (origin.y - radius_cells, origin.y + radius_cells),
    )

    window = set(neighborhood(origin, radius_cells))
    counts: dict[str, int] = {}
    for cell_id, count in rows:
        if parse_cell_id(cell_id) not in window:
            continue
        counts[cell_id] = count
    logger.debug("Heatmap around %s on %s: %d active cells", origin.cell_id, key, len(counts))
    return counts
