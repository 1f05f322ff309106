# src/gridchat/api/v1/endpoints/heatmap.py
"""Heatmap endpoints for the gridchat API."""

from __future__ import annotations

from fastapi import APIRouter, Query

from gridchat.core.settings import settings
from gridchat.schemas.heatmap import CoordinateSchema, HeatmapCell, HeatmapResponse
from gridchat.services import grid
from gridchat.services.heatmap import counts_near
from gridchat.services.partition import day_key, parse_day_key

from ..dependencies import StoreDep

router = APIRouter(prefix="/heatmap", tags=["heatmap"])


@router.get("", response_model=HeatmapResponse)
async def get_heatmap(
    store: StoreDep,
    latitude: float = Query(..., description="Latitude in degrees"),
    longitude: float = Query(..., description="Longitude in degrees"),
    radius_meters: float | None = Query(None, description="Window half-width in meters"),
    day: str | None = Query(None, description="Day key yyyy-MM-dd; defaults to today"),
) -> HeatmapResponse:
    """Return message counts for the active cells around a point."""
    center = grid.Coordinate(latitude, longitude)
    radius = settings.heatmap_radius_meters if radius_meters is None else radius_meters
    key = parse_day_key(day) if day is not None else day_key()
    counts = counts_near(store, center, radius, key)

    cells = []
    for cell_id, count in sorted(counts.items()):
        cell_center = grid.center(*grid.parse_cell_id(cell_id))
        cells.append(
            HeatmapCell(
                cell_id=cell_id,
                count=count,
                center=CoordinateSchema(
                    latitude=cell_center.latitude,
                    longitude=cell_center.longitude,
                ),
            )
        )
    return HeatmapResponse(
        center_cell_id=grid.cell_id_for(center),
        day_key=key,
        radius_meters=radius,
        cells=cells,
    )
