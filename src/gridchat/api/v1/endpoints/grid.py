# src/gridchat/api/v1/endpoints/grid.py
"""Grid lookup endpoints for the gridchat API."""

from __future__ import annotations

from fastapi import APIRouter, Query

from gridchat.schemas.heatmap import CellResponse, CoordinateSchema
from gridchat.services import grid
from gridchat.services.partition import partition_key

router = APIRouter(prefix="/grid", tags=["grid"])


@router.get("/cell", response_model=CellResponse)
async def locate_cell(
    latitude: float = Query(..., description="Latitude in degrees"),
    longitude: float = Query(..., description="Longitude in degrees"),
    day: str | None = Query(None, description="Day key yyyy-MM-dd; defaults to today"),
) -> CellResponse:
    """Return the cell containing a coordinate and its partition for ``day``."""
    index = grid.cell_index(grid.Coordinate(latitude, longitude))
    key = partition_key(index, day)
    center = grid.center(*index)
    return CellResponse(
        cell_id=index.cell_id,
        x=index.x,
        y=index.y,
        partition_key=str(key),
        day_key=key.day_key,
        corners=[
            CoordinateSchema(latitude=point.latitude, longitude=point.longitude)
            for point in grid.corners(*index)
        ],
        center=CoordinateSchema(latitude=center.latitude, longitude=center.longitude),
    )
