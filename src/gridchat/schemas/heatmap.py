"""Heatmap and grid Pydantic schemas."""

from pydantic import BaseModel, Field


class CoordinateSchema(BaseModel):
    latitude: float
    longitude: float


class CellResponse(BaseModel):
    """Grid cell containing a coordinate, with today's partition key."""

    cell_id: str
    x: int
    y: int
    partition_key: str
    day_key: str
    corners: list[CoordinateSchema] = Field(..., description="SW, SE, NE, NW")
    center: CoordinateSchema


class HeatmapCell(BaseModel):
    cell_id: str
    count: int
    center: CoordinateSchema


class HeatmapResponse(BaseModel):
    """Active cells around a point for one day."""

    center_cell_id: str
    day_key: str
    radius_meters: float
    cells: list[HeatmapCell]
