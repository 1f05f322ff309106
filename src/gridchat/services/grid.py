"""Spatial grid indexing on a Web-Mercator plane.

Every coordinate on the globe maps to exactly one square cell of
``CELL_SIZE_METERS`` on a side, measured in projected meters. Cells are
addressed by an integer pair ``(x, y)`` and serialized as ``"{x}:{y}"``.
The same index is used to partition writes and to answer neighborhood
queries, so the mapping has to be total and stable:

    cell_index(center(*index)) == index

holds for every cell inside the projectable latitude band.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from typing import NamedTuple

from gridchat.core.errors import ValidationError

CELL_SIZE_METERS = 100.0

# WGS84 semi-major axis used by EPSG:3857.
EARTH_RADIUS_METERS = 6_378_137.0
MAX_LATITUDE = 85.05112878
MAX_LONGITUDE = 180.0

_CELL_ID_RE = re.compile(r"^(-?\d+):(-?\d+)$")


class Coordinate(NamedTuple):
    """Geographic position in degrees."""

    latitude: float
    longitude: float


class CellIndex(NamedTuple):
    """Integer address of a grid cell."""

    x: int
    y: int

    @property
    def cell_id(self) -> str:
        return cell_id(self.x, self.y)


def _clamp(value: float, bound: float) -> float:
    return max(-bound, min(bound, value))


def normalize(coordinate: Coordinate | tuple[float, float]) -> Coordinate:
    """Return a coordinate that is safe to project.

    Latitude is clamped to the Mercator band and longitude to [-180, 180].
    Infinities clamp like any other out-of-range value.

    Raises:
        ValidationError: If either component is NaN or not a number.
    """
    latitude, longitude = coordinate
    try:
        latitude = float(latitude)
        longitude = float(longitude)
    except (TypeError, ValueError) as err:
        raise ValidationError("Coordinate components must be numbers") from err
    # A NaN index would silently land the message in a partition nobody reads.
    if math.isnan(latitude) or math.isnan(longitude):
        raise ValidationError("Coordinate must not contain NaN")
    return Coordinate(_clamp(latitude, MAX_LATITUDE), _clamp(longitude, MAX_LONGITUDE))


def project(coordinate: Coordinate | tuple[float, float]) -> tuple[float, float]:
    """Project a coordinate to Web-Mercator meters ``(mx, my)``."""
    latitude, longitude = normalize(coordinate)
    mx = EARTH_RADIUS_METERS * math.radians(longitude)
    my = EARTH_RADIUS_METERS * math.log(math.tan(math.pi / 4 + math.radians(latitude) / 2))
    return mx, my


def unproject(mx: float, my: float) -> Coordinate:
    """Inverse of :func:`project`."""
    longitude = math.degrees(mx / EARTH_RADIUS_METERS)
    latitude = math.degrees(2 * math.atan(math.exp(my / EARTH_RADIUS_METERS)) - math.pi / 2)
    return Coordinate(latitude, longitude)


def cell_index(coordinate: Coordinate | tuple[float, float]) -> CellIndex:
    """Return the cell containing ``coordinate``."""
    mx, my = project(coordinate)
    return CellIndex(math.floor(mx / CELL_SIZE_METERS), math.floor(my / CELL_SIZE_METERS))


def cell_id(x: int, y: int) -> str:
    """Serialize a cell index as ``"{x}:{y}"``."""
    return f"{int(x)}:{int(y)}"


def cell_id_for(coordinate: Coordinate | tuple[float, float]) -> str:
    """Shortcut for ``cell_id(*cell_index(coordinate))``."""
    return cell_index(coordinate).cell_id


def parse_cell_id(value: str) -> CellIndex:
    """Parse a ``"{x}:{y}"`` identifier back into a :class:`CellIndex`.

    Raises:
        ValidationError: If ``value`` is not exactly two signed integers
            separated by a colon.
    """
    if not isinstance(value, str):
        raise ValidationError("Cell id must be a string")
    match = _CELL_ID_RE.fullmatch(value)
    if match is None:
        raise ValidationError(f"Malformed cell id: {value!r}")
    return CellIndex(int(match.group(1)), int(match.group(2)))


def corners(x: int, y: int) -> tuple[Coordinate, Coordinate, Coordinate, Coordinate]:
    """Return the cell polygon in degrees.

    Corners are ordered south-west, south-east, north-east, north-west,
    i.e. counter-clockwise with north up.
    """
    west = x * CELL_SIZE_METERS
    east = (x + 1) * CELL_SIZE_METERS
    south = y * CELL_SIZE_METERS
    north = (y + 1) * CELL_SIZE_METERS
    return (
        unproject(west, south),
        unproject(east, south),
        unproject(east, north),
        unproject(west, north),
    )


def center(x: int, y: int) -> Coordinate:
    """Return the centroid of the corner polygon."""
    points = corners(x, y)
    return Coordinate(
        sum(point.latitude for point in points) / len(points),
        sum(point.longitude for point in points) / len(points),
    )


def radius_in_cells(radius_meters: float) -> int:
    """Convert a radius in meters to a whole number of cells, at least one.

    Raises:
        ValidationError: If the radius is negative, NaN or infinite.
    """
    if not math.isfinite(radius_meters) or radius_meters < 0:
        raise ValidationError("Radius must be a finite, non-negative number of meters")
    return max(1, math.ceil(radius_meters / CELL_SIZE_METERS))


def neighborhood(index: CellIndex, radius: int) -> Iterator[CellIndex]:
    """Yield every cell in the square window of ``radius`` cells around ``index``.

    Rows are yielded south to north, cells west to east.
    """
    for y in range(index.y - radius, index.y + radius + 1):
        for x in range(index.x - radius, index.x + radius + 1):
            yield CellIndex(x, y)
