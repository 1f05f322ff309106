"""Cell-day partition keys.

Messages are grouped under ``"{cell_id}_{yyyy-MM-dd}"``. The day comes from
the poster's own clock at post time and is never normalized to a canonical
timezone, so one physical cell can span two partitions around midnight for
posters in different zones.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import NamedTuple

from gridchat.core.errors import ValidationError
from gridchat.db.time import local_now
from gridchat.services.grid import CellIndex, Coordinate, cell_index, parse_cell_id

DAY_KEY_FORMAT = "%Y-%m-%d"
_SEPARATOR = "_"


class PartitionKey(NamedTuple):
    """Parsed form of a cell-day partition key."""

    cell: CellIndex
    day_key: str

    @property
    def cell_id(self) -> str:
        return self.cell.cell_id

    def __str__(self) -> str:
        return f"{self.cell_id}{_SEPARATOR}{self.day_key}"


def day_key(when: date | datetime | None = None) -> str:
    """Return the ``yyyy-MM-dd`` key for ``when`` in the clock it carries.

    Aware datetimes keep their own zone; naive ones are taken as-is. Without
    an argument the local wall clock of this process is used.
    """
    if when is None:
        when = local_now()
    if isinstance(when, datetime):
        when = when.date()
    return when.strftime(DAY_KEY_FORMAT)


def parse_day_key(value: str) -> str:
    """Validate a day key and return it unchanged.

    Raises:
        ValidationError: If ``value`` is not a real ``yyyy-MM-dd`` date.
    """
    if not isinstance(value, str) or len(value) != 10:
        raise ValidationError(f"Malformed day key: {value!r}")
    try:
        datetime.strptime(value, DAY_KEY_FORMAT)
    except ValueError as err:
        raise ValidationError(f"Malformed day key: {value!r}") from err
    return value


def partition_key(cell: CellIndex, when: date | datetime | str | None = None) -> PartitionKey:
    """Combine a cell with a calendar day."""
    day = parse_day_key(when) if isinstance(when, str) else day_key(when)
    return PartitionKey(CellIndex(int(cell.x), int(cell.y)), day)


def partition_for(
    coordinate: Coordinate | tuple[float, float],
    when: date | datetime | str | None = None,
) -> PartitionKey:
    """Return the partition a poster at ``coordinate`` writes into at ``when``."""
    return partition_key(cell_index(coordinate), when)


def parse_partition_key(value: str | PartitionKey) -> PartitionKey:
    """Parse ``"{x}:{y}_{yyyy-MM-dd}"``.

    Raises:
        ValidationError: If either half is malformed.
    """
    if isinstance(value, PartitionKey):
        return value
    if not isinstance(value, str):
        raise ValidationError("Partition key must be a string")
    cell_part, separator, day_part = value.rpartition(_SEPARATOR)
    if not separator:
        raise ValidationError(f"Malformed partition key: {value!r}")
    return PartitionKey(parse_cell_id(cell_part), parse_day_key(day_part))
