"""gridchat: location-scoped, day-partitioned discussion threads."""

__version__ = "0.1.0"
