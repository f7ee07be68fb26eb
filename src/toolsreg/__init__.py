"""Tools registry validation and snapshot aggregation pipeline."""

__version__ = "0.1.0"
