"""Monthly inventory rollup and reconciliation engine."""

__version__ = "1.0.0"
