"""Layered key-value maps arranged as a DAG, with parent lookups and mainline pruning."""

__version__ = "0.1.0"
__all__ = ["orphan", "ids", "raw", "rawkey"]