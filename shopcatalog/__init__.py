"""Shop Catalog - product catalog backend for a multi-shop marketplace."""

__version__ = "0.1.0"
