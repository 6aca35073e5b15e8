"""Marketplace catalog API.

Product catalog and inventory backend: products, variants and categories
stored in PostgreSQL with a Redis cache-aside read path.
"""

__version__ = "0.1.0"
