"""
Product catalog — static list, remote Supabase rows, and the store that
chooses between them.
"""

from .base import Catalog, filter_products
from .store import CatalogSnapshot, CatalogStore, get_catalog_store

__all__ = ["Catalog", "CatalogSnapshot", "CatalogStore", "filter_products", "get_catalog_store"]
