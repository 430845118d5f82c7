"""
Catalog store — picks the catalog a request is served from.

Substitution priority, no merging:
1. Remote catalog, when Supabase is configured and the fetch returns products
2. Static list otherwise

A failed remote fetch never propagates. The snapshot carries a warning the
caller can show as a non-blocking notice.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import settings
from ..remote import get_remote_client
from .base import Catalog
from .remote import RemoteCatalog
from .static import StaticCatalog

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Erro ao carregar produtos. Usando dados locais como fallback."


@dataclass
class CatalogSnapshot:
    catalog: Catalog
    source: str  # 'remote' | 'static'
    warning: Optional[str] = None


class CatalogStore:

    def __init__(self, remote: Optional[RemoteCatalog] = None):
        self.remote = remote
        self.static = StaticCatalog()

    def snapshot(self) -> CatalogSnapshot:
        if self.remote is None:
            return CatalogSnapshot(self.static, "static")

        try:
            catalog = self.remote.fetch()
        except Exception as e:
            logger.warning("Remote catalog fetch failed: %s — using static list", e)
            return CatalogSnapshot(self.static, "static", FALLBACK_WARNING)

        if len(catalog) == 0:
            return CatalogSnapshot(self.static, "static")
        return CatalogSnapshot(catalog, "remote")


def get_catalog_store() -> CatalogStore:
    """FastAPI dependency — store wired from settings."""
    client = get_remote_client()
    if client is None:
        return CatalogStore()
    return CatalogStore(RemoteCatalog(client, settings.REMOTE_CATALOG_SCHEMA))
