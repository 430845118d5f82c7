"""
Remote catalog — product rows from Supabase.

Two schema variants:
- normalized: produtos → categorias_produtos (category) + especificacoes_aplicacao (specs)
- flat:       products (id, name, description, category, image_url)

Rows are mapped to Product. Consumption rates come from the application
specification when the row has one, otherwise from the static rate for the
same product id.
"""

import logging
from typing import List

from ..remote import SupabaseClient
from ..schemas import ConsumptionRate, Product, Specifications
from .base import Catalog
from .static import CONSUMPTION_RATES

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Sem categoria"
DEFAULT_IMAGE = "/placeholder.svg"
SPEC_CONDITIONS = "Conforme especificação de aplicação"

NORMALIZED_COLUMNS = (
    "id,nome,descricao,"
    "categorias_produtos:categoria_id(id,nome,tipo),"
    "especificacoes:especificacoes_aplicacao(espessura_mm,consumo_m2_kg,rendimento_m2_kg)"
)
FLAT_COLUMNS = "id,name,description,category,image_url"


def _sheet_title(name: str) -> str:
    return "Ficha técnica de %s" % name


def map_normalized_row(row: dict) -> Product:
    category = row.get("categorias_produtos") or {}
    if isinstance(category, list):
        category = category[0] if category else {}

    specs = None
    spec_rows = row.get("especificacoes") or []
    if isinstance(spec_rows, dict):
        spec_rows = [spec_rows]
    if spec_rows:
        first = spec_rows[0]
        specs = Specifications(
            thickness=first.get("espessura_mm"),
            consumption=first.get("consumo_m2_kg"),
            yield_=first.get("rendimento_m2_kg"),
        )

    name = row.get("nome") or ""
    return Product(
        id=str(row["id"]),
        name=name,
        category=category.get("nome") or DEFAULT_CATEGORY,
        description=row.get("descricao") or "",
        image_url=DEFAULT_IMAGE,
        technical_sheet=_sheet_title(name),
        specifications=specs,
    )


def map_flat_row(row: dict) -> Product:
    name = row.get("name") or ""
    return Product(
        id=str(row["id"]),
        name=name,
        category=row.get("category") or DEFAULT_CATEGORY,
        description=row.get("description") or "",
        image_url=row.get("image_url") or DEFAULT_IMAGE,
        technical_sheet=_sheet_title(name),
    )


def derive_rates(products: List[Product]) -> List[ConsumptionRate]:
    static_rates = {r.product_id: r for r in CONSUMPTION_RATES}
    rates = []
    for product in products:
        specs = product.specifications
        if specs and specs.consumption and specs.consumption > 0:
            rates.append(ConsumptionRate(
                product_id=product.id,
                unit="kg/m²",
                value=specs.consumption,
                conditions=SPEC_CONDITIONS,
            ))
        elif product.id in static_rates:
            rates.append(static_rates[product.id])
    return rates


class RemoteCatalog:
    """Fetches the whole product list in one query. Raises RemoteError on failure."""

    def __init__(self, client: SupabaseClient, schema: str = "normalized"):
        if schema not in ("normalized", "flat"):
            raise ValueError("Unknown remote catalog schema: %s" % schema)
        self.client = client
        self.schema = schema

    def fetch(self) -> Catalog:
        if self.schema == "normalized":
            rows = self.client.select("produtos", NORMALIZED_COLUMNS)
            products = [map_normalized_row(r) for r in rows]
        else:
            rows = self.client.select("products", FLAT_COLUMNS)
            products = [map_flat_row(r) for r in rows]

        if not products:
            logger.warning("Remote catalog returned no products")
        return Catalog(products, derive_rates(products))

