"""
Catalog contract over an in-memory product list.

Both the static list and a fetched remote list are served through this
class, so lookups behave the same whichever source won.
"""

from typing import List, Optional

from ..schemas import ConsumptionRate, Product


class Catalog:

    def __init__(self, products: List[Product], rates: List[ConsumptionRate]):
        self._products = list(products)
        self._rates = list(rates)

    def get_all(self) -> List[Product]:
        return list(self._products)

    def get_by_id(self, product_id: str) -> Optional[Product]:
        """None when unknown — never raises."""
        for product in self._products:
            if product.id == str(product_id):
                return product
        return None

    def get_by_category(self, category: str) -> List[Product]:
        return [p for p in self._products if p.category == category]

    def get_categories(self) -> List[str]:
        """Unique category names in first-seen order."""
        return list(dict.fromkeys(p.category for p in self._products))

    def get_consumption_rate(self, product_id: str) -> Optional[ConsumptionRate]:
        """First matching rate, or None."""
        for rate in self._rates:
            if rate.product_id == str(product_id):
                return rate
        return None

    def get_consumption_rates(self) -> List[ConsumptionRate]:
        return list(self._rates)

    def __len__(self):
        return len(self._products)


def filter_products(products: List[Product], search: str = "", category: str = "") -> List[Product]:
    """Case-insensitive match on name or description, plus an optional exact category."""
    term = (search or "").strip().lower()
    results = []
    for product in products:
        matches_search = (
            not term
            or term in product.name.lower()
            or term in product.description.lower()
        )
        matches_category = not category or product.category == category
        if matches_search and matches_category:
            results.append(product)
    return results
