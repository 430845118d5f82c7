"""
Fixed product list — always available, used whenever the remote catalog is
not configured, fails, or comes back empty.

Consumption rates are manufacturer figures (kg per m² under the stated
application conditions).
"""

from ..schemas import ConsumptionRate, Product, ProductComponent, ProductPart
from .base import Catalog

PRODUCTS = [
    Product(
        id="1",
        name="4237 Aditivo para Argamassa",
        category="Aditivos",
        description="Aditivo látex para melhorar a aderência e flexibilidade das argamassas.",
        technical_sheet="Ficha técnica do 4237 Aditivo para Argamassa",
        components=[
            ProductComponent(name="4237 Aditivo Líquido", description="Aditivo látex para argamassas",
                             specific_weight=1.05),
        ],
    ),
    Product(
        id="2",
        name="254 Platinum",
        category="Argamassas",
        description="Argamassa colante de alto desempenho para porcelanatos e pedras naturais.",
        technical_sheet="Ficha técnica do 254 Platinum",
        components=[
            ProductComponent(name="254 Platinum Pó", description="Argamassa colante em pó",
                             specific_weight=1.3),
        ],
    ),
    Product(
        id="3",
        name="HYDRO BAN®",
        category="Impermeabilizantes",
        description="Membrana impermeabilizante de cura rápida para áreas úmidas.",
        technical_sheet="Ficha técnica do HYDRO BAN®",
        components=[
            ProductComponent(name="HYDRO BAN® Membrana", description="Membrana impermeabilizante líquida",
                             specific_weight=1.2),
        ],
    ),
    Product(
        id="4",
        name="SPECTRALOCK® PRO Premium",
        category="Rejuntes",
        description="Rejunte epóxi premium resistente a manchas e produtos químicos.",
        technical_sheet="Ficha técnica do SPECTRALOCK® PRO Premium",
        components=[
            ProductComponent(name="SPECTRALOCK® Parte A", description="Resina epóxi - parte A",
                             specific_weight=1.1, parts=[ProductPart(name="Parte A", weight=0.8)]),
            ProductComponent(name="SPECTRALOCK® Parte B", description="Catalisador - parte B",
                             specific_weight=1.05, parts=[ProductPart(name="Parte B", weight=0.2)]),
            ProductComponent(name="SPECTRALOCK® Agregado em Pó", description="Mistura de agregados coloridos",
                             specific_weight=1.4, parts=[ProductPart(name="Pó Colorido", weight=3.0)]),
        ],
    ),
    Product(
        id="5",
        name="PERMACOLOR® Select",
        category="Rejuntes",
        description="Rejunte cimentício de alta performance com proteção antimicrobiana.",
        technical_sheet="Ficha técnica do PERMACOLOR® Select",
        components=[
            ProductComponent(name="PERMACOLOR® Base", description="Base cimentícia para rejunte",
                             specific_weight=1.3),
            ProductComponent(name="PERMACOLOR® Pigmento", description="Pigmento colorido para mistura",
                             specific_weight=0.9),
        ],
    ),
    Product(
        id="6",
        name="LATAPOXY® 300",
        category="Adesivos",
        description="Adesivo epóxi químicamente resistente para instalação de cerâmicas e pedras.",
        technical_sheet="Ficha técnica do LATAPOXY® 300",
        components=[
            ProductComponent(name="LATAPOXY® Parte A", description="Resina epóxi - parte A",
                             specific_weight=1.15, parts=[ProductPart(name="Parte A", weight=1.0, ratio=1)]),
            ProductComponent(name="LATAPOXY® Parte B", description="Catalisador - parte B",
                             specific_weight=1.0, parts=[ProductPart(name="Parte B", weight=0.2, ratio=0.2)]),
            ProductComponent(name="LATAPOXY® Parte C", description="Agregado em pó - parte C",
                             specific_weight=1.6, parts=[ProductPart(name="Parte C", weight=2.8, ratio=2.8)]),
        ],
    ),
    Product(
        id="7",
        name="Especificação Membrana Poliuretano",
        category="Especificações",
        description="Sistema completo de impermeabilização com membrana de poliuretano "
                    "Elastoguard Aqua e primer.",
        technical_sheet="Ficha técnica do Sistema Membrana de Poliuretano",
        components=[
            ProductComponent(name="Elastoguard Primer", description="Primer para preparo da superfície",
                             specific_weight=1.05,
                             parts=[ProductPart(name="Parte A", weight=4.0, ratio=4),
                                    ProductPart(name="Parte B", weight=1.0, ratio=1)]),
            ProductComponent(name="Elastoguard Aqua", description="Membrana de poliuretano impermeabilizante",
                             specific_weight=1.3,
                             parts=[ProductPart(name="Parte A", weight=20.0),
                                    ProductPart(name="Parte B", weight=4.0)]),
        ],
    ),
]

CONSUMPTION_RATES = [
    ConsumptionRate(product_id="1", unit="kg/m²", value=0.8,
                    conditions="Para argamassas de assentamento de cerâmicas"),
    ConsumptionRate(product_id="2", unit="kg/m²", value=5,
                    conditions="Com desempenadeira de 8mm x 8mm"),
    ConsumptionRate(product_id="3", unit="kg/m²", value=1.2,
                    conditions="Por demão, mínimo 2 demãos"),
    ConsumptionRate(product_id="4", unit="kg/m²", value=0.6,
                    conditions="Para juntas de 3mm (porcelanatos)"),
    ConsumptionRate(product_id="5", unit="kg/m²", value=0.5,
                    conditions="Para juntas de 3mm (cerâmicas comuns)"),
    ConsumptionRate(product_id="6", unit="kg/m²", value=3.5,
                    conditions="Com desempenadeira de 6mm x 6mm"),
    ConsumptionRate(product_id="7", unit="kg/m²", value=1.8,
                    conditions="Aplicação total do sistema (primer + membrana)"),
]


class StaticCatalog(Catalog):

    def __init__(self):
        super().__init__(PRODUCTS, CONSUMPTION_RATES)
