from pydantic import BaseModel, Field
from typing import Optional, List, Union
from .models import UsageType, BrazilianState


# --- Catalog ---

class ProductPart(BaseModel):
    name: str
    weight: float
    ratio: Optional[float] = None


class ProductComponent(BaseModel):
    name: str
    description: str = ""
    specific_weight: float  # kg/l
    parts: List[ProductPart] = []


class Specifications(BaseModel):
    thickness: Optional[float] = None    # espessura_mm
    consumption: Optional[float] = None  # consumo_m2_kg
    yield_: Optional[float] = Field(default=None, alias="yield")  # rendimento_m2_kg

    class Config:
        populate_by_name = True


class Product(BaseModel):
    id: str
    name: str
    category: str
    description: str = ""
    image_url: str = "/placeholder.svg"
    technical_sheet: str = ""
    components: List[ProductComponent] = []
    specifications: Optional[Specifications] = None


class ConsumptionRate(BaseModel):
    product_id: str
    unit: str
    value: float
    conditions: str = ""


# --- Calculator ---

class CalculationRequest(BaseModel):
    area: Union[str, float]
    mode: str = "area"
    thickness_mm: Optional[float] = None
    consumption_override: Optional[float] = None


class CalculationResult(BaseModel):
    product_id: str
    product_name: str
    area: float
    mode: str
    consumption_rate_used: float
    consumption_unit: str
    thickness_factor: float = 1.0
    required_mass: float
    package_label: str
    package_count: int


# --- Cart ---

class CartItem(BaseModel):
    item_id: str = ""
    product_id: str
    product_name: str
    quantity: int
    area: float
    area_name: str
    mode: str = "area"
    total_amount: float
    unit_price: float = 0.0


class CartAddRequest(CalculationRequest):
    product_id: str
    area_name: str


# --- Orders ---

class OrderCreate(BaseModel):
    customer_name: str = ""
    email: str = ""
    phone: str = ""
    notes: Optional[str] = None



# --- Identity ---

class UserProfile(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    site_address: Optional[str] = None
    usage_type: UsageType = UsageType.OWN_USE
    icms_taxpayer: bool = False
    state: Optional[BrazilianState] = None


class SessionUser(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    provider: str = "local"
