"""
Product, weight option and price models for the storefront catalogue.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Literal, Optional, Union


class CatalogModel(BaseModel):
    """Base for models exchanged with the storefront API (camelCase JSON)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WeightOption(CatalogModel):
    """Purchasable pack size of a product (e.g. 250g, 500g)."""
    weight: int
    price: Optional[float] = None
    stock: Optional[int] = None
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None
    is_discount_active: bool = False

    @field_validator("weight")
    @classmethod
    def check_weight(cls, v):
        if v <= 0:
            raise ValueError("Weight must be positive")
        return v

    @field_validator("stock")
    @classmethod
    def check_stock(cls, v):
        if v is not None and v < 0:
            raise ValueError("Stock must be non-negative")
        return v


class Product(CatalogModel):
    """Product as returned by the products API."""
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: Optional[str] = None
    price: Optional[float] = None
    base_price: Optional[float] = None
    weight_options: List[WeightOption] = Field(default_factory=list)
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None
    is_discount_active: bool = False

    @field_validator("weight_options")
    @classmethod
    def check_unique_weights(cls, v):
        weights = [option.weight for option in v]
        if len(weights) != len(set(weights)):
            raise ValueError("Weight options must have unique weights")
        return v

    def find_weight_option(self, weight: int) -> Optional[WeightOption]:
        return next((o for o in self.weight_options if o.weight == weight), None)


class DiscountDescriptor(BaseModel):
    """How a discount is computed: percentage off or a fixed amount off."""
    type: str
    value: float


class PriceInfo(BaseModel):
    """Derived unit price of a product or variant. Never persisted."""
    original: float
    discounted: float
    has_discount: bool
    discount_info: Optional[DiscountDescriptor] = None


class PricedProduct(BaseModel):
    """A product priced without an explicit weight selection."""
    kind: Literal["product"] = "product"
    product: Product


class PricedWeightOption(BaseModel):
    """A product priced at one of its own weight options."""
    kind: Literal["weight_option"] = "weight_option"
    product: Product
    weight_option: WeightOption


PricedEntity = Annotated[
    Union[PricedProduct, PricedWeightOption],
    Field(discriminator="kind"),
]
