"""
Shopping cart models.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CartLineItem(BaseModel):
    """Product (and weight) in the cart, with prices captured when it was added."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: str
    name: Optional[str] = None
    selected_weight: Optional[int] = None
    qty: int = Field(gt=0)
    price: float                 # unit price actually charged
    original_price: float        # unit price before product/weight discount
    added_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def line_total(self) -> float:
        return self.price * self.qty

    @property
    def has_discount(self) -> bool:
        return self.original_price > self.price

    def matches(self, product_id: str, selected_weight: Optional[int]) -> bool:
        return self.product_id == product_id and self.selected_weight == selected_weight


class Cart(BaseModel):
    """Shopping cart for one storefront session."""
    session_id: str
    items: List[CartLineItem] = Field(default_factory=list)
    total_price: float = 0.0
    total_items: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_updated: datetime = Field(default_factory=datetime.utcnow)

    def add_item(self, item: CartLineItem):
        for existing in self.items:
            if existing.matches(item.product_id, item.selected_weight):
                existing.qty += item.qty
                # the whole line is charged at the latest price
                existing.price = item.price
                existing.original_price = item.original_price
                break
        else:
            self.items.append(item)

        self.recalculate_total()

    def remove_item(self, product_id: str, selected_weight: Optional[int] = None):
        """Remove one weight variant, or every variant of the product when no weight is given."""
        if selected_weight is None:
            self.items = [i for i in self.items if i.product_id != product_id]
        else:
            self.items = [i for i in self.items if not i.matches(product_id, selected_weight)]
        self.recalculate_total()

    def update_quantity(self, product_id: str, qty: int, selected_weight: Optional[int] = None):
        if qty <= 0:
            self.remove_item(product_id, selected_weight)
            return

        for item in self.items:
            if item.product_id != product_id:
                continue
            if selected_weight is not None and item.selected_weight != selected_weight:
                continue
            item.qty = qty
        self.recalculate_total()

    def clear(self):
        self.items = []
        self.recalculate_total()

    def recalculate_total(self):
        self.total_price = sum(i.line_total for i in self.items)
        self.total_items = sum(i.qty for i in self.items)
        self.last_updated = datetime.utcnow()

    @property
    def subtotal(self) -> float:
        return sum(i.line_total for i in self.items)

    @property
    def has_discounted_items(self) -> bool:
        return any(i.has_discount for i in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items
