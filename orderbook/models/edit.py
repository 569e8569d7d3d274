"""Edit-form draft and patch models."""

from dataclasses import dataclass

from orderbook.models.order import Order, OrderType


@dataclass
class EditDraft:
    tier: int
    price_per_unit: float
    amount: int
    order_type: OrderType
    price_manually_edited: bool = False
    tier_changed_since_open: bool = False
    last_applied_autofill_key: str = ""

    @classmethod
    def from_order(cls, order: Order) -> "EditDraft":
        return cls(
            tier=order.tier,
            price_per_unit=order.price_per_unit,
            amount=order.amount,
            order_type=order.order_type,
        )


@dataclass(frozen=True)
class EditPatch:
    tier: int
    price_per_unit: float
    amount: int
    order_type: OrderType

    def as_fields(self) -> dict:
        return {
            "tier": self.tier,
            "price_per_unit": self.price_per_unit,
            "amount": self.amount,
            "order_type": self.order_type,
        }

    def to_json(self) -> dict:
        return {
            "tier": self.tier,
            "pricePerUnit": self.price_per_unit,
            "amount": self.amount,
            "orderType": self.order_type.value,
        }
