"""Order models for the peer-to-peer order book."""

from dataclasses import dataclass
from enum import StrEnum

TIER_MIN = 1
TIER_MAX = 10


class OrderType(StrEnum):
    BUY = "BUY"
    SELL = "SELL"


class OrderStatus(StrEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    READY_TO_TRADE = "READY_TO_TRADE"
    FULFILLED = "FULFILLED"


@dataclass(frozen=True)
class UserRef:
    """Denormalized snapshot of a user at the time the order was served."""

    id: str
    display_name: str
    in_game_name: str | None = None


@dataclass(frozen=True)
class Order:
    id: str
    item_name: str
    tier: int
    price_per_unit: float
    amount: int
    order_type: OrderType
    status: OrderStatus
    created_at: str
    creator: UserRef
    fulfilled_at: str | None = None
    claimer: UserRef | None = None


# Fields a local merge may never rewrite.
IMMUTABLE_ORDER_FIELDS = frozenset({"id", "item_name", "creator", "created_at"})


@dataclass(frozen=True)
class OrdersPage:
    orders: list[Order]
    total_count: int
    has_more: bool
    page: int
    limit: int
    current_user: UserRef | None = None
