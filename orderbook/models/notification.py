"""Real-time order status notification models."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from orderbook.models.order import UserRef


class NotificationType(StrEnum):
    ORDER_CLAIMED = "order_claimed"
    ORDER_READY = "order_ready"
    ORDER_COMPLETED = "order_completed"
    ORDER_CANCELLED = "order_cancelled"


@dataclass(frozen=True)
class OrderNotification:
    order_id: str
    notification_type: str  # unknown kinds are carried through and ignored
    order_details: dict[str, Any] = field(default_factory=dict)
    claimer: UserRef | None = None
