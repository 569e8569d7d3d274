"""Notification channel: explicit subscribe/publish for order status events."""

import logging
from collections.abc import Callable
from typing import Any

from orderbook.models.notification import OrderNotification
from orderbook.models.order import UserRef

logger = logging.getLogger(__name__)

NotificationHandler = Callable[[OrderNotification], None]


class NotificationChannel:
    """Delivers notifications synchronously to the handlers subscribed at publish time."""

    def __init__(self) -> None:
        self._handlers: list[NotificationHandler] = []

    def subscribe(self, handler: NotificationHandler) -> Callable[[], None]:
        """Register a handler. Returns a callable that unsubscribes it."""
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def publish(self, event: OrderNotification) -> None:
        for handler in list(self._handlers):
            handler(event)

    def publish_raw(self, payload: dict[str, Any]) -> OrderNotification | None:
        """Parse a wire payload and publish it. Returns None for payloads without an order id."""
        event = parse_notification(payload)
        if event is None:
            logger.warning("Dropping notification without orderId: %r", payload)
            return None
        self.publish(event)
        return event


def parse_notification(payload: dict[str, Any]) -> OrderNotification | None:
    order_id = payload.get("orderId")
    if not order_id:
        return None
    claimer_raw = payload.get("claimer")
    claimer = None
    if isinstance(claimer_raw, dict) and claimer_raw.get("id"):
        claimer = UserRef(
            id=str(claimer_raw["id"]),
            display_name=claimer_raw.get("name") or "Unknown",
            in_game_name=claimer_raw.get("inGameName"),
        )
    details = payload.get("orderDetails")
    return OrderNotification(
        order_id=str(order_id),
        notification_type=str(payload.get("notificationType", "")),
        order_details=details if isinstance(details, dict) else {},
        claimer=claimer,
    )
