"""Order list cache: paginated fetch, local mutation, notification reconciliation.

All methods run on a single asyncio loop. Fetch completion and notification
delivery may interleave in any order; a page-1 fetch replaces whatever the
notifications had applied in the meantime (the server is treated as ground
truth).
"""

import asyncio
import dataclasses
import logging

from orderbook.config.schema import ApiConfig, SyncConfig
from orderbook.ingest.orders_client import OrdersClient, OrdersClientError
from orderbook.models.notification import NotificationType, OrderNotification
from orderbook.models.order import (
    IMMUTABLE_ORDER_FIELDS,
    Order,
    OrdersPage,
    OrderStatus,
    OrderType,
    UserRef,
)
from orderbook.models.session import SessionStatus
from orderbook.sync.channel import NotificationChannel
from orderbook.sync.session import SessionProvider

logger = logging.getLogger(__name__)


class OrderListCache:
    def __init__(
        self,
        client: OrdersClient,
        session: SessionProvider,
        channel: NotificationChannel | None = None,
        api_config: ApiConfig | None = None,
        sync_config: SyncConfig | None = None,
    ):
        self.client = client
        self.session = session
        self.page_limit = (api_config or ApiConfig()).page_limit
        self.grace_seconds = (sync_config or SyncConfig()).completion_grace_seconds

        self._orders: list[Order] = []
        self.page = 1
        self.total_count = 0
        self.has_more = False
        self.loading = True
        self.current_user: UserRef | None = None
        self.last_error: str | None = None

        self._in_flight = False
        self._initialized = False
        self._closed = False
        self._removal_timers: set[asyncio.TimerHandle] = set()
        self._unsubscribe = channel.subscribe(self.apply_notification) if channel else None

    @property
    def orders(self) -> tuple[Order, ...]:
        return tuple(self._orders)

    @property
    def is_fetching(self) -> bool:
        return self._in_flight

    def get(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    # --- Fetching ---

    async def load(self, page: int = 1, reset_if_first_page: bool = False) -> None:
        """Fetch one page. Ignored while another load is in flight."""
        current = self.session.session
        if current is None or not current.user_id or self._in_flight:
            return

        self._in_flight = True
        self.loading = page == 1
        self.last_error = None
        try:
            result = await self.client.fetch_orders(page=page, limit=self.page_limit)
            if self._closed:
                logger.debug("Discarding page %d fetched after close", page)
                return
            self._apply_page(page, result, replace=reset_if_first_page or page == 1)

            if result.current_user is not None:
                self.current_user = result.current_user
            else:
                await self._load_current_user()
        except OrdersClientError as e:
            logger.error("Error fetching orders page=%d: %s", page, e)
            self.last_error = str(e)
        except Exception as e:
            logger.exception("Unexpected error fetching orders page=%d", page)
            self.last_error = f"Unexpected error: {e}"
        finally:
            self.loading = False
            self._in_flight = False

    def _apply_page(self, page: int, result: OrdersPage, replace: bool) -> None:
        batch = _dedupe(result.orders)
        if replace:
            self._orders = batch
        else:
            index = {o.id: i for i, o in enumerate(self._orders)}
            for order in batch:
                if order.id in index:
                    self._orders[index[order.id]] = order
                else:
                    index[order.id] = len(self._orders)
                    self._orders.append(order)

        self.has_more = result.has_more
        self.total_count = result.total_count
        self.page = page
        logger.info(
            "Loaded page %d: %d orders (%d cached, total %d, more=%s)",
            page, len(batch), len(self._orders), self.total_count, self.has_more,
        )

    async def _load_current_user(self) -> None:
        try:
            user = await self.client.fetch_current_user()
        except OrdersClientError as e:
            logger.error("Error fetching user data: %s", e)
            return
        if user is not None and not self._closed:
            self.current_user = user

    async def load_more(self) -> None:
        if self.has_more and not self._in_flight:
            await self.load(self.page + 1, False)

    async def refetch(self) -> None:
        """Full refresh from page 1, regardless of the one-shot init guard."""
        self._initialized = False
        await self.load(1, True)

    async def sync_session(self) -> None:
        """Run the initial load once the session has resolved to an identity."""
        if self.session.status == SessionStatus.LOADING or self._initialized:
            return
        current = self.session.session
        if current is not None and current.user_id:
            self._initialized = True
            await self.load(1, True)
        else:
            # Resolved without an identity: nothing will load.
            self.loading = False

    async def refresh_session(self) -> None:
        """Refresh the session, then reload so embedded user data is current."""
        try:
            await self.session.update()
        except Exception:
            logger.exception("Error refreshing session")
            return
        await self.refetch()

    # --- Local mutation ---

    def update_order(self, order_id: str, **fields) -> None:
        """Merge fields into the cached order. No-op if the id is not cached."""
        for i, order in enumerate(self._orders):
            if order.id != order_id:
                continue
            for name in IMMUTABLE_ORDER_FIELDS.intersection(fields):
                if getattr(order, name) != fields[name]:
                    raise ValueError(f"Order field {name!r} cannot be changed")
            self._orders[i] = dataclasses.replace(order, **fields)
            return

    def remove_order(self, order_id: str) -> None:
        self._orders = [o for o in self._orders if o.id != order_id]

    # --- Notifications ---

    def apply_notification(self, event: OrderNotification) -> None:
        kind = event.notification_type
        order_id = event.order_id

        if kind == NotificationType.ORDER_CLAIMED:
            order_type = event.order_details.get("orderType")
            if order_type is None:
                cached = self.get(order_id)
                order_type = cached.order_type if cached else None
            status = (
                OrderStatus.READY_TO_TRADE
                if order_type == OrderType.SELL
                else OrderStatus.IN_PROGRESS
            )
            self.update_order(order_id, status=status, claimer=event.claimer)
        elif kind == NotificationType.ORDER_READY:
            self.update_order(order_id, status=OrderStatus.READY_TO_TRADE)
        elif kind == NotificationType.ORDER_COMPLETED:
            self.update_order(order_id, status=OrderStatus.FULFILLED)
            self._schedule_removal(order_id)
        elif kind == NotificationType.ORDER_CANCELLED:
            self.update_order(order_id, status=OrderStatus.OPEN, claimer=None)
        else:
            logger.debug("Ignoring notification %r for order %s", kind, order_id)

    def _schedule_removal(self, order_id: str) -> None:
        # Not cancelled by later events for the same order.
        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle | None = None

        def _remove_after_grace() -> None:
            self._removal_timers.discard(handle)
            if not self._closed:
                self.remove_order(order_id)

        handle = loop.call_later(self.grace_seconds, _remove_after_grace)
        self._removal_timers.add(handle)

    @property
    def pending_removals(self) -> int:
        return len(self._removal_timers)

    # --- Teardown ---

    def close(self) -> None:
        """Stop listening for notifications and drop pending removals."""
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for handle in self._removal_timers:
            handle.cancel()
        self._removal_timers.clear()


def _dedupe(orders: list[Order]) -> list[Order]:
    """Collapse repeated ids, keeping the last entry at the first position."""
    latest: dict[str, Order] = {}
    for order in orders:
        latest[order.id] = order
    return list(latest.values())
