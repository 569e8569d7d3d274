"""Order API client: paginated order list, current user, and order edits."""

import logging
import os

import httpx

from orderbook.models.edit import EditPatch
from orderbook.models.order import Order, OrdersPage, OrderStatus, OrderType, UserRef

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000/api"


class OrdersClientError(Exception):
    """Raised when the Order API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class OrdersClient:
    """Async wrapper around the order REST endpoints.

    Calls are best-effort: any transport error or non-2xx status raises
    OrdersClientError. Retrying is left to the caller.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token or os.environ.get("ORDERBOOK_API_TOKEN", "")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        data: dict | None = None,
    ) -> dict:
        url = f"{self.base_url}{endpoint}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.request(
                    method, url, params=params, json=data, headers=self._headers()
                )
        except httpx.RequestError as e:
            logger.error("Order API request failed: %s %s -> %s", method, endpoint, e)
            raise OrdersClientError(f"Request failed: {e}") from e

        if resp.status_code >= 400:
            body = resp.text
            logger.error(
                "Order API %d: %s %s -> %s", resp.status_code, method, endpoint, body
            )
            raise OrdersClientError(f"HTTP {resp.status_code}: {body}", resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise OrdersClientError(f"Invalid JSON from {endpoint}: {e}") from e

    async def fetch_orders(self, page: int = 1, limit: int = 50) -> OrdersPage:
        """Fetch one page of orders with embedded current-user data."""
        params = {"page": str(page), "limit": str(limit), "includeUserData": "true"}
        data = await self._request("GET", "/orders", params=params)
        return parse_orders_page(data)

    async def fetch_current_user(self) -> UserRef | None:
        """Fetch the signed-in user. Returns None if the payload has no id."""
        data = await self._request("GET", "/user")
        return parse_user_ref(data)

    async def update_order(self, order_id: str, patch: EditPatch) -> dict:
        """Persist an edit. Returns the raw server response."""
        return await self._request("PATCH", f"/orders/{order_id}", data=patch.to_json())


def parse_user_ref(raw: dict | None) -> UserRef | None:
    """Parse a user snapshot. Accepts discordName, displayName or name."""
    if not raw or not raw.get("id"):
        return None
    name = raw.get("discordName") or raw.get("displayName") or raw.get("name") or "Unknown"
    return UserRef(
        id=str(raw["id"]),
        display_name=name,
        in_game_name=raw.get("inGameName"),
    )


def parse_order(raw: dict) -> Order:
    """Parse an order from its API representation."""
    creator = parse_user_ref(raw.get("creator"))
    if creator is None:
        raise ValueError(f"Order {raw.get('id')!r} has no creator")
    return Order(
        id=str(raw["id"]),
        item_name=raw["itemName"],
        tier=int(raw["tier"]),
        price_per_unit=float(raw["pricePerUnit"]),
        amount=int(raw["amount"]),
        order_type=OrderType(raw["orderType"]),
        status=OrderStatus(raw["status"]),
        created_at=raw.get("createdAt", ""),
        fulfilled_at=raw.get("fulfilledAt"),
        creator=creator,
        claimer=parse_user_ref(raw.get("claimer")),
    )


def parse_orders_page(data: dict) -> OrdersPage:
    try:
        orders = [parse_order(o) for o in data.get("orders", [])]
    except (KeyError, ValueError, TypeError) as e:
        raise OrdersClientError(f"Malformed order payload: {e}") from e
    return OrdersPage(
        orders=orders,
        total_count=int(data.get("totalCount", len(orders))),
        has_more=bool(data.get("hasMore", False)),
        page=int(data.get("page", 1)),
        limit=int(data.get("limit", len(orders))),
        current_user=parse_user_ref(data.get("currentUser")),
    )
