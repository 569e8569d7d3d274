"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from orderbook.ingest.orders_client import OrdersClientError
from orderbook.models.order import Order, OrdersPage, OrderStatus, OrderType, UserRef
from orderbook.models.session import Session, SessionStatus

ALICE = UserRef(id="u-alice", display_name="alice#0001", in_game_name="Alice")


def build_order(order_id: str = "o1", **overrides) -> Order:
    fields = {
        "id": order_id,
        "item_name": "iron",
        "tier": 3,
        "price_per_unit": 4.5,
        "amount": 100,
        "order_type": OrderType.SELL,
        "status": OrderStatus.OPEN,
        "created_at": "2026-10-01T12:00:00+00:00",
        "creator": ALICE,
    }
    fields.update(overrides)
    return Order(**fields)


def order_json(order_id: str = "o1", **overrides) -> dict:
    data = {
        "id": order_id,
        "itemName": "iron",
        "tier": 3,
        "pricePerUnit": 4.5,
        "amount": 100,
        "orderType": "SELL",
        "status": "OPEN",
        "createdAt": "2026-10-01T12:00:00Z",
        "creator": {"id": "u-alice", "discordName": "alice#0001", "inGameName": "Alice"},
        "claimer": None,
    }
    data.update(overrides)
    return data


class FakeSession:
    def __init__(self, user_id: str | None = "u-alice", status=SessionStatus.AUTHENTICATED):
        self.session = Session(user_id=user_id) if user_id else None
        self.status = status
        self.update_calls = 0

    async def update(self) -> None:
        self.update_calls += 1


class FakeOrdersClient:
    """Serves queued pages. With gated=True each fetch waits for release()."""

    def __init__(self, pages: dict[int, OrdersPage] | None = None, gated: bool = False):
        self.pages = pages or {}
        self.fetch_calls: list[int] = []
        self.user_calls = 0
        self.updates: list[tuple[str, object]] = []
        self.current_user: UserRef | None = ALICE
        self.fail_fetch = False
        self.fail_update = False
        self._gate = asyncio.Event() if gated else None

    def hold(self) -> None:
        """Make subsequent fetches wait for release()."""
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()

    async def fetch_orders(self, page: int = 1, limit: int = 50) -> OrdersPage:
        self.fetch_calls.append(page)
        if self._gate is not None:
            await self._gate.wait()
        if self.fail_fetch:
            raise OrdersClientError("HTTP 500: boom", 500)
        return self.pages[page]

    async def fetch_current_user(self) -> UserRef | None:
        self.user_calls += 1
        return self.current_user

    async def update_order(self, order_id: str, patch) -> dict:
        self.updates.append((order_id, patch))
        if self.fail_update:
            raise OrdersClientError("HTTP 409: conflict", 409)
        return {"id": order_id}


def page_of(
    orders: list[Order],
    page: int = 1,
    has_more: bool = False,
    total_count: int | None = None,
    current_user: UserRef | None = None,
) -> OrdersPage:
    return OrdersPage(
        orders=orders,
        total_count=total_count if total_count is not None else len(orders),
        has_more=has_more,
        page=page,
        limit=50,
        current_user=current_user,
    )


@pytest.fixture
def make_order() -> Callable[..., Order]:
    return build_order


@pytest.fixture
def make_order_json() -> Callable[..., dict]:
    return order_json


@pytest.fixture
def make_page() -> Callable[..., OrdersPage]:
    return page_of


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeOrdersClient]:
    return FakeOrdersClient


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "api": {"base_url": "https://orders.example.com/api", "page_limit": 25},
        "sync": {"completion_grace_seconds": 0.5},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
