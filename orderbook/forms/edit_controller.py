"""Edit-order form controller with tier-driven price autofill.

The draft moves between three states, tracked by two flags:

    Pristine   (price_manually_edited=False, tier_changed_since_open=False)
    TierDirty  (price_manually_edited=False, tier_changed_since_open=True)
    PriceDirty (price_manually_edited=True)

Autofill only applies in TierDirty. It is evaluated from exactly two
triggers: a tier change and a change in the pricing table. Each applied
(item, tier, price) triple is remembered so the same value is never
written twice.
"""

import logging
from collections.abc import Callable

from orderbook.forms.formatting import parse_decimal, parse_int, total_value
from orderbook.models.edit import EditDraft, EditPatch
from orderbook.models.order import TIER_MAX, TIER_MIN, Order, OrderType
from orderbook.models.pricing import PriceTable

logger = logging.getLogger(__name__)

TIER_MESSAGE = f"Tier must be between {TIER_MIN} and {TIER_MAX}"
PRICE_MESSAGE = "Price must be greater than 0"
AMOUNT_MESSAGE = "Amount must be greater than 0"


class EditValidationError(Exception):
    """Raised on submit when one or more fields are invalid."""

    def __init__(self, messages: list[str]):
        super().__init__("; ".join(messages))
        self.messages = messages


class EditFormController:
    def __init__(self, on_confirm: Callable[[EditPatch], None] | None = None):
        self.on_confirm = on_confirm
        self.order: Order | None = None
        self.draft: EditDraft | None = None
        self.is_loading = False

        self._prices: PriceTable | None = None
        self.pricing_loading = False
        self.pricing_error: str | None = None

    @property
    def is_open(self) -> bool:
        return self.order is not None

    # --- Lifecycle ---

    def open(self, order: Order) -> EditDraft:
        """Start a fresh Pristine draft for order, discarding any previous one."""
        self.order = order
        self.draft = EditDraft.from_order(order)
        logger.debug("Editing order %s (%s T%d)", order.id, order.item_name, order.tier)
        return self.draft

    def close(self) -> None:
        self.order = None
        self.draft = None

    # --- Field input ---

    def set_tier(self, tier: int) -> None:
        draft = self._require_draft()
        draft.tier = int(tier)
        draft.tier_changed_since_open = True
        draft.price_manually_edited = False
        draft.last_applied_autofill_key = ""
        self._autofill()

    def set_price(self, text: str) -> None:
        draft = self._require_draft()
        draft.price_per_unit = parse_decimal(text, 0.0)
        draft.price_manually_edited = True

    def set_amount(self, text: str) -> None:
        self._require_draft().amount = parse_int(text, 1)

    def set_order_type(self, order_type: str | OrderType) -> None:
        self._require_draft().order_type = OrderType(order_type)

    def set_pricing(
        self,
        table: PriceTable | None,
        loading: bool = False,
        error: str | None = None,
    ) -> None:
        """Receive the current pricing table state."""
        self._prices = table
        self.pricing_loading = loading
        self.pricing_error = error
        if self.draft is not None:
            self._autofill()

    # --- Pricing-derived values ---

    @property
    def oracle_price(self) -> float | None:
        if self._prices is None or self.order is None or self.draft is None:
            return None
        return self._prices.price_for(self.order.item_name, self.draft.tier)

    @property
    def available_tiers(self) -> list[int]:
        if self.order is None:
            return []
        table = self._prices or PriceTable()
        return table.available_tiers(self.order.item_name)

    @property
    def pricing_warning(self) -> str | None:
        if not self.pricing_error:
            return None
        return f"Warning: {self.pricing_error}. Price may not be current."

    @property
    def total_value(self) -> int:
        if self.draft is None:
            return 0
        return total_value(self.draft.amount, self.draft.price_per_unit)

    def _autofill(self) -> None:
        draft = self.draft
        if draft is None or self.order is None:
            return
        price = self.oracle_price
        key = f"{self.order.item_name}-{draft.tier}-{price}"
        if key == draft.last_applied_autofill_key:
            return
        if not draft.price_manually_edited and draft.tier_changed_since_open and price is not None:
            draft.price_per_unit = price
            draft.last_applied_autofill_key = key
            logger.debug("Autofilled %s T%d price %s", self.order.item_name, draft.tier, price)

    # --- Submission ---

    def validate(self) -> list[str]:
        draft = self._require_draft()
        messages = []
        if draft.tier < TIER_MIN or draft.tier > TIER_MAX:
            messages.append(TIER_MESSAGE)
        if draft.price_per_unit <= 0:
            messages.append(PRICE_MESSAGE)
        if draft.amount <= 0:
            messages.append(AMOUNT_MESSAGE)
        return messages

    def submit(self) -> EditPatch | None:
        """Validate and hand the patch to on_confirm.

        Returns None while a save is in progress, while pricing data is still
        loading, or when no order is open.
        """
        if self.draft is None or self.is_loading or self.pricing_loading:
            return None
        messages = self.validate()
        if messages:
            raise EditValidationError(messages)
        patch = EditPatch(
            tier=self.draft.tier,
            price_per_unit=self.draft.price_per_unit,
            amount=self.draft.amount,
            order_type=self.draft.order_type,
        )
        if self.on_confirm is not None:
            self.on_confirm(patch)
        return patch

    def _require_draft(self) -> EditDraft:
        if self.draft is None:
            raise RuntimeError("No order is open for editing")
        return self.draft
