"""Price table models for tier price lookup."""

from dataclasses import dataclass, field

from orderbook.models.order import TIER_MAX, TIER_MIN


@dataclass(frozen=True)
class PriceTable:
    """Unit prices keyed by lowercased item name, then tier."""

    prices: dict[str, dict[int, float]] = field(default_factory=dict)

    def price_for(self, item_name: str, tier: int) -> float | None:
        return self.prices.get(item_name.lower(), {}).get(tier)

    def available_tiers(self, item_name: str) -> list[int]:
        """Tiers with a known price, or the full tier range if the item is unlisted."""
        tiers = self.prices.get(item_name.lower())
        if not tiers:
            return list(range(TIER_MIN, TIER_MAX + 1))
        return sorted(tiers)
