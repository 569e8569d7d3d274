"""Pricing table client: unit price per item and tier."""

import logging

import httpx

from orderbook.models.pricing import PriceTable

logger = logging.getLogger(__name__)


class PricingClientError(Exception):
    """Raised when the pricing table cannot be fetched or parsed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PricingClient:
    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch_price_table(self) -> PriceTable:
        """Fetch the full price table.

        Expected shape: {"<item>": {"<tier>": <price>, ...}, ...}
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(self.url)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("Pricing API error: %s", e)
            raise PricingClientError(str(e), e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error("Pricing API request failed: %s", e)
            raise PricingClientError(f"Request failed: {e}") from e
        except ValueError as e:
            raise PricingClientError(f"Invalid pricing JSON: {e}") from e
        return parse_price_table(data)


def parse_price_table(data: dict) -> PriceTable:
    """Parse the raw table, skipping entries with non-numeric tiers or prices."""
    if not isinstance(data, dict):
        raise PricingClientError("Pricing payload is not an object")
    prices: dict[str, dict[int, float]] = {}
    for item, tiers in data.items():
        if not isinstance(tiers, dict):
            continue
        parsed: dict[int, float] = {}
        for tier, price in tiers.items():
            try:
                parsed[int(tier)] = float(price)
            except (TypeError, ValueError):
                logger.warning("Skipping price for %s tier=%r: %r", item, tier, price)
        if parsed:
            prices[str(item).lower()] = parsed
    return PriceTable(prices=prices)
