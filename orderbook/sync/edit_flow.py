"""Edit flow: confirmed form patch -> Order API -> local cache."""

import logging

from orderbook.forms.edit_controller import EditFormController
from orderbook.ingest.orders_client import OrdersClient, OrdersClientError
from orderbook.sync.order_cache import OrderListCache

logger = logging.getLogger(__name__)


class OrderEditor:
    def __init__(
        self,
        controller: EditFormController,
        client: OrdersClient,
        cache: OrderListCache,
    ):
        self.controller = controller
        self.client = client
        self.cache = cache
        self.last_error: str | None = None

    async def save(self) -> bool:
        """Submit the open draft and persist it.

        1. Validate via the controller (raises EditValidationError)
        2. Send the patch to the API with the form locked
        3. On success, merge into the cache and close the form

        Returns False when nothing was sent or the API call failed; the form
        stays open in that case.
        """
        order = self.controller.order
        patch = self.controller.submit()
        if order is None or patch is None:
            return False

        self.controller.is_loading = True
        self.last_error = None
        try:
            await self.client.update_order(order.id, patch)
        except OrdersClientError as e:
            logger.error("Failed to save order %s: %s", order.id, e)
            self.last_error = str(e)
            return False
        finally:
            self.controller.is_loading = False

        self.cache.update_order(order.id, **patch.as_fields())
        self.controller.close()
        logger.info(
            "Saved order %s: T%d %d x %.3f %s",
            order.id, patch.tier, patch.amount, patch.price_per_unit, patch.order_type,
        )
        return True
