"""CLI entry point for the order book client."""

import argparse
import asyncio
import logging

from orderbook.config.loader import get_config_value, load_config
from orderbook.config.schema import ClientConfig
from orderbook.forms.edit_controller import EditFormController, EditValidationError
from orderbook.forms.formatting import display_item_name, format_price
from orderbook.ingest.orders_client import OrdersClient
from orderbook.ingest.pricing_client import PricingClient, PricingClientError
from orderbook.models.order import Order
from orderbook.sync.channel import NotificationChannel
from orderbook.sync.edit_flow import OrderEditor
from orderbook.sync.order_cache import OrderListCache
from orderbook.sync.session import StaticSession

DEFAULT_CONFIG = "orderbook.yaml"
MAX_SEARCH_PAGES = 20


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="orderbook",
        description="Peer-to-peer order book client",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--user", default=None, help="User id (default: $ORDERBOOK_USER_ID)")

    sub = parser.add_subparsers(dest="command")

    # list
    list_p = sub.add_parser("list", help="List open orders")
    list_p.add_argument("--pages", type=int, default=1, help="Pages to fetch")

    # edit
    edit_p = sub.add_parser("edit", help="Edit one of your orders")
    edit_p.add_argument("order_id")
    edit_p.add_argument("--tier", type=int)
    edit_p.add_argument("--price")
    edit_p.add_argument("--amount")
    edit_p.add_argument("--type", dest="order_type", choices=["BUY", "SELL"])

    # config show | get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Get a config value")
    get_p.add_argument("key", help="Dotted key (e.g. api.page_limit)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "list":
        return asyncio.run(_cmd_list(config, args))
    elif args.command == "edit":
        return asyncio.run(_cmd_edit(config, args))
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _build_cache(config: ClientConfig, args) -> OrderListCache:
    client = OrdersClient(
        base_url=config.api.base_url,
        api_token=config.api.api_token or None,
        timeout=config.api.timeout,
    )
    return OrderListCache(
        client,
        StaticSession(user_id=args.user),
        NotificationChannel(),
        api_config=config.api,
        sync_config=config.sync,
    )


def _format_order(o: Order) -> str:
    claimer = f" claimed by {o.claimer.display_name}" if o.claimer else ""
    return (
        f"  {o.id} {o.order_type} {display_item_name(o.item_name)} T{o.tier} "
        f"{o.amount} @ {format_price(o.price_per_unit)} [{o.status}] "
        f"by {o.creator.display_name}{claimer}"
    )


async def _cmd_list(config: ClientConfig, args) -> int:
    cache = _build_cache(config, args)
    if cache.session.session is None:
        print("Error: no user id (use --user or set ORDERBOOK_USER_ID)")
        return 1
    try:
        await cache.sync_session()
        for _ in range(args.pages - 1):
            if cache.last_error or not cache.has_more:
                break
            await cache.load_more()
    finally:
        cache.close()

    if cache.last_error:
        print(f"Error: failed to load orders: {cache.last_error}")
        return 1
    print(f"Orders: {len(cache.orders)} of {cache.total_count}")
    for o in cache.orders:
        print(_format_order(o))
    return 0


async def _cmd_edit(config: ClientConfig, args) -> int:
    cache = _build_cache(config, args)
    if cache.session.session is None:
        print("Error: no user id (use --user or set ORDERBOOK_USER_ID)")
        return 1
    try:
        return await _edit_order(config, cache, args)
    finally:
        cache.close()


async def _edit_order(config: ClientConfig, cache: OrderListCache, args) -> int:
    await cache.sync_session()
    order = cache.get(args.order_id)
    pages = 1
    while order is None and cache.has_more and pages < MAX_SEARCH_PAGES:
        if cache.last_error:
            break
        await cache.load_more()
        order = cache.get(args.order_id)
        pages += 1
    if order is None and cache.last_error:
        print(f"Error: failed to load orders: {cache.last_error}")
        return 1
    if order is None:
        print(f"Error: order {args.order_id} not found")
        return 1

    controller = EditFormController()
    controller.open(order)

    pricing = PricingClient(config.pricing.url, timeout=config.pricing.timeout)
    try:
        controller.set_pricing(await pricing.fetch_price_table())
    except PricingClientError as e:
        controller.set_pricing(None, error=str(e))
        print(controller.pricing_warning)

    if args.tier is not None:
        controller.set_tier(args.tier)
    if args.price is not None:
        controller.set_price(args.price)
    if args.amount is not None:
        controller.set_amount(args.amount)
    if args.order_type is not None:
        controller.set_order_type(args.order_type)

    draft = controller.draft
    print(
        f"{display_item_name(order.item_name)} T{draft.tier}: {draft.amount} x "
        f"{format_price(draft.price_per_unit)} = {format_price(controller.total_value)}"
    )

    editor = OrderEditor(controller, cache.client, cache)
    try:
        saved = await editor.save()
    except EditValidationError as e:
        for message in e.messages:
            print(f"Error: {message}")
        return 1

    if not saved:
        print(f"Error: save failed: {editor.last_error}")
        return 1
    print(_format_order(cache.get(order.id)))
    return 0


def _cmd_config(config: ClientConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2, exclude={"api": {"api_token"}}))
        return 0
    elif args.config_command == "get":
        if args.key == "api.api_token":
            print("Error: api.api_token is not displayed")
            return 1
        try:
            value = get_config_value(config, args.key)
        except KeyError:
            print(f"Error: unknown config key: {args.key}")
            return 1
        print(f"{args.key} = {value}")
        return 0
    print("Use: config show | config get <key>")
    return 1
