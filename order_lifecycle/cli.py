"""CLI entry point for the order lifecycle service."""

import argparse
import json
import logging

from order_lifecycle.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from order_lifecycle.errors import OrderServiceError
from order_lifecycle.models.order import CallerContext, OrderDraft, OrderStatus
from order_lifecycle.service.factory import build_service, open_store
from order_lifecycle.storage.sqlite_store import SqliteDocumentStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="order_lifecycle",
        description="Marketplace order lifecycle service",
    )
    parser.add_argument("--config", default=None, help="Config YAML path")
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("--as", dest="caller", default=None, help="Caller identity id")
    parser.add_argument(
        "--admin", action="store_true", help="Caller holds the admin claim"
    )

    sub = parser.add_subparsers(dest="command")

    # create
    create_p = sub.add_parser("create", help="Create an order")
    create_p.add_argument("--buyer", required=True)
    create_p.add_argument("--seller", required=True)
    create_p.add_argument("--listing", required=True)
    create_p.add_argument("--category", required=True)
    create_p.add_argument("--price", type=float, required=True)
    create_p.add_argument("--quantity", type=float, required=True)
    create_p.add_argument("--total-price", type=float, default=None)
    create_p.add_argument("--currency", default=None)
    create_p.add_argument("--listing-name", default=None)

    # get / list / history
    get_p = sub.add_parser("get", help="Show one order")
    get_p.add_argument("order_id")
    list_p = sub.add_parser("list", help="List the caller's orders")
    list_p.add_argument("--role", choices=["buyer", "seller"], default=None)
    list_p.add_argument("--limit", type=int, default=None)
    history_p = sub.add_parser("history", help="Show status transitions of an order")
    history_p.add_argument("order_id")

    # set-status
    status_p = sub.add_parser("set-status", help="Move an order to a new status")
    status_p.add_argument("order_id")
    status_p.add_argument("status", help=", ".join(s.value for s in OrderStatus))

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Change a value in the --config file")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(args.config)
    logging.basicConfig(level=config.logging.level.value, format=config.logging.format)

    if args.command == "config":
        return _cmd_config(config, args)
    return _cmd_orders(config, args)


def _cmd_orders(config, args) -> int:
    caller = CallerContext(uid=args.caller, is_admin=args.admin) if args.caller else None
    store = open_store(config, args.db)
    service = build_service(config, store)
    try:
        if args.command == "create":
            draft = OrderDraft(
                buyer_id=args.buyer,
                seller_id=args.seller,
                listing_id=args.listing,
                category=args.category,
                price=args.price,
                quantity=args.quantity,
                total_price=args.total_price,
                currency=args.currency,
                listing_name=args.listing_name,
            )
            result = service.create_order(caller, draft).to_dict()
        elif args.command == "get":
            result = service.get_order(caller, args.order_id).to_dict()
        elif args.command == "list":
            orders = service.list_my_orders(caller, role=args.role, limit=args.limit)
            result = [o.to_dict() for o in orders]
        elif args.command == "history":
            records = service.get_order_history(caller, args.order_id)
            result = [r.to_dict() for r in records]
        else:
            order = service.update_order_status(caller, args.order_id, args.status)
            result = order.to_dict()
    except OrderServiceError as e:
        print(f"Error ({e.code}): {e.message}")
        return 1
    finally:
        if isinstance(store, SqliteDocumentStore):
            store.close()

    print(json.dumps(result, indent=2))
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        if args.config is None:
            print("Error: config set needs --config PATH to write to")
            return 1
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = (part.strip() for part in kv.split("=", 1))
        try:
            new_config = set_config_value(config, key, value)
        except (KeyError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key} = {get_config_value(new_config, key)} in {args.config}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1
