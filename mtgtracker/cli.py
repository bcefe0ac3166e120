"""Command-line front end for the collection tracker.

Usage:
    mtgtracker sets --filter dominaria
    mtgtracker browse dmu
    mtgtracker search "lightning bolt"
    mtgtracker add dmu 107 --foil
    mtgtracker list --color R --rarity rare --sort price-desc
    mtgtracker quantity 12 4
    mtgtracker remove 12
"""

import argparse
import asyncio
import logging
from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path

from mtgtracker.config import settings
from mtgtracker.models.catalog import CatalogPrintRecord
from mtgtracker.models.collection import CollectionItem
from mtgtracker.models.errors import CatalogError, CatalogFailure
from mtgtracker.models.query import FilterSpec, GroupMode, SortMode
from mtgtracker.services.catalog_client import CatalogClient
from mtgtracker.services.collection_query import query_collection
from mtgtracker.services.collection_store import CollectionStore
from mtgtracker.services.normalizer import normalize_print, select_price
from mtgtracker.services.pagination import fetch_set_prints, search_prints
from mtgtracker.services.persistence import JsonCollectionFile
from mtgtracker.services.set_catalog import filter_sets, partition_sets

logger = logging.getLogger(__name__)


def _format_price(price: Decimal | None) -> str:
    if price is None:
        return "-"
    return f"{price:.2f} {settings.price_currency.upper()}"


def _format_item(item: CollectionItem) -> str:
    foil = " *F*" if item.foil else ""
    colors = "".join(item.colors) or "C"
    return (
        f"{item.local_id:>5}  {item.quantity}x {item.name} "
        f"({item.set_code.upper()} #{item.collector_number}){foil}  "
        f"[{colors}]  {_format_price(item.price)}"
    )


def _format_print(record: CatalogPrintRecord, store: CollectionStore) -> str:
    owned = store.quantity_of(record.id, False)
    owned_foil = store.quantity_of(record.id, True)
    badge = f"  (owned {owned} / foil {owned_foil})" if owned or owned_foil else ""
    return (
        f"{record.collector_number:>6}  {record.name}  "
        f"{_format_price(select_price(record, False, settings.price_currency))}{badge}"
    )


async def _cmd_sets(args: argparse.Namespace, client: CatalogClient) -> int:
    sets = filter_sets(await client.list_sets(), args.filter or "")
    listing = partition_sets(sets)

    sections = [
        ("Released", listing.released_regular),
        ("Released (other)", listing.released_other),
        ("Upcoming", listing.upcoming_regular),
        ("Upcoming (other)", listing.upcoming_other),
    ]
    for title, section in sections:
        if not section:
            continue
        print(f"{title}:")
        for catalog_set in section:
            released = catalog_set.released_at.isoformat() if catalog_set.released_at else "?"
            print(f"  {catalog_set.code.upper():<6} {catalog_set.name}  ({released})")
    return 0


async def _cmd_browse(
    args: argparse.Namespace, client: CatalogClient, store: CollectionStore
) -> int:
    records = await fetch_set_prints(
        client,
        args.set_code,
        on_page=lambda prints: logger.info("Loaded %d cards...", len(prints)),
    )
    for record in records:
        print(_format_print(record, store))
    print(f"{len(records)} cards loaded")
    return 0


async def _cmd_search(
    args: argparse.Namespace, client: CatalogClient, store: CollectionStore
) -> int:
    records = await search_prints(client, args.text)
    for record in records:
        print(f"{record.set_code.upper():<6}{_format_print(record, store)}")
    if not records:
        print("No cards found.")
    return 0


async def _cmd_add(
    args: argparse.Namespace, client: CatalogClient, store: CollectionStore
) -> int:
    query = f'e:{args.set_code.lower()} cn:"{args.collector_number}"'
    records = await search_prints(client, query, paper_only=False)
    record = next((r for r in records if r.collector_number == args.collector_number), None)
    if record is None:
        print(f"No print {args.set_code.upper()} #{args.collector_number} found.")
        return 1

    for _ in range(max(args.copies, 1)):
        store.add(normalize_print(record, foil=args.foil, ids=store.ids))

    print(f"Now own {store.quantity_of(record.id, args.foil)}x {record.name}")
    return 0


def _cmd_list(args: argparse.Namespace, store: CollectionStore) -> int:
    filters = FilterSpec(
        name_contains=args.name or "",
        set_contains=args.set or "",
        type_contains=args.type or "",
        oracle_contains=args.text or "",
        colors=frozenset(c.upper() for c in args.color or []),
        rarities=frozenset(r.lower() for r in args.rarity or []),
    )
    group = GroupMode.FLAT if args.flat else GroupMode.BY_SET
    view = query_collection(store.items, filters, SortMode(args.sort), group, args.hide or [])

    print(f"Showing {view.filtered_count} of {view.total_count} cards")
    if view.total_value > 0:
        print(f"Total value: {_format_price(view.total_value)}")

    if group is GroupMode.FLAT:
        for item in view.items:
            print(_format_item(item))
        return 0

    for set_group in view.groups:
        released = f" ({set_group.released_at.isoformat()})" if set_group.released_at else ""
        print(f"\n{set_group.set_name}{released}")
        for item in set_group.items:
            print(_format_item(item))
    for set_group in view.hidden_groups:
        print(f"\n{set_group.set_name} [hidden, {len(set_group.items)} cards]")
    return 0


def _cmd_remove(args: argparse.Namespace, store: CollectionStore) -> int:
    item = store.get(args.local_id)
    store.remove(args.local_id)
    print(f"Removed {item.name}" if item else f"No item with id {args.local_id}")
    return 0


def _cmd_quantity(args: argparse.Namespace, store: CollectionStore) -> int:
    store.set_quantity(args.local_id, args.quantity)
    item = store.get(args.local_id)
    print(f"{item.name}: {item.quantity}x" if item else f"No item with id {args.local_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mtgtracker", description="Track an MTG collection")
    parser.add_argument(
        "--collection",
        type=Path,
        default=settings.collection_path,
        help=f"Collection file (default: {settings.collection_path})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sets = sub.add_parser("sets", help="List sets, newest first")
    sets.add_argument("--filter", help="Only sets whose code or name contains this")

    browse = sub.add_parser("browse", help="List every card of a set")
    browse.add_argument("set_code")

    search = sub.add_parser("search", help="Search cards by name or Scryfall syntax")
    search.add_argument("text")

    add = sub.add_parser("add", help="Add a print to the collection")
    add.add_argument("set_code")
    add.add_argument("collector_number")
    add.add_argument("--foil", action="store_true", help="Add the foil version")
    add.add_argument("--copies", type=int, default=1, help="Copies to add (default: 1)")

    listing = sub.add_parser("list", help="Show the collection")
    listing.add_argument("--name", help="Name contains")
    listing.add_argument("--set", help="Set code or name contains")
    listing.add_argument("--type", help="Type line contains")
    listing.add_argument("--text", help="Rules text contains")
    listing.add_argument("--color", action="append", help="W, U, B, R, G or C (repeatable)")
    listing.add_argument("--rarity", action="append", help="Rarity (repeatable)")
    listing.add_argument(
        "--sort", default=SortMode.DEFAULT.value, choices=[m.value for m in SortMode]
    )
    listing.add_argument("--flat", action="store_true", help="Do not group by set")
    listing.add_argument("--hide", action="append", help="Collapse a set by name (repeatable)")

    remove = sub.add_parser("remove", help="Remove an item")
    remove.add_argument("local_id", type=int)

    quantity = sub.add_parser("quantity", help="Set an item's quantity")
    quantity.add_argument("local_id", type=int)
    quantity.add_argument("quantity", type=int)

    return parser


async def run(args: argparse.Namespace) -> int:
    """Dispatch a parsed command."""
    store = CollectionStore.load(JsonCollectionFile(args.collection))

    if args.command == "list":
        return _cmd_list(args, store)
    if args.command == "remove":
        return _cmd_remove(args, store)
    if args.command == "quantity":
        return _cmd_quantity(args, store)

    async with CatalogClient() as client:
        if args.command == "sets":
            return await _cmd_sets(args, client)
        if args.command == "browse":
            return await _cmd_browse(args, client, store)
        if args.command == "search":
            return await _cmd_search(args, client, store)
        return await _cmd_add(args, client, store)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        return asyncio.run(run(args))
    except CatalogError as e:
        if e.status == 404:
            print(f"Nothing found: {e.message}")
        else:
            print(f"Scryfall error: {e.message}")
        logger.debug("Catalog error", exc_info=True)
        return 1
    except CatalogFailure as e:
        logger.error("Catalog request failed: %s", e)
        print("Could not reach Scryfall. Try again later.")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
