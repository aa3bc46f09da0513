import argparse
import json
import logging
import sys
from pathlib import Path

from dubaievents import __version__
import dubaievents.config as cfg_module
from dubaievents.api import DataAPIClient, DataAPIError
from dubaievents.cards import card_to_dict
from dubaievents.dates import DATE_PRESETS, build_date_options, build_venue_date_index, count_events_by_date, date_range_keys
from dubaievents.filters import build_filter_state
from dubaievents.models import FilterState, Record
from dubaievents.normalize import format_time, normalize_records
from dubaievents.pipeline import VIEWS, cards_from_records, map_markers


def _client(cfg: dict) -> DataAPIClient:
    api_cfg = cfg_module.get_api(cfg)
    return DataAPIClient(api_cfg["base_url"], timeout=api_cfg["timeout"], api_key=cfg_module.get_api_key(cfg))


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_records(args, cfg) -> list[Record]:
    if args.input:
        try:
            raw = json.loads(Path(args.input).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _fail(f"could not read records from '{args.input}' ({exc}).")
        raw = raw.get("data", []) if isinstance(raw, dict) else raw
        if not isinstance(raw, list):
            _fail(f"'{args.input}' does not hold a JSON list of records.")
    else:
        try:
            raw = _client(cfg).fetch_venues()
        except DataAPIError as exc:
            _fail(f"could not fetch venues: {exc}")
    return normalize_records(raw)


def _parse_category(value: str) -> tuple[str, str | None]:
    primary, _, secondary = value.partition(":")
    return primary.strip(), secondary.strip() or None


def _filter_state(args, cfg) -> FilterState:
    dates = list(args.date or [])
    if args.preset:
        dates.extend(date_range_keys(args.preset))
    return build_filter_state(
        categories=[_parse_category(c) for c in args.category or []],
        venue=args.venue_type or [],
        energy=args.energy or [],
        timing=args.timing or [],
        status=args.status or [],
        areas=args.area or [cfg_module.get_filters(cfg)["default_area"]],
        dates=dates,
        search=args.search or "",
    )


def _cards(args, cfg):
    records = _load_records(args, cfg)
    cards = cards_from_records(records, _filter_state(args, cfg), view=args.view)

    if args.json:
        print(json.dumps([card_to_dict(c) for c in cards], ensure_ascii=False, indent=2))
        return

    if not cards:
        print("No events match the selected filters.")
        return
    for card in cards:
        when = f"{card.date_pill.day} {card.date_pill.date}".strip() or "TBA"
        start = format_time(card.event.time_start) or card.event.time_start
        print(f"{when:<11} {start:<9} {card.event.title} @ {card.venue.name or 'Venue'}"
              f"  [{card.category}]  {card.entry_price}")
        if card.smart_subtitle:
            print(f"{'':<21} {card.smart_subtitle}")
    print(f"{len(cards)} events.")


def _dates(args, cfg):
    records = _load_records(args, cfg)

    if args.venue:
        options = build_venue_date_index(records).get(args.venue)
        if not options:
            print(f"No dated events for venue '{args.venue}'.")
            return
    else:
        if args.input:
            date_strings = [r.event.date_raw for r in records]
        else:
            try:
                date_strings = _client(cfg).fetch_filter_options()["dates"]
            except DataAPIError as exc:
                _fail(f"could not fetch filter options: {exc}")
        options = build_date_options(
            date_strings,
            lookback_days=cfg_module.get_filters(cfg)["date_lookback_days"],
            counts=count_events_by_date(records),
        )

    for opt in options:
        count = f"{opt.event_count} events" if opt.event_count else ""
        print(f"{opt.date_key}  {opt.label:<8} {opt.day} {opt.date:<7} {count}")


def _venues(args, cfg):
    records = _load_records(args, cfg)
    markers = map_markers(records, _filter_state(args, cfg))
    for marker in markers:
        flag = "*" if marker.matches else " "
        lat, lng = marker.venue.coordinates
        print(f"{flag} {marker.color}  {marker.venue.name:<30} {marker.venue.area:<18} {lat:.4f},{lng:.4f}")
    print(f"{sum(m.matches for m in markers)} of {len(markers)} venues match.")


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input", metavar="FILE",
        help="Read raw records from a JSON file instead of the data API",
    )


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--category", action="append", metavar="PRIMARY[:SECONDARY]",
        help="Category filter, e.g. 'Nightlife' or 'Nightlife:Rooftop Venue' (repeatable)",
    )
    parser.add_argument("--venue-type", action="append", metavar="TAG", help="Venue attribute (repeatable)")
    parser.add_argument("--energy", action="append", metavar="TAG", help="Energy attribute (repeatable)")
    parser.add_argument("--timing", action="append", metavar="TAG", help="Timing attribute (repeatable)")
    parser.add_argument("--status", action="append", metavar="TAG", help="Status attribute (repeatable)")
    parser.add_argument("--area", action="append", metavar="AREA", help="Area, e.g. 'JBR' (repeatable)")
    parser.add_argument("--date", action="append", metavar="DATE", help="Event date (repeatable)")
    parser.add_argument("--preset", choices=DATE_PRESETS, help="Date range preset")
    parser.add_argument("--search", metavar="TEXT", help="Match event, venue or category names")


def main():
    parser = argparse.ArgumentParser(
        prog="dxb",
        description="Dubai events and venue finder",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", default="config.toml", metavar="PATH",
        help="Path to config.toml (default: config.toml)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # cards
    sp_cards = subparsers.add_parser("cards", help="List event cards matching the filters")
    _add_source_args(sp_cards)
    _add_filter_args(sp_cards)
    sp_cards.add_argument("--view", choices=VIEWS, default="list", help="Card view (default: list)")
    sp_cards.add_argument("--json", action="store_true", help="Print cards as JSON")

    # dates
    sp_dates = subparsers.add_parser("dates", help="List available event dates")
    _add_source_args(sp_dates)
    sp_dates.add_argument("--venue", metavar="ID", help="Only this venue's dates")

    # venues
    sp_venues = subparsers.add_parser("venues", help="List map venues with marker colours")
    _add_source_args(sp_venues)
    _add_filter_args(sp_venues)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    cfg = cfg_module.load(Path(args.config))

    if args.command == "cards":
        _cards(args, cfg)
    elif args.command == "dates":
        _dates(args, cfg)
    elif args.command == "venues":
        _venues(args, cfg)


if __name__ == "__main__":
    main()
