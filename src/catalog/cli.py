"""CLI entry-point for the sensor catalogue and selection engine.

Usage examples
--------------
# List registered locations with sensor counts:
python -m src.catalog locations

# Show one location's sensors (optionally one device type):
python -m src.catalog sensors SanDiego --device-type UPS

# Select and confirm; the payload is printed as JSON:
python -m src.catalog select SanDiego --sensor SD-UPS-0001-BAT --sensor SD-PDU-0001-CUR
python -m src.catalog select SanDiego --all

# Generate a synthetic catalogue:
python -m src.catalog generate NewYork --count 10000 --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from src.catalog.directory import LocationDirectory
from src.catalog.generator import generate_catalogue, write_catalogue
from src.catalog.repository import CatalogRepository
from src.catalog.sources import build_registry
from src.contracts.enums import SessionState
from src.contracts.errors import SensorCatalogError
from src.selection.session import SessionController
from src.selection.submission import StreamSubmitter
from src.shared.config_loader import DEFAULT_CONFIG_PATH, load_settings
from src.shared.logger import setup_logging
from src.shared.seed import make_rng

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sensor-catalog",
        description="Data-center sensor catalogue: list locations, browse and select sensors.",
    )
    p.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to catalog.yaml. Default: {DEFAULT_CONFIG_PATH}",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: WARNING",
    )
    sub = p.add_subparsers(dest="command", required=True)

    loc = sub.add_parser("locations", help="List registered locations.")
    loc.add_argument(
        "--show-unavailable",
        action="store_true",
        default=False,
        help="Also list locations whose catalogue cannot be read.",
    )

    sens = sub.add_parser("sensors", help="List sensors of one location.")
    sens.add_argument("location", help="Location id, e.g. SanDiego")
    sens.add_argument("--device-type", default=None, help="Only this device type.")

    sel = sub.add_parser("select", help="Select sensors and print the confirm payload.")
    sel.add_argument("location", help="Location id, e.g. SanDiego")
    group = sel.add_mutually_exclusive_group(required=True)
    group.add_argument("--all", action="store_true", help="Select every sensor.")
    group.add_argument(
        "--sensor",
        action="append",
        default=None,
        metavar="SENSOR_ID",
        help="Sensor id to select (repeatable).",
    )

    gen = sub.add_parser("generate", help="Write a synthetic catalogue JSON file.")
    gen.add_argument("location", help="Location id (also the file name).")
    gen.add_argument("--count", type=int, default=1000, help="Number of sensors (default: 1000).")
    gen.add_argument("--seed", type=int, default=42, help="Random seed (default: 42).")
    gen.add_argument(
        "--out-dir",
        default=None,
        help="Output directory. Default: data_dir from the config, else data/.",
    )
    return p


def _build_controller(config: str, out) -> SessionController:
    settings = load_settings(config)
    repository = CatalogRepository(
        build_registry(settings), max_entries=settings.max_cached_locations
    )
    return SessionController(
        repository,
        directory=LocationDirectory(repository),
        submitter=StreamSubmitter(out),
    )


def _cmd_locations(args: argparse.Namespace, out) -> int:
    controller = _build_controller(args.config, out)
    locations = controller.list_locations(include_unavailable=args.show_unavailable)
    if not locations:
        print("No locations available.", file=out)
        return 1
    for loc in locations:
        flag = "" if loc.available else "  [unavailable]"
        region = loc.region or "-"
        print(f"{loc.id:<20} {loc.name:<24} {region:<12} {loc.sensor_count:>7}{flag}", file=out)
    return 0


def _cmd_sensors(args: argparse.Namespace, out) -> int:
    controller = _build_controller(args.config, out)
    view = controller.pick_location(args.location).result()
    if view.state is not SessionState.READY:
        print(f"error: {view.error}", file=sys.stderr)
        return 1
    shown = 0
    for s in view.sensors:
        if args.device_type and s.device_type != args.device_type:
            continue
        unit = f" [{s.sensor_unit}]" if s.sensor_unit else ""
        print(f"{s.sensor_id:<28} {s.device_type:<10} {s.device_label:<20} {s.sensor_label}{unit}",
              file=out)
        shown += 1
    print(f"{shown} of {view.total} sensors at {view.location_name}", file=sys.stderr)
    return 0


def _cmd_select(args: argparse.Namespace, out) -> int:
    controller = _build_controller(args.config, out)
    view = controller.pick_location(args.location).result()
    if view.state is not SessionState.READY:
        print(f"error: {view.error}", file=sys.stderr)
        return 1
    if args.all:
        controller.select_all()
    else:
        controller.select_many(args.sensor)
    controller.confirm()
    return 0


def _cmd_generate(args: argparse.Namespace, out) -> int:
    if args.out_dir is not None:
        out_dir = Path(args.out_dir)
    else:
        try:
            out_dir = load_settings(args.config).data_dir
        except FileNotFoundError:
            out_dir = Path("data")
    records = generate_catalogue(args.location, args.count, make_rng(args.seed))
    path = out_dir / f"{args.location}.json"
    write_catalogue(records, path)
    print(f"Wrote {len(records)} sensors -> {path}", file=out)
    return 0


_COMMANDS = {
    "locations": _cmd_locations,
    "sensors": _cmd_sensors,
    "select": _cmd_select,
    "generate": _cmd_generate,
}


def main(argv: list[str] | None = None, out=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    out = out if out is not None else sys.stdout
    try:
        return _COMMANDS[args.command](args, out)
    except (SensorCatalogError, FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        log.debug("Command '%s' failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
