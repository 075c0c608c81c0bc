"""parkmigrate - command line front end for the park importer.

Usage:
    parkmigrate inspect <park.sv6|park.sc6>
    parkmigrate import <park> [--config import.json] [--skip-checksum]
    parkmigrate minimap <park> <output.png> [--scale N]

Output formats (append to any command):
    --format table    (default, human-readable)
    --format json     (machine-readable)
"""

import sys
import json
import argparse
import logging
from pathlib import Path

from . import __version__
from .config import ImportConfig
from .errors import ParkImportError
from .formats.s6.layout import ParkType
from .importer.loader import load_park_file
from .importer.objects import ObjectRepository
from .importer.s6_importer import S6Importer
from .world.state import WorldState

logger = logging.getLogger(__name__)


class PermissiveObjectRepository(ObjectRepository):
    """Accepts every object; the CLI has no object definitions to check against."""

    def __init__(self):
        self.packed = []

    def export_packed_object(self, entry, data):
        self.packed.append(entry)

    def load_objects(self, entries):
        pass


def build_config(args) -> ImportConfig:
    config = ImportConfig.load(args.config) if args.config else ImportConfig()
    if args.skip_checksum:
        config.allow_loading_with_incorrect_checksum = True
    config.skip_object_check = True
    return config


def emit(args, data: dict, table_lines):
    if args.format == "json":
        print(json.dumps(data, indent=2, default=str))
    else:
        print("\n".join(table_lines))


def cmd_inspect(args):
    """Show header, scenario info and the required object list."""
    repository = PermissiveObjectRepository()
    importer = S6Importer(repository, build_config(args))
    try:
        result = importer.load(args.file)
    except (ParkImportError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    info = result.scenario_info
    data = {
        "file": str(args.file),
        "type": ParkType(result.header.type).name.lower(),
        "version": result.header.version,
        "classic_flag": result.header.classic_flag,
        "packed_objects": [str(e) for e in repository.packed],
        "required_objects": result.required_identifiers,
    }
    if info is not None:
        data["scenario"] = {
            "name": info.name.decode("latin-1"),
            "category": info.category,
            "objective_type": info.objective_type,
        }

    lines = [
        f"Park: {args.file}",
        f"Type: {data['type']}  |  Version: {data['version']}  |  "
        f"Packed objects: {len(data['packed_objects'])}",
    ]
    if info is not None:
        lines.append(f"Scenario: {data['scenario']['name']}")
    lines.append("")
    lines.append(f"REQUIRED OBJECTS ({len(data['required_objects'])})")
    lines.append("-" * 50)
    lines.extend(f"  {name}" for name in data["required_objects"])
    emit(args, data, lines)


def load_world(args):
    world = WorldState()
    outcome = load_park_file(args.file, world, PermissiveObjectRepository(), build_config(args))
    if not outcome.success:
        print(f"ERROR: {outcome.error}: {outcome.message}", file=sys.stderr)
        sys.exit(1)
    return world, outcome


def cmd_import(args):
    """Import the park and print a summary of the migrated world."""
    world, outcome = load_world(args)
    report = outcome.report
    rides = list(world.iter_rides())
    data = {
        "file": str(args.file),
        "scenario": world.scenario.name,
        "filename": world.scenario.filename,
        "map_size": world.map_size,
        "cash": world.finance.cash,
        "loan": world.finance.loan,
        "park_rating": world.park.rating,
        "guests_in_park": world.park.guests_in_park,
        "rides": len(rides),
        "peep_spawns": [vars(s) for s in world.park.peep_spawns],
        "land_rights_for_sale": world.park.land_rights_for_sale,
        "repair": vars(report) if report else {},
    }
    lines = [
        f"Park: {data['scenario']}  ({data['filename']})",
        f"Map: {world.map_size}x{world.map_size}  |  Cash: {world.finance.cash:,}  |  "
        f"Loan: {world.finance.loan:,}",
        f"Rating: {world.park.rating}  |  Guests: {world.park.guests_in_park}  |  Rides: {len(rides)}",
        "",
        "RIDES",
        "-" * 50,
    ]
    lines.extend(
        f"  [{ride.id:>3}] type {ride.type:>3}  riders {ride.num_riders:>4}  "
        f"excitement {ride.excitement:>5}"
        for ride in rides
    )
    if report is not None:
        lines.append("")
        lines.append(f"Repair: {report.sprite_list_links_cut} list links cut, "
                     f"{report.quadrant_links_cut} spatial links cut, "
                     f"{report.disjoint_sprites} disjoint sprites")
    emit(args, data, lines)


def cmd_minimap(args):
    """Import the park and write a PNG minimap."""
    from .tools.minimap import export_minimap

    world, _ = load_world(args)
    result = export_minimap(world, args.output, scale=args.scale)
    if not result.success:
        print(f"ERROR: {result.message}", file=sys.stderr)
        sys.exit(1)
    emit(args, result.data, [result.message] + [f"  {k}: {v}" for k, v in result.data.items()])


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="parkmigrate",
        description="Load legacy .sc6 / .sv6 parks and report what was migrated.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--format", choices=["table", "json"],
                        default="table", help="Output format (default: table)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", type=Path, help="Path to a .sc6 or .sv6 file")
    common.add_argument("--config", help="Import config JSON file")
    common.add_argument("--skip-checksum", action="store_true",
                        help="Load scenarios whose checksum does not match")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    sub.add_parser("inspect", parents=[common], help="Show header and required objects")
    sub.add_parser("import", parents=[common], help="Import and summarise the park")

    p = sub.add_parser("minimap", parents=[common], help="Render ownership minimap to PNG")
    p.add_argument("output", help="Output PNG path")
    p.add_argument("--scale", type=int, default=2, help="Pixels per tile (default: 2)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    commands = {
        "inspect": cmd_inspect,
        "import": cmd_import,
        "minimap": cmd_minimap,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        cmd_func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
