# DesignAwareness/cli.py

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from DesignAwareness.config import Settings
from DesignAwareness.errors import DocumentError
from DesignAwareness.ids import classify, generate_id, parse_well_known
from DesignAwareness.periods import Weekday, period_config, period_range
from DesignAwareness.pipeline import encode, validate_document
from DesignAwareness.utils import format_timestamp, parse_timestamp

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-25s | %(message)s"
log = logging.getLogger("DesignAwareness.cli")


def _read_document(path: Path) -> bytes:
    return path.read_bytes()


def handle_validate(args_ns, current_settings: Settings) -> int:
    result = validate_document(_read_document(args_ns.path), roots_only=args_ns.roots_only,
                               settings=current_settings)
    if result.ok:
        print(f"OK: {result.entity_type} '{result.entity.id}'")
        return 0
    for violation in result.violations:
        print(violation)
    print(f"{len(result.violations)} violation(s) in {args_ns.path}", file=sys.stderr)
    return 1


def handle_reformat(args_ns, current_settings: Settings) -> int:
    result = validate_document(_read_document(args_ns.path), settings=current_settings)
    if not result.ok:
        for violation in result.violations:
            print(violation, file=sys.stderr)
        return 1
    try:
        meta = json.loads(args_ns.meta) if args_ns.meta else None
    except ValueError as e:
        log.error(f"--meta is not valid JSON: {e}")
        return 2
    try:
        output = encode(result.entity_type, result.entity, meta, settings=current_settings)
    except DocumentError as e:
        log.error(f"Could not re-encode {args_ns.path}: {e}")
        return 1
    if args_ns.out:
        args_ns.out.write_bytes(output)
        log.info(f"Wrote {result.entity_type} to {args_ns.out}")
    else:
        sys.stdout.write(output.decode("utf-8") + "\n")
    return 0


def handle_normalize_period(args_ns, current_settings: Settings) -> int:
    try:
        period = parse_timestamp(args_ns.date)
    except ValueError as e:
        log.error(f"Invalid date: {e}")
        return 2
    config = period_config(args_ns.reporting_period, args_ns.alignment)
    normalized = config.normalize(period)
    start, end = period_range(period, config)
    log.debug(f"Period {format_timestamp(period)} covers {format_timestamp(start)} - {format_timestamp(end)}")
    print(format_timestamp(normalized))
    return 0


def handle_classify_id(args_ns, current_settings: Settings) -> int:
    kind, valid = classify(args_ns.id, current_settings)
    line = f"{kind.value} ({'valid' if valid else 'invalid'})"
    well_known = parse_well_known(args_ns.id)
    if well_known is not None:
        line += f" namespace={well_known.namespace} version={well_known.version}"
    print(line)
    return 0 if valid else 1


def handle_new_id(args_ns, current_settings: Settings) -> int:
    print(generate_id())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="design-awareness",
        description="Design Awareness: validate and normalize design-process tracking documents"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging for all DesignAwareness modules."
    )
    subparsers = parser.add_subparsers(dest="command", title="Available Commands", required=True)

    # --- Validate Subcommand ---
    parser_validate = subparsers.add_parser("validate", help="Check a document and list every violation.")
    parser_validate.add_argument("path", type=Path, help="Path to a .json document.")
    parser_validate.add_argument("--roots-only", action="store_true",
                                 help="Only accept project documents (AsyncProject, RealtimeProject).")
    parser_validate.set_defaults(func=handle_validate)

    # --- Reformat Subcommand ---
    parser_reformat = subparsers.add_parser(
        "reformat",
        help="Re-encode a valid document canonically, with every default filled in."
    )
    parser_reformat.add_argument("path", type=Path, help="Path to a .json document.")
    parser_reformat.add_argument("--out", type=Path, help="Output path (default: stdout).")
    parser_reformat.add_argument("--meta", help="JSON value to attach as envelope meta.")
    parser_reformat.set_defaults(func=handle_reformat)

    # --- Normalize Period Subcommand ---
    parser_period = subparsers.add_parser("normalize-period", help="Normalize an async entry period.")
    parser_period.add_argument("date", help="ISO-8601 date/time, e.g. 2021-06-23T01:33:40.908Z")
    parser_period.add_argument("--reporting-period", choices=["day", "week"], required=True)
    parser_period.add_argument("--alignment", type=int, choices=[int(day) for day in Weekday],
                               default=int(Weekday.SUNDAY), help="Week start, 0 = Sunday (default).")
    parser_period.set_defaults(func=handle_normalize_period)

    # --- ID Subcommands ---
    parser_classify = subparsers.add_parser("classify-id", help="Tell generated and well-known IDs apart.")
    parser_classify.add_argument("id")
    parser_classify.set_defaults(func=handle_classify_id)

    parser_new_id = subparsers.add_parser("new-id", help="Print a fresh generated ID.")
    parser_new_id.set_defaults(func=handle_new_id)

    return parser


def main(argv=None) -> int:
    settings = Settings()
    args = build_parser().parse_args(argv)

    logging.basicConfig(format=LOG_FORMAT, level=settings.log_level.upper())
    if args.debug:
        logging.getLogger("DesignAwareness").setLevel(logging.DEBUG)
        log.debug("Debug logging enabled via CLI.")

    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
