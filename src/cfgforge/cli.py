from __future__ import annotations

import argparse
import sys

import yaml

from cfgforge.pipeline.runner import rebuild, run, show_unit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cfgforge", description="Configuration assembler")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser_ = subparsers.add_parser("build", help="Assemble all units of a manifest")
    build_parser_.add_argument("config", help="Path to cfgforge.yaml")

    rebuild_parser = subparsers.add_parser(
        "rebuild",
        help="Re-assemble units from the __files/__addition artifacts of an earlier build",
    )
    rebuild_parser.add_argument("output_dir", help="Directory holding the assembled artifacts")
    rebuild_parser.add_argument(
        "--base-dir",
        default=None,
        help="Override the project base directory (default: computed by __files.py).",
    )

    show_parser = subparsers.add_parser("show", help="Print the merged value of one unit as YAML")
    show_parser.add_argument("config", help="Path to cfgforge.yaml")
    show_parser.add_argument("unit", help="Unit name, e.g. web or params")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "build":
        try:
            report = run(args.config)
        except Exception as err:
            raise SystemExit(f"cfgforge build failed: {err}") from None
        if not report.ok:
            raise SystemExit(f"cfgforge build failed for: {', '.join(sorted(report.failed))}")
        return

    if args.command == "rebuild":
        try:
            report = rebuild(args.output_dir, base_dir=args.base_dir)
        except Exception as err:
            raise SystemExit(f"cfgforge rebuild failed: {err}") from None
        if not report.ok:
            raise SystemExit(f"cfgforge rebuild failed for: {', '.join(sorted(report.failed))}")
        return

    if args.command == "show":
        try:
            values = show_unit(args.config, args.unit)
        except Exception as err:
            raise SystemExit(f"cfgforge show failed: {err}") from None
        sys.stdout.write(yaml.safe_dump(values, sort_keys=False, allow_unicode=True))
        return

    parser.error(f"Unknown command: {args.command}")
