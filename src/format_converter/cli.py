"""Command line front-end that drives a single conversion session."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .catalog import Category, accept_rule_for, formats_for
from .config import Settings, get_settings
from .errors import ConversionFailure
from .logging import configure_logging
from .models import SourceFile
from .plugins import DEFAULT_PLUGIN_MODULES, ENCODERS, EXTRACTORS, load_plugins_from_settings
from .plugins.registry import write_plugin_module_file
from .session import ConversionSession


def _category(value: str) -> Category:
    for category in Category:
        if category.value.lower() == value.lower():
            return category
    choices = ", ".join(category.value for category in Category)
    raise argparse.ArgumentTypeError(f"unknown category '{value}' (choose from {choices})")


def _report_failure(failure: ConversionFailure, as_json: bool) -> None:
    if as_json:
        print(json.dumps(failure.to_dict()), file=sys.stderr)
    else:
        print(failure.message, file=sys.stderr)


def handle_formats(args: argparse.Namespace, settings: Settings) -> int:
    categories = [args.category] if args.category else list(Category)
    for category in categories:
        print(f"{category.value} (accepts {accept_rule_for(category).description})")
        for option in formats_for(category):
            print(f"  {option.id:<6} {option.label:<6} .{option.extension}")
    return 0


def handle_plugins(args: argparse.Namespace, settings: Settings) -> int:
    load_plugins_from_settings(settings)
    for kind, registry in (("extractor", EXTRACTORS), ("encoder", ENCODERS)):
        for plugin in registry.list():
            info = plugin.describe()
            print(f"{kind:<9} {info['category']:<8} {info['slug']}")
    if args.save:
        modules = settings.plugin_modules or list(DEFAULT_PLUGIN_MODULES)
        write_plugin_module_file(args.save, modules)
        print(f"Saved plugin module list to {args.save}")
    return 0


def handle_convert(args: argparse.Namespace, settings: Settings) -> int:
    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        return 2

    def show_progress(value: int) -> None:
        if not args.quiet:
            print(f"\rConverting... {value:3d}%", end="", flush=True)

    session = ConversionSession(args.category, settings=settings, on_progress=show_progress)
    if not session.select_file(SourceFile.from_path(input_path, args.mime)):
        if session.error is not None:
            _report_failure(session.error, args.json)
        return 1

    try:
        session.select_format(args.target)
    except KeyError:
        choices = ", ".join(option.id for option in session.formats)
        print(f"'{args.target}' is not offered for {session.category.value} ({choices})", file=sys.stderr)
        return 2

    outcome = asyncio.run(session.start_conversion())
    if not args.quiet:
        print()
    if outcome is None:
        print("Conversion did not run", file=sys.stderr)
        return 1
    if isinstance(outcome, ConversionFailure):
        _report_failure(outcome, args.json)
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / outcome.suggested_file_name
    output_path.write_bytes(outcome.output_bytes)
    note = " (original bytes, no re-encoding)" if outcome.passthrough else ""
    print(f"Wrote {output_path} [{outcome.mime_type}]{note}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert files between formats in memory.")
    parser.add_argument(
        "--config",
        dest="config",
        default=None,
        help="Path to a settings YAML file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    formats_parser = subparsers.add_parser("formats", help="List categories and output formats")
    formats_parser.add_argument("--category", type=_category, default=None)
    formats_parser.set_defaults(func=handle_formats)

    plugins_parser = subparsers.add_parser("plugins", help="List loaded extractor/encoder plugins")
    plugins_parser.add_argument("--save", default=None, help="Write the plugin module list to a YAML file")
    plugins_parser.set_defaults(func=handle_plugins)

    convert_parser = subparsers.add_parser("convert", help="Convert one file")
    convert_parser.add_argument("input", help="File to convert")
    convert_parser.add_argument("--category", type=_category, default=Category.DOCUMENT)
    convert_parser.add_argument("--to", dest="target", required=True, help="Target format id")
    convert_parser.add_argument("--output-dir", default=".", help="Directory for the result (default: %(default)s)")
    convert_parser.add_argument("--mime", default=None, help="Declared MIME type (guessed from the name otherwise)")
    convert_parser.add_argument("--quiet", action="store_true", help="Do not print progress")
    convert_parser.add_argument("--json", action="store_true", help="Report failures as a JSON object on stderr")
    convert_parser.set_defaults(func=handle_convert)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_source(config_file=args.config) if args.config else get_settings()
    configure_logging(settings.logging)
    return args.func(args, settings)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
