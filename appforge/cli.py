"""appforge command-line interface.

Three commands share one output path: obtain a specification, generate the
project files, write them (and the specification) to the output directory.

Usage::

    appforge render coffee-shop.json -o ./coffee-shop
    appforge create "A coffee shop app with a menu and an order screen" -o ./coffee-shop
    appforge iterate ./coffee-shop/appforge-spec.json "Add a favourites screen" -o ./coffee-shop
    appforge render coffee-shop.json -c appforge.json
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Awaitable, Callable

from pydantic import ValidationError

from appforge.config import Config
from appforge.producer import SpecProducer, SpecProducerError
from appforge.scaffolder.generator import generate
from appforge.spec.models import AppSpecification, load_specification
from appforge.utils import (
    console,
    print_error,
    print_file_tree,
    print_success,
    print_summary_table,
    save_json,
    write_files,
)


class CLIError(Exception):
    """Raised for failures reported to the user before exiting with status 1."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def _load_config(path: str | None) -> Config:
    """Read *path* when given, else build the configuration from the environment."""
    if path is None:
        return Config.from_env()
    config_path = Path(path)
    if not config_path.exists():
        raise CLIError(f"Configuration file not found: {config_path}")
    try:
        return Config.load(config_path)
    except ValidationError as exc:
        raise CLIError(f"Invalid configuration {config_path}:\n{exc}") from exc


# ---------------------------------------------------------------------------
# Specification sources
# ---------------------------------------------------------------------------


def _load(path: str) -> AppSpecification:
    spec_path = Path(path)
    if not spec_path.exists():
        raise CLIError(f"Specification file not found: {spec_path}")
    try:
        return load_specification(spec_path)
    except ValidationError as exc:
        raise CLIError(f"Invalid specification {spec_path}:\n{exc}") from exc


async def _produce(
    config: Config, request: Callable[[SpecProducer], Awaitable[AppSpecification]]
) -> AppSpecification:
    with console.status("[dim]Waiting for the AI service...[/dim]"):
        try:
            async with SpecProducer(config.llm) as producer:
                return await request(producer)
        except SpecProducerError as exc:
            raise CLIError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Generation & output
# ---------------------------------------------------------------------------


async def build_project(spec: AppSpecification, config: Config) -> dict[str, str]:
    """Generate *spec* and write the files (and optionally the spec) to disk."""
    files = generate(spec)
    try:
        await write_files(files, config.output_dir)
    except (OSError, ValueError) as exc:
        raise CLIError(f"Could not write project files: {exc}") from exc
    if config.write_spec:
        await save_json(spec.model_dump(mode="json", by_alias=True, exclude_none=True), config.spec_path)

    print_file_tree(files, str(config.output_dir))
    print_summary_table(
        {
            "App": spec.app_name,
            "Screens": str(len(spec.screens)),
            "Files": str(len(files)),
            "Spec hash": spec.content_hash()[:12],
        },
        title="Generated project",
    )
    return files


async def run(args: argparse.Namespace, config: Config) -> None:
    if args.command == "render":
        spec = _load(args.spec)
    elif args.command == "create":
        spec = await _produce(config, lambda p: p.create(args.prompt))
    elif args.command == "iterate":
        original = _load(args.spec)
        spec = await _produce(config, lambda p: p.iterate(original, args.modification))
    else:  # pragma: no cover - argparse enforces the choices
        raise CLIError(f"Unknown command: {args.command}")
    await build_project(spec, config)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _common_options() -> argparse.ArgumentParser:
    """Options accepted after every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--output", "-o",
        default=None,
        help="Output directory (default: the config file, $APPFORGE_OUTPUT_DIR or ./output)",
    )
    common.add_argument(
        "--config", "-c",
        default=None,
        help="JSON configuration file (default: settings from APPFORGE_* variables)",
    )
    common.add_argument(
        "--no-save-spec",
        action="store_true",
        help="Do not write the specification next to the generated files",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appforge",
        description="appforge -- generate React Native app skeletons from descriptions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  appforge render spec.json -o ./my-app\n"
            '  appforge create "A recipe app with favourites" -o ./my-app\n'
            '  appforge iterate spec.json "Add a settings screen" -o ./my-app\n'
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)
    common = _common_options()

    render = sub.add_parser(
        "render", parents=[common], help="Generate a project from a specification file"
    )
    render.add_argument("spec", help="Path to the specification JSON file")

    create = sub.add_parser(
        "create", parents=[common], help="Ask the AI for a specification, then generate"
    )
    create.add_argument("prompt", help="Natural-language description of the app")

    iterate = sub.add_parser(
        "iterate", parents=[common], help="Amend an existing specification, then generate"
    )
    iterate.add_argument("spec", help="Path to the specification JSON file to amend")
    iterate.add_argument("modification", help="Requested change, in natural language")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``appforge`` / ``python -m appforge.cli``."""
    args = build_parser().parse_args(argv)

    try:
        config = _load_config(args.config)
    except CLIError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    if args.output:
        config.output_dir = Path(args.output)
    if args.no_save_spec:
        config.write_spec = False

    try:
        asyncio.run(run(args, config))
    except CLIError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    print_success(f"Project written to {config.output_dir}")


if __name__ == "__main__":
    main()
