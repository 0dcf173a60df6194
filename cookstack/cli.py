"""CLI entrypoints for cookstack commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, CookstackConfig, load_config
from .loader import CookbookRepository, load_cookbook
from .logging import configure_logging
from .metadata import InvalidMetadataSource, MetadataParseError
from .models import EMPTY, Category, CookbookVersion


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .cookstack.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cookstack",
        description="Resolve layered cookbooks from one or more overlay directories.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser(
        "show",
        help="Resolve a single cookbook from ordered overlay roots.",
    )
    _add_verbose_option(show_parser, suppress_default=True)
    _add_config_option(show_parser)
    show_parser.add_argument("name", help="Cookbook name.")
    show_parser.add_argument(
        "roots",
        nargs="+",
        help="Overlay roots in search path order; later roots override earlier ones.",
    )
    show_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the resolved cookbook as JSON.",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List the cookbooks found in one or more cookbook paths.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_config_option(list_parser)
    list_parser.add_argument(
        "paths",
        nargs="*",
        help="Cookbook paths to search (defaults to cookbook_paths from .cookstack.yml).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for cookstack commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(verbose=bool(args.verbose), log_file=config.log_file)

    if args.command == "show":
        try:
            result = load_cookbook(args.name, args.roots, config=config)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (MetadataParseError, InvalidMetadataSource) as exc:
            parser.exit(1, f"cookstack show failed: {exc}\nRun with --verbose for more details.\n")
        if result is EMPTY:
            print(f"cookbook {args.name} is empty, skipping")
            return
        if args.json:
            print(json.dumps(result.to_dict(), indent=2, sort_keys=True))
        else:
            print(_describe(result))
    elif args.command == "list":
        paths = [Path(path) for path in args.paths] or _default_paths(config)
        if not paths:
            parser.exit(1, "No cookbook paths given and none configured in .cookstack.yml\n")
        repository = CookbookRepository(paths, config=config)
        try:
            cookbooks = repository.load_all()
        except (MetadataParseError, InvalidMetadataSource) as exc:
            parser.exit(1, f"cookstack list failed: {exc}\nRun with --verbose for more details.\n")
        for name, version in cookbooks.items():
            suffix = " (frozen)" if version.frozen else ""
            print(f"{name} {version.metadata.version}: {len(version.all_files())} files{suffix}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _default_paths(config: CookstackConfig) -> list[Path]:
    return list(config.cookbook_paths)


def _describe(version: CookbookVersion) -> str:
    lines = [f"{version.name} {version.metadata.version}"]
    if version.frozen:
        lines[0] += " (frozen)"
    for root in version.root_paths:
        lines.append(f"  root: {_relativize(root)}")
    for category in Category:
        files = version.filenames(category)
        if not files:
            continue
        lines.append(f"  {category.value}:")
        lines.extend(f"    {_relativize(Path(path))}" for path in files)
    return "\n".join(lines)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
