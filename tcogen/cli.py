"""CLI entrypoint for templ-component-opts."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .errors import GenerationError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="templ-component-opts",
        description=(
            "Generate functional-options helpers for dataclasses marked with "
            "'# templ:component-opts'."
        ),
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Directory tree to scan (defaults to the current directory).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without writing generated files.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .tcogen.yml file (defaults to the one in the root directory).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug-level logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for templ-component-opts."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    root = args.root or str(Path.cwd())
    orchestrator = Orchestrator()
    try:
        config = load_config(Path(args.config), required=True) if args.config else None
        outcomes = orchestrator.run(root, config=config, dry_run=bool(args.dry_run))
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"invalid configuration: {exc}\n")
    except GenerationError as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        parser.exit(1, f"templ-component-opts failed: {exc}\n")

    if args.dry_run:
        changed = sum(1 for outcome in outcomes if outcome.diff)
        print(f"{changed} of {len(outcomes)} generated module(s) would change (dry-run)")


if __name__ == "__main__":
    main(sys.argv[1:])
