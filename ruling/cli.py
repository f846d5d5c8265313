"""CLI entrypoints for ruling commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config, load_rules
from .errors import RulingError
from .logging import configure_logging
from .orchestrator import ProjectOrchestrator, summarize


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .ruling.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ruling",
        description="Analyze source projects and record per-rule results for baseline comparison.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Analyze one configured project.")
    _add_verbose_option(run_parser, suppress_default=True)
    _add_config_option(run_parser)
    run_parser.add_argument("project", help="Name of the project as listed in the configuration.")
    run_parser.add_argument(
        "--rules",
        default=None,
        help="JSON file listing rule configurations forwarded to analyzers.",
    )
    run_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write detailed logs to this file.",
    )

    list_parser = subparsers.add_parser("list", help="List configured projects.")
    _add_verbose_option(list_parser, suppress_default=True)
    _add_config_option(list_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ruling commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if getattr(args, "log_file", None) else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    try:
        config = load_config(Path(args.config))
    except RulingError as exc:
        parser.exit(1, f"ruling: {exc}\n")

    if args.command == "list":
        for name in config.project_names():
            print(name)
        return

    if args.command == "run":
        try:
            spec = config.project(args.project)
            rules = load_rules(Path(args.rules)) if args.rules else []
            outcome = ProjectOrchestrator(config).run(spec, rules)
        except RulingError as exc:
            parser.exit(1, f"ruling run failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Analyzed {len(outcome.output)} file(s) of {spec.name}")
        for rule_id, count in summarize(outcome.output).items():
            print(f"  {rule_id}: {count}")
        if outcome.written:
            print(f"Results written to {outcome.written[0].parent}")
        return

    parser.exit(1, "Unknown command\n")  # pragma: no cover - argparse enforces choices


if __name__ == "__main__":
    main(sys.argv[1:])
