"""CLI entrypoints for cliffnotes commands."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import API_KEY_ENV, ConfigError, CliffnotesConfig, load_config, resolve_api_key
from .llm import AnthropicRunner
from .logging import configure_logging, get_logger
from .models import FileAnalysis
from .orchestrator import FileAnalysisError, Orchestrator
from .repo_scanner import RootNotFound


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity (prints one line per analyzed file).",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_logging_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cliffnotes",
        description="Generate navigable per-folder summaries of a codebase.",
    )
    _add_verbose_option(parser)
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Analyze changed files and rewrite the cliffnotes documents.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of files summarized at once (overrides config).",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Name of the per-folder output document (overrides config).",
    )

    prune_parser = subparsers.add_parser(
        "prune",
        help="Drop cache entries for files that no longer exist.",
    )
    _add_verbose_option(prune_parser, suppress_default=True)
    _add_path_argument(prune_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for cliffnotes commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )

    root = Path(args.path).expanduser().resolve()
    if not root.is_dir():
        parser.exit(1, f"Repository path not found: {args.path}\n")

    try:
        config = load_config(root)
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")

    if args.command == "generate":
        _run_generate(parser, args, config)
    elif args.command == "prune":
        _run_prune(parser, config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: CliffnotesConfig
) -> None:
    if args.concurrency is not None:
        if args.concurrency < 1:
            parser.exit(1, "--concurrency must be a positive integer\n")
        config.concurrency = args.concurrency
    if args.output:
        config.output_file = args.output

    api_key = resolve_api_key(config.root, os.environ, configured=config.llm.api_key)
    if not api_key:
        parser.exit(
            1,
            f"No API key found. Set {API_KEY_ENV} in the environment or a .env file.\n",
        )

    runner = AnthropicRunner(
        api_key,
        model=config.llm.model,
        max_tokens=config.llm.max_tokens,
        base_url=config.llm.base_url,
        request_timeout=config.llm.request_timeout,
    )
    orchestrator = Orchestrator(config, runner)
    logger = get_logger("cli")

    def report_progress(analysis: FileAnalysis, completed: int, total: int) -> None:
        logger.debug("(%d/%d) %s", completed, total, analysis.relative_path)

    try:
        report = orchestrator.run(on_progress=report_progress)
    except RootNotFound as exc:
        parser.exit(1, f"{exc}\n")
    except FileAnalysisError as exc:
        parser.exit(
            1,
            f"cliffnotes generate failed on {exc.path}: {exc.__cause__ or exc}\n"
            "Run with --verbose for more details.\n",
        )

    analysis = report.analysis
    print(f"Files: {len(analysis.results)} ({analysis.cached_count} cached, {analysis.analyzed_count} analyzed)")
    if analysis.skipped_count:
        print(f"Skipped (too large or minified): {analysis.skipped_count}")
    print(
        f"Tokens: {report.cost.input_tokens:,} in / {report.cost.output_tokens:,} out"
        f" (~${report.cost.estimated_cost:.4f})"
    )
    if report.written:
        print(f"Wrote {len(report.written)} documents; start at {_relativize(report.written[0])}")


def _run_prune(parser: argparse.ArgumentParser, config: CliffnotesConfig) -> None:
    try:
        removed = Orchestrator(config).prune_cache()
    except RootNotFound as exc:
        parser.exit(1, f"{exc}\n")
    if removed:
        print(f"Pruned {len(removed)} cache entries")
        for path in removed:
            print(f"  {path}")
    else:
        print("Cache already up to date")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
