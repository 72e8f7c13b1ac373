"""CLI entrypoints for storygen commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Optional

from .config import ConfigError, StoryGenConfig, load_config
from .interactive import ask_props_info
from .logging import configure_logging, get_logger
from .models import MockMapping
from .prompting import StoryPromptBuilder
from .props import PropsExtractionError, extract_default_mocks

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_props_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("component", help="Path to the component source file (.tsx).")
    parser.add_argument(
        "--props-file",
        help="File declaring the props interface or type (defaults to the component file).",
    )
    parser.add_argument(
        "--props-name",
        help="Name of the props interface or type (auto-detected when omitted).",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Ask where the props declaration lives instead of using flags.",
    )
    parser.add_argument(
        "--project-root",
        help="TypeScript project root holding tsconfig.json (defaults to the config or cwd).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storygen",
        description="Extract mock props from React components and build Storybook prompts.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .storygen.yml or the directory containing it.",
    )
    parser.add_argument(
        "--log-file",
        help="Also write diagnostics to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    mocks_parser = subparsers.add_parser(
        "mocks",
        help="Print mock values for a component's props as JSON.",
    )
    _add_verbose_option(mocks_parser, suppress_default=True)
    _add_props_options(mocks_parser)

    prompt_parser = subparsers.add_parser(
        "prompt",
        help="Print the Storybook generation prompt for a component.",
    )
    _add_verbose_option(prompt_parser, suppress_default=True)
    _add_props_options(prompt_parser)
    prompt_parser.add_argument(
        "--templates-dir",
        help="Directory with a custom story.j2 template.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing mocks and prompts.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", help="Interface to bind (defaults to config or 127.0.0.1).")
    serve_parser.add_argument("--port", type=int, help="Port to bind (defaults to config or 8000).")

    return parser


def main(
    argv: list[str] | None = None,
    *,
    input_fn: Callable[[str], str] = input,
) -> None:
    """CLI entrypoint for storygen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        from .service import run_service

        run_service(
            host=args.host or config.service.host,
            port=args.port or config.service.port,
            config=config,
        )
        return

    try:
        mocks = _extract(args, config, input_fn)
        if args.command == "mocks":
            print(json.dumps(mocks, indent=2))
        elif args.command == "prompt":
            templates_dir = Path(args.templates_dir) if args.templates_dir else config.prompt.templates_dir
            builder = StoryPromptBuilder(templates_dir, title_prefix=config.prompt.title_prefix)
            print(builder.build(Path(args.component), mocks).text, end="")
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except PropsExtractionError as exc:
        parser.exit(1, f"storygen {args.command} failed: {exc}\n")
    except Exception as exc:  # pragma: no cover - defensive guard
        logger.debug("Unexpected failure", exc_info=True)
        parser.exit(
            1, f"storygen {args.command} failed: {exc}\nRun with --verbose for more details.\n"
        )


def _extract(
    args: argparse.Namespace,
    config: StoryGenConfig,
    input_fn: Callable[[str], str],
) -> MockMapping:
    props_file: Optional[str] = args.props_file
    props_name: Optional[str] = args.props_name
    if args.interactive:
        info = ask_props_info(input_fn)
        props_file = info.file_path
        props_name = info.declaration_name

    project_root = Path(args.project_root) if args.project_root else config.project.root
    return extract_default_mocks(
        args.component,
        props_file,
        props_name,
        project_root=project_root,
        tsconfig_path=None if args.project_root else config.project.tsconfig,
    )


if __name__ == "__main__":
    main(sys.argv[1:])
