"""aiblock entry point.

Maps shell verbs onto the library: render a markdown file to HTML, or
inspect its ai containers as JSON.
"""

import argparse
import logging
import sys
from pathlib import Path

from aiblock_cli.verbs import inspect, render


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aiblock",
        description="Render ::: ai containers in markdown with source line sync",
    )
    parser.add_argument(
        "--project-path", "-p",
        default=".",
        help="Project root holding .aiblock/render.yaml (default: current directory)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="verb", required=True)

    render.register(sub)
    inspect.register(sub)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    from aiblock.settings import get_settings
    from aiblock_cli.output import die

    if args.debug:
        level = logging.DEBUG
    else:
        log_level = get_settings().log_level
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            die(f"unknown log level: {log_level}")
    logging.basicConfig(
        level=level,
        format="[%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    project_path = str(Path(args.project_path).resolve())

    # Dispatch to verb handler
    handler = args.handler
    handler(args, project_path)


if __name__ == "__main__":
    main()
