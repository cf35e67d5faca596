import argparse
import logging
import sys
from pathlib import Path

from compatmatrix.cli.commands.explore import handle_explore
from compatmatrix.cli.commands.render import handle_render, handle_show, parse_open_cell
from compatmatrix.config.resolution import resolve_log_level, resolve_render_settings
from compatmatrix.config.workspace import load_workspace_context
from compatmatrix.domain.filters import FilterSpecError


def _add_surface_options(parser: argparse.ArgumentParser, *, with_open: bool = True) -> None:
    parser.add_argument(
        "--source",
        "-s",
        default=None,
        help="path or http(s) URL of the compatibility document (default: data.json)",
    )
    parser.add_argument(
        "--filter",
        "-f",
        default=None,
        help="initial filter: none, unique:<exporter> or better:<a>:<b>",
    )
    if with_open:
        parser.add_argument(
            "--open",
            default=None,
            type=parse_open_cell,
            metavar="FEATURE:EXPORTER",
            help="expand the details panel of one cell",
        )


def main(argv=None) -> int:
    # Common options shared by top-level and subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="set logging level (default: WARNING)",
    )

    parser = argparse.ArgumentParser(
        prog="compat",
        description="Render and explore a feature-by-platform compatibility matrix.",
        parents=[common],
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_render = sub.add_parser(
        "render",
        help="write the matrix as an HTML page",
        parents=[common],
    )
    _add_surface_options(p_render)
    p_render.add_argument(
        "--output",
        "-o",
        default=None,
        help="HTML destination (default: compat-matrix.html)",
    )

    p_show = sub.add_parser(
        "show",
        help="print the matrix to the terminal",
        parents=[common],
    )
    _add_surface_options(p_show)

    p_explore = sub.add_parser(
        "explore",
        help="interactive filter and details session in the terminal",
        parents=[common],
    )
    _add_surface_options(p_explore, with_open=False)
    p_explore.add_argument(
        "--output",
        "-o",
        default=None,
        help="default destination for the 'save' command",
    )

    args = parser.parse_args(argv)
    workspace_context = load_workspace_context(Path.cwd())

    shared_defaults = workspace_context.config.shared if workspace_context else None
    level = resolve_log_level(
        getattr(args, "log_level", None),
        shared_defaults.log_level if shared_defaults else None,
    )
    logging.basicConfig(level=level.value, format="%(message)s")

    try:
        settings = resolve_render_settings(
            cli_source=args.source,
            cli_output=getattr(args, "output", None),
            cli_filter=args.filter,
            workspace=workspace_context,
        )
    except FilterSpecError as exc:
        parser.error(str(exc))

    if args.cmd == "render":
        return handle_render(settings, open_cell=args.open)
    if args.cmd == "show":
        return handle_show(settings, open_cell=args.open)
    if args.cmd == "explore":
        return handle_explore(settings)
    return 2


def run() -> None:
    sys.exit(main())
