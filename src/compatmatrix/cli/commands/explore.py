from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.text import Text

from compatmatrix.config.resolution import RenderSettings
from compatmatrix.domain.filters import FilterSpecError, parse_filter
from compatmatrix.engine.dispatcher import (
    FilterTypeChanged,
    InteractionDispatcher,
    PlatformPicked,
)
from compatmatrix.render.console import render_failure, render_view
from compatmatrix.render.html import render_page, write_page
from compatmatrix.sources.loader import LoadFailure, load_registry

logger = logging.getLogger(__name__)

HELP = """\
commands:
  type none|unique|better     choose the filter type (clears the pickers)
  pick unique|a|b EXPORTER    set a platform picker
  filter SPEC                 none, unique:<id> or better:<a>:<b>
  open FEATURE EXPORTER       toggle the details panel of a cell
  close                       collapse the details panel
  save PATH                   write the current surface as HTML
  help                        show this text
  quit                        leave the session"""


class ExploreSession:
    """Line-driven interaction loop over a loaded matrix."""

    def __init__(
        self,
        dispatcher: InteractionDispatcher,
        settings: RenderSettings,
        console: Optional[Console] = None,
    ):
        self.dispatcher = dispatcher
        self.settings = settings
        self.console = console or Console()

    def execute(self, line: str) -> bool:
        """Run one command; return False when the session should end."""
        try:
            words = shlex.split(line)
        except ValueError as exc:
            self.console.print(Text(str(exc), style="red"))
            return True
        if not words:
            return True
        cmd, args = words[0].lower(), words[1:]
        if cmd in {"quit", "exit"}:
            return False
        handler: Optional[Callable[[list[str]], None]] = getattr(self, f"_cmd_{cmd}", None)
        if handler is None:
            self.console.print(f"unknown command {cmd!r}; try 'help'")
            return True
        handler(args)
        return True

    def run(self, lines: Iterable[str]) -> None:
        render_view(self.dispatcher.view, self.console)
        for line in lines:
            if not self.execute(line):
                break

    def _refresh(self) -> None:
        render_view(self.dispatcher.view, self.console)

    def _cmd_help(self, args: list[str]) -> None:
        self.console.print(HELP, markup=False)

    def _cmd_type(self, args: list[str]) -> None:
        if len(args) != 1:
            self.console.print("usage: type none|unique|better")
            return
        self.dispatcher.dispatch(FilterTypeChanged(args[0]))
        self._refresh()

    def _cmd_pick(self, args: list[str]) -> None:
        if len(args) != 2:
            self.console.print("usage: pick unique|a|b EXPORTER")
            return
        self.dispatcher.dispatch(PlatformPicked(slot=args[0].lower(), exporter_id=args[1]))
        self._refresh()

    def _cmd_filter(self, args: list[str]) -> None:
        try:
            descriptor = parse_filter(" ".join(args))
        except FilterSpecError as exc:
            self.console.print(Text(str(exc), style="red"))
            return
        self.dispatcher.set_filter(descriptor)
        self._refresh()

    def _cmd_open(self, args: list[str]) -> None:
        if len(args) != 2:
            self.console.print("usage: open FEATURE EXPORTER")
            return
        self.dispatcher.activate_by_name(args[0], args[1])
        self._refresh()

    def _cmd_close(self, args: list[str]) -> None:
        self.dispatcher.details.collapse()
        self._refresh()

    def _cmd_save(self, args: list[str]) -> None:
        target = Path(args[0]) if args else self.settings.output
        page = render_page(
            self.dispatcher.view,
            title=self.settings.title,
            stylesheet=self.settings.stylesheet,
        )
        write_page(target, page)
        self.console.print(f"saved {target}")


def _prompt_lines(console: Console) -> Iterable[str]:
    while True:
        try:
            yield console.input("[bold]compat>[/bold] ")
        except EOFError:
            return


def handle_explore(settings: RenderSettings) -> int:
    console = Console()
    try:
        registry = load_registry(settings.source)
    except LoadFailure:
        render_failure(console)
        return 1
    dispatcher = InteractionDispatcher(registry)
    dispatcher.set_filter(settings.filter)
    ExploreSession(dispatcher, settings, console).run(_prompt_lines(console))
    return 0
