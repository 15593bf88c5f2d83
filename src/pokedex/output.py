"""Terminal output for the Pokedex, split between stdout and stderr.

REPL answers (area names, Pokemon, the cache table) go to **stdout** so they
can be piped; errors, notices and debug lines go to **stderr**. Colour is
off when ``NO_COLOR`` is set, when ``TERM=dumb``, or when the user asks for
it with ``--no-color`` or the saved ``output.no_color`` setting.

:func:`~pokedex.app.main_callback` builds one :class:`OutputManager` per
invocation and installs it with :func:`set_output`; the rest of the package
goes through the module-level helpers (:func:`print_data`, :func:`error`,
:func:`debug`, ...).
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputManager:
    """Routes Pokedex output to the right stream with the right styling.

    Args:
        no_color: Print plain text without Rich markup.
        quiet: Hide informational and success notices.
        verbose: Show ``debug`` lines.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stdout = Console(file=sys.stdout, no_color=self._no_color, highlight=False)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def no_color(self) -> bool:
        return self._no_color

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write *text* to stdout exactly as given."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Pretty-print *data* as JSON; highlighted unless colour is off."""
        rendered = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._no_color:
            self.print_data(rendered)
            return
        self._stdout.print(Syntax(rendered, "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows under *headers*.

        Without colour the table degrades to tab-separated lines (header
        first), which keeps ``pokedex`` output grep-friendly. *title* only
        shows on the Rich table.
        """
        if self._no_color:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def _notice(self, plain: str, styled: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(styled)

    def info(self, message: str) -> None:
        """Notice on stderr, hidden by ``--quiet``."""
        if not self._quiet:
            self._notice(message, message)

    def success(self, message: str) -> None:
        """Green notice on stderr, hidden by ``--quiet``."""
        if not self._quiet:
            self._notice(message, f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Error on stderr. Always shown, even with ``--quiet``."""
        self._notice(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        """Debug line on stderr, shown only with ``--verbose``."""
        if self._verbose:
            self._notice(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is present (any value) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Tests call this between cases."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
