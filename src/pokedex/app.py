"""Typer application factory and CLI entry point for pokedex.

Running ``pokedex`` with no sub-command resolves the configuration, builds
the process-wide :class:`~pokedex.cache.TTLCache`, opens a
:class:`~pokedex.client.PokeAPIClient`, and hands control to the REPL in
:mod:`pokedex.repl`. The ``config`` sub-group manages persisted defaults.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, invokes the Typer app, and
maps :class:`~pokedex.exceptions.PokedexError` to exit codes. Unhandled
exceptions are written to a crash log under the data directory.

See Also:
    :mod:`pokedex.config`: Configuration precedence resolution.
    :mod:`pokedex.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from pokedex import __version__
from pokedex.commands.config import config_app
from pokedex.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="pokedex",
    help="Explore PokeAPI location areas and catch Pokemon.",
    invoke_without_command=True,
    add_completion=False,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"pokedex {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, no_color: bool = False) -> None:
    """Route library log records to stderr through Rich.

    Only DEBUG-level records from the ``pokedex`` logger tree are shown when
    *verbose* is set; otherwise warnings and above.
    """
    logger = logging.getLogger("pokedex")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(file=sys.stderr, no_color=no_color, stderr=True),
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    ttl: Optional[float] = typer.Option(
        None, "--ttl", help="Cache lifetime in seconds (overrides config)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="PokeAPI root URL (overrides config)."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Start the interactive Pokedex, or run a ``config`` sub-command.

    Initialises the global :class:`~pokedex.output.OutputManager` and
    logging from CLI flags. When no sub-command was given, resolves the
    configuration and runs the REPL until ``exit`` or end of input.
    """
    from pokedex.output import OutputManager, set_output

    output = OutputManager(no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(verbose, output.no_color)

    if ctx.invoked_subcommand is None:
        run_interactive(cli_ttl=ttl, cli_base_url=base_url)


def run_interactive(
    cli_ttl: Optional[float] = None,
    cli_base_url: Optional[str] = None,
) -> None:
    """Build the cache and client from the resolved config and run the REPL.

    A persisted ``output.no_color`` turns colour off even without ``--no-color``.
    """
    from pokedex.cache import TTLCache
    from pokedex.client import PokeAPIClient
    from pokedex.config import resolve_config
    from pokedex.output import OutputManager, debug, get_output, set_output
    from pokedex.repl import Session, run_repl

    config = resolve_config(cli_base_url=cli_base_url, cli_ttl=cli_ttl)
    current = get_output()
    if config.output.no_color and not current.no_color:
        set_output(
            OutputManager(no_color=True, quiet=current.is_quiet, verbose=current.is_verbose)
        )
        configure_logging(current.is_verbose, no_color=True)
    debug(f"Using {config.base_url} with a {config.cache.ttl_seconds}s cache")

    with TTLCache(
        config.cache.ttl_seconds,
        sweep_interval=config.cache.sweep_interval_seconds,
        check_on_read=config.cache.check_on_read,
    ) as cache, PokeAPIClient(
        cache, base_url=config.base_url, request=config.request
    ) as client:
        run_repl(Session(client=client))


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from pokedex.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``pokedex`` console script.

    :class:`~pokedex.exceptions.PokedexError` instances that escape the
    REPL (e.g. an invalid config file) cause a clean exit with the error's
    ``exit_code``. All other exceptions produce a crash log and a generic
    failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from pokedex.exceptions import PokedexError
        from pokedex.output import error

        if isinstance(exc, PokedexError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
