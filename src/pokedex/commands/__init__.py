"""Built-in CLI sub-commands for pokedex.

* :mod:`~pokedex.commands.config` -- view and modify global settings.

The REPL's own commands (``map``, ``explore``, ``catch``, ...) live in
:mod:`pokedex.repl`; this package holds only the non-interactive Typer
sub-applications.
"""
