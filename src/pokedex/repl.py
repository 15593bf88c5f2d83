"""Interactive read-eval-print loop and its command registry.

Each REPL command is a plain function taking the :class:`Session` and the
remaining words of the input line. Commands are registered with the
:func:`command` decorator into :data:`COMMANDS`, which also drives the
``help`` text. A command signals failure by raising a
:class:`~pokedex.exceptions.PokedexError`; the loop prints the message and
reads the next line.

Session state (paging links, caught Pokemon) lives only for the lifetime
of the process.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from pokedex.catch import attempt_catch
from pokedex.client import PokeAPIClient
from pokedex.exceptions import InvalidUsageError, PokedexError
from pokedex.models import Pokemon
from pokedex.output import error, print_data, print_table

PROMPT = "Pokedex > "


@dataclass
class Session:
    """Mutable state shared by every command in one REPL run."""

    client: PokeAPIClient
    next_url: Optional[str] = None
    prev_url: Optional[str] = None
    has_paged: bool = False
    pokedex: dict[str, Pokemon] = field(default_factory=dict)
    rng: random.Random = field(default_factory=random.Random)
    running: bool = True


CommandCallback = Callable[[Session, list[str]], None]


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    callback: CommandCallback
    usage: str = ""


COMMANDS: dict[str, Command] = {}


def command(name: str, description: str, usage: str = "") -> Callable[[CommandCallback], CommandCallback]:
    """Register the decorated function as the REPL command *name*."""

    def decorator(func: CommandCallback) -> CommandCallback:
        COMMANDS[name] = Command(name=name, description=description, callback=func, usage=usage)
        return func

    return decorator


def clean_input(text: str) -> list[str]:
    """Lower-case *text* and split it on whitespace."""
    return text.lower().split()


def _single_argument(args: list[str], what: str) -> str:
    if len(args) != 1:
        raise InvalidUsageError(f"you must provide a {what}")
    return args[0]


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@command("help", "Displays a help message")
def command_help(session: Session, args: list[str]) -> None:
    print_data("Welcome to the Pokedex!")
    print_data("Usage:")
    print_data("")
    for cmd in COMMANDS.values():
        label = f"{cmd.name} {cmd.usage}".rstrip()
        print_data(f"{label}: {cmd.description}")
    print_data("")


@command("exit", "Exit the Pokedex")
def command_exit(session: Session, args: list[str]) -> None:
    print_data("Closing the Pokedex... Goodbye!")
    session.running = False


@command("map", "Displays the next 20 location areas (stops at the last page)")
def command_map(session: Session, args: list[str]) -> None:
    """Show the next page of location areas.

    Past the final page this reports an error rather than wrapping back to
    the first page; use ``mapb`` to walk backwards.
    """
    if session.has_paged and session.next_url is None:
        raise PokedexError("You are on the last page")
    _show_page(session, session.next_url)


@command("mapb", "Displays the previous 20 location areas")
def command_mapb(session: Session, args: list[str]) -> None:
    if session.prev_url is None:
        raise PokedexError("You are already at the first page")
    _show_page(session, session.prev_url)


def _show_page(session: Session, url: Optional[str]) -> None:
    page = session.client.list_location_areas(url)
    session.next_url = page.next
    session.prev_url = page.previous
    session.has_paged = True
    for area in page.results:
        print_data(area.name)


@command("explore", "Lists the pokemon in a given location area", usage="<location_area>")
def command_explore(session: Session, args: list[str]) -> None:
    name = _single_argument(args, "location area name")
    details = session.client.get_location_area(name)
    print_data(f"Exploring {name}...")
    print_data("Found Pokemon:")
    for encounter in details.pokemon_encounters:
        print_data(f" - {encounter.pokemon.name}")


@command("catch", "Attempt to catch a pokemon and add it to your pokedex", usage="<pokemon>")
def command_catch(session: Session, args: list[str]) -> None:
    name = _single_argument(args, "pokemon name")
    pokemon = session.client.get_pokemon(name)
    print_data(f"Throwing a Pokeball at {name}...")
    if attempt_catch(pokemon.base_experience, session.rng):
        print_data(f"{name} was caught!")
        session.pokedex[name] = pokemon
    else:
        print_data(f"{name} escaped!")


@command("inspect", "Show details of a pokemon you have caught", usage="<pokemon>")
def command_inspect(session: Session, args: list[str]) -> None:
    name = _single_argument(args, "pokemon name")
    pokemon = session.pokedex.get(name)
    if pokemon is None:
        raise PokedexError("you have not caught that pokemon")
    print_data(f"Name: {pokemon.name}")
    print_data(f"Height: {pokemon.height}")
    print_data(f"Weight: {pokemon.weight}")
    print_data("Stats:")
    for stat in pokemon.stats:
        print_data(f"  -{stat.stat.name}: {stat.base_stat}")
    print_data("Types:")
    for ptype in sorted(pokemon.types, key=lambda t: t.slot):
        print_data(f"  - {ptype.type.name}")


@command("pokedex", "List the pokemon you have caught")
def command_pokedex(session: Session, args: list[str]) -> None:
    if not session.pokedex:
        print_data("Your Pokedex is empty")
        return
    print_data("Your Pokedex:")
    for name in session.pokedex:
        print_data(f" - {name}")


@command("cache", "Show response cache statistics")
def command_cache(session: Session, args: list[str]) -> None:
    stats = session.client.cache.stats()
    print_table(["key", "value"], [[k, str(v)] for k, v in stats.items()], title="Cache")


# ------------------------------------------------------------------ #
# Loop
# ------------------------------------------------------------------ #


def run_repl(session: Session, read_line: Callable[[str], str] = input) -> None:
    """Read commands until ``exit`` or end of input.

    Args:
        session: State shared across commands.
        read_line: Prompting line reader; :func:`input` by default.
    """
    while session.running:
        try:
            line = read_line(PROMPT)
        except EOFError:
            print_data("")
            break

        words = clean_input(line)
        if not words:
            continue

        cmd = COMMANDS.get(words[0])
        if cmd is None:
            print_data("Unknown command")
            continue

        try:
            cmd.callback(session, words[1:])
        except PokedexError as exc:
            error(str(exc))
