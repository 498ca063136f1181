"""Free-form input line -> typed command.

Parsing never raises: anything unusable becomes an `InvalidCommand` carrying
the reason to show the user.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Runs of separators/whitespace collapse to a single space: "create_game",
# "create-game" and "create   game" are the same command.
_SEPARATORS_RE = re.compile(r"[\s_-]+")
_GUESS_RE = re.compile(r"[0-9]{4}")


@dataclass(frozen=True, slots=True)
class Exit:
    pass


@dataclass(frozen=True, slots=True)
class Guess:
    code: str


@dataclass(frozen=True, slots=True)
class CreateGame:
    pass


@dataclass(frozen=True, slots=True)
class DeleteGame:
    """Delete the running game. Also spelled "abort game"."""


@dataclass(frozen=True, slots=True)
class InvalidCommand:
    message: str


Command = Exit | Guess | CreateGame | DeleteGame | InvalidCommand


def parse_command(raw: str | None) -> Command:
    text = raw.strip() if raw is not None else ""
    if not text:
        return InvalidCommand("Empty input")

    normalized = _SEPARATORS_RE.sub(" ", text)
    if normalized.lower() == "exit":
        return Exit()

    tokens = [t.lower() for t in normalized.split(" ") if t]
    if not tokens:
        return InvalidCommand("Empty input")

    if tokens[0] == "guess":
        if len(tokens) != 2:
            return InvalidCommand("Usage: guess <4 digits> format not conformed")
        if _GUESS_RE.fullmatch(tokens[1]) is None:
            return InvalidCommand("Guess must be 4 digits")
        return Guess(tokens[1])

    # Trailing words after "<verb> game" are ignored.
    if len(tokens) >= 2 and tokens[0] == "create" and tokens[1] == "game":
        return CreateGame()

    if len(tokens) >= 2 and tokens[0] in {"delete", "abort"} and tokens[1] == "game":
        return DeleteGame()

    return InvalidCommand("Unknown command")
