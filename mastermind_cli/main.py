from __future__ import annotations

import asyncio
import io
import logging
import os
import sys
from collections.abc import Callable

from dotenv import load_dotenv

from mastermind_cli.api.client import MastermindClient
from mastermind_cli.commands import CreateGame, DeleteGame, Exit, Guess, parse_command
from mastermind_cli.infra.http_client import create_http_client, settings_from_env
from mastermind_cli.session import SessionController

logger = logging.getLogger(__name__)

GUIDELINES = """\
Welcome to the Master Mind Game!
below is a guideline, so you can use the program easily:
--GAME RULES:
In this game, the api chooses a 4 digit number for you, and you will try to guess it!
The result of each guess comes in the format of some Ws printed, and some Bs.
The sequence of Ws represent the Number of correct digits, but in a wrong place.
The sequence of Bs represent the Number of correct digits, in the correct place.

--COMMANDS:
-> you can exit the app at any time with the command: "exit".
-> you can create a new game with the command: "create game".
-> you can send your guess to the api with the command: "guess <some 4-digit number>".
-> you can abort the running game with the command: "delete game", so you can play a new game.
Have Fun!"""

# Printed before the command is handled.
_NOTICES: dict[type, str] = {
    Exit: "Exiting the program..",
    CreateGame: "Creating a new game..",
    Guess: "Handling your guess..",
    DeleteGame: "Trying to abort the running game..",
}


def configure_logging() -> None:
    # stderr keeps log records apart from the game output on stdout.
    level = os.environ.get("MASTERMIND_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    if not isinstance(logging.getLevelName(level), int):
        raise RuntimeError(f"Unknown MASTERMIND_LOG_LEVEL: {level}")
    logging.basicConfig(level=level, stream=sys.stderr)


def configure_stdin() -> None:
    # Undecodable bytes become U+FFFD and parse as an unknown command.
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(errors="replace")


def read_stdin_line() -> str | None:
    try:
        return input()
    except EOFError:
        return None


async def run_cli(
    *,
    controller: SessionController,
    read_line: Callable[[], str | None] = read_stdin_line,
    write: Callable[[str], None] = print,
) -> None:
    """Read, parse and dispatch one line at a time until exit or end of input."""

    while True:
        line = await asyncio.to_thread(read_line)
        # End of input behaves exactly like "exit".
        command = Exit() if line is None else parse_command(line)

        notice = _NOTICES.get(type(command))
        if notice is not None:
            write(notice)

        if not await controller.dispatch(command):
            return


async def _run() -> None:
    settings = settings_from_env()
    logger.debug("Using MasterMind server at %s", settings.base_url)

    async with create_http_client(settings) as http:
        controller = SessionController(api=MastermindClient(http=http))
        print(GUIDELINES)
        await run_cli(controller=controller)


def main() -> None:
    load_dotenv(override=False)
    configure_logging()
    configure_stdin()
    asyncio.run(_run())


if __name__ == "__main__":
    main()
