from __future__ import annotations

import logging
from collections.abc import Callable
from typing import cast

from mastermind_cli.api.client import MastermindApi, MastermindApiError
from mastermind_cli.api.models import SessionPhase
from mastermind_cli.commands import Command, CreateGame, DeleteGame, Exit, Guess, InvalidCommand
from mastermind_cli.fsm import SessionFSM, SessionState
from mastermind_cli.preconditions import PreconditionError, pipeline_for_command

logger = logging.getLogger(__name__)

EXACT_MARKER = "B"
PARTIAL_MARKER = "W"


def render_feedback(*, black: int, white: int) -> str:
    """`BBW` for two exact matches and one partial match."""

    return EXACT_MARKER * black + PARTIAL_MARKER * white


class SessionController:
    """Owns the session state and decides, per command, whether to call the server.

    Every handler reports its outcome through `report` and never raises for
    user or server errors: bad session state and failed remote calls are
    reported and the session is left as documented per command.
    """

    def __init__(self, *, api: MastermindApi, report: Callable[[str], None] = print) -> None:
        self.state = SessionState()
        self._fsm = SessionFSM(self.state)
        self._api = api
        self._report = report

    @property
    def active_game_id(self) -> str | None:
        return self.state.active_game_id

    @property
    def is_closed(self) -> bool:
        return self.state.phase is SessionPhase.closed

    def _fire(self, event: str) -> None:
        self._fsm.send(event)
        self._fsm.sync_phase_to_model()

    def _start_game(self, game_id: str) -> None:
        self._fire("game_created")
        self.state.active_game_id = game_id
        logger.info("Game %s started", game_id)

    def _end_game(self) -> None:
        game_id = self.state.active_game_id
        self.state.active_game_id = None
        self._fire("game_ended")
        logger.info("Game %s ended", game_id)

    def _check(self, command: str, *, prefix: str) -> bool:
        try:
            pipeline_for_command(command).validate(state=self.state)
        except PreconditionError as e:
            self._report(f"{prefix}: {e}")
            return False
        return True

    async def on_create_game(self) -> None:
        if not self._check("create_game", prefix="Error creating game"):
            return

        try:
            created = await self._api.create_game()
        except MastermindApiError as e:
            logger.warning("Creating a game failed: %s", e.reason)
            self._report(f"Error creating game: {e.reason}")
            return

        self._start_game(created.game_id)
        self._report(f"Created game: {created.game_id}")

    async def on_guess(self, code: str) -> None:
        if not self._check("guess", prefix="Error guessing"):
            return

        game_id = cast(str, self.state.active_game_id)
        try:
            outcome = await self._api.make_guess(game_id=game_id, guess=code)
        except MastermindApiError as e:
            logger.warning("Guess %s on game %s failed: %s", code, game_id, e.reason)
            self._report(f"Error making guess: {e.reason}")
            return

        if not outcome.is_win:
            feedback = render_feedback(black=outcome.black, white=outcome.white)
            self._report(f"Result for your guess on game {game_id}: {feedback}")
            return

        self._report(f"Result for your guess on game {game_id}: Correct guess!")
        # A won game is over for us even if the server refuses the delete.
        deleted = await self._delete(game_id)
        if not deleted:
            self._end_game()

    async def on_delete_game(self) -> None:
        if not self._check("delete_game", prefix="Error aborting"):
            return
        await self._delete(cast(str, self.state.active_game_id))

    async def _delete(self, game_id: str) -> bool:
        try:
            await self._api.delete_game(game_id=game_id)
        except MastermindApiError as e:
            logger.warning("Deleting game %s failed: %s", game_id, e.reason)
            self._report(f"Error aborting game: {e.reason}")
            return False

        self._end_game()
        self._report(f"Aborted game {game_id}")
        return True

    async def on_exit(self) -> None:
        """Best-effort cleanup, then close the session whatever the outcome."""

        if self.is_closed:
            return

        if self.state.active_game_id is not None:
            self._report("Aborting the running game..")
            await self.on_delete_game()

        if self.state.active_game_id is not None:
            logger.warning("Leaving game %s running on the server", self.state.active_game_id)
            self.state.active_game_id = None
        self._fire("shutdown")

    def on_error(self, message: str) -> None:
        self._report(f"Error: {message}")

    async def dispatch(self, command: Command) -> bool:
        """Handle one command to completion. Returns False once the session is closed."""

        if self.is_closed:
            return False

        if isinstance(command, Exit):
            await self.on_exit()
        elif isinstance(command, CreateGame):
            await self.on_create_game()
        elif isinstance(command, Guess):
            await self.on_guess(command.code)
        elif isinstance(command, DeleteGame):
            await self.on_delete_game()
        elif isinstance(command, InvalidCommand):
            self.on_error(command.message)

        return not self.is_closed
