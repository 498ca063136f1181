"""Session preconditions checked before any remote call is made.

A failing validator raises `PreconditionError`; the controller reports it and
leaves the session untouched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from mastermind_cli.fsm import SessionState


class PreconditionError(ValueError):
    pass


class CommandValidator(ABC):
    @abstractmethod
    def validate(self, *, state: SessionState) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class NoActiveGameValidator(CommandValidator):
    """At most one remote game per session."""

    def validate(self, *, state: SessionState) -> None:
        if state.active_game_id is not None:
            raise PreconditionError(f"a game is already running (id: {state.active_game_id})")


@dataclass(frozen=True, slots=True)
class ActiveGameValidator(CommandValidator):
    def validate(self, *, state: SessionState) -> None:
        if state.active_game_id is None:
            raise PreconditionError("no game is currently running!")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[CommandValidator, ...]

    def validate(self, *, state: SessionState) -> None:
        for v in self.validators:
            v.validate(state=state)


DEFAULT_COMMAND_PIPELINES: dict[str, ValidatorPipeline] = {
    "create_game": ValidatorPipeline(validators=(NoActiveGameValidator(),)),
    "guess": ValidatorPipeline(validators=(ActiveGameValidator(),)),
    "delete_game": ValidatorPipeline(validators=(ActiveGameValidator(),)),
}


def pipeline_for_command(command: str) -> ValidatorPipeline:
    pipe = DEFAULT_COMMAND_PIPELINES.get(command)
    if pipe is None:
        raise ValueError(f"Unknown command: {command}")
    return pipe
