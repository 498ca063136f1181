from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, Field, StrictInt, model_validator

CODE_LENGTH = 4


class SessionPhase(StrEnum):
    idle = "idle"
    playing = "playing"
    closed = "closed"


class CreateGameResponse(BaseModel):
    # The server answers in camelCase, but snake_case is accepted too.
    game_id: str = Field(..., min_length=1, validation_alias=AliasChoices("gameId", "game_id"))


class GuessRequest(BaseModel):
    game_id: str
    guess: str


class GuessResponse(BaseModel):
    # "4" or 4.0 from the server is a malformed reply, not a count.
    black: StrictInt = Field(..., ge=0, le=CODE_LENGTH)
    white: StrictInt = Field(..., ge=0, le=CODE_LENGTH)

    @model_validator(mode="after")
    def _check_peg_total(self) -> GuessResponse:
        if self.black + self.white > CODE_LENGTH:
            raise ValueError(f"black + white must not exceed {CODE_LENGTH}")
        return self

    @property
    def is_win(self) -> bool:
        return self.black == CODE_LENGTH


class ErrorResponse(BaseModel):
    error: str
