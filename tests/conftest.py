from __future__ import annotations

from collections import Counter
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Response, status
from fastapi.responses import JSONResponse

from mastermind_cli.api.client import MastermindApiError
from mastermind_cli.api.models import CreateGameResponse, GuessRequest, GuessResponse
from mastermind_cli.session import SessionController


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's shell/.env settings out of the tests."""

    for name in ("MASTERMIND_BASE_URL", "MASTERMIND_TIMEOUT", "MASTERMIND_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def score_guess(secret: str, guess: str) -> tuple[int, int]:
    black = sum(1 for s, g in zip(secret, guess) if s == g)
    common = sum((Counter(secret) & Counter(guess)).values())
    return black, common - black


@dataclass
class FakeMastermindServer:
    """In-memory stand-in for the remote MasterMind server."""

    secret: str = "1234"
    games: dict[str, str] = field(default_factory=dict)
    refuse_deletes: bool = False


def create_fake_app(server: FakeMastermindServer) -> FastAPI:
    app = FastAPI(title="fake-mastermind")

    @app.post("/game")
    async def create_game() -> dict[str, str]:
        game_id = str(uuid4())
        server.games[game_id] = server.secret
        return {"gameId": game_id}

    @app.delete("/game/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_game(game_id: str) -> Response:
        if server.refuse_deletes:
            return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        if server.games.pop(game_id, None) is None:
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "game not found"})
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/guess")
    async def guess(payload: GuessRequest) -> Response:
        secret = server.games.get(payload.game_id)
        if secret is None:
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "game not found"})
        if len(payload.guess) != len(secret) or not payload.guess.isdigit():
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "invalid guess"})
        black, white = score_guess(secret, payload.guess)
        return JSONResponse(content={"black": black, "white": white})

    return app


@pytest.fixture()
def fake_server() -> FakeMastermindServer:
    return FakeMastermindServer()


@pytest_asyncio.fixture()
async def fake_http(fake_server: FakeMastermindServer) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=create_fake_app(fake_server))
    async with httpx.AsyncClient(transport=transport, base_url="http://mastermind.test") as client:
        yield client


@dataclass
class StubApi:
    """Scriptable `MastermindApi` that records every remote call."""

    game_id: str = "g-1"
    guess_responses: list[GuessResponse] = field(default_factory=list)
    create_error: MastermindApiError | None = None
    guess_error: MastermindApiError | None = None
    delete_error: MastermindApiError | None = None
    calls: list[tuple[str, ...]] = field(default_factory=list)

    async def create_game(self) -> CreateGameResponse:
        self.calls.append(("create_game",))
        if self.create_error is not None:
            raise self.create_error
        return CreateGameResponse(gameId=self.game_id)

    async def delete_game(self, *, game_id: str) -> None:
        self.calls.append(("delete_game", game_id))
        if self.delete_error is not None:
            raise self.delete_error

    async def make_guess(self, *, game_id: str, guess: str) -> GuessResponse:
        self.calls.append(("make_guess", game_id, guess))
        if self.guess_error is not None:
            raise self.guess_error
        return self.guess_responses.pop(0)


@pytest.fixture()
def stub_api() -> StubApi:
    return StubApi()


@pytest.fixture()
def output() -> list[str]:
    return []


@pytest.fixture()
def controller(stub_api: StubApi, output: list[str]) -> SessionController:
    return SessionController(api=stub_api, report=output.append)
