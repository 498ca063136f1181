from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from mastermind_cli.api.models import CreateGameResponse, ErrorResponse, GuessRequest, GuessResponse

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class MastermindApiError(RuntimeError):
    """A remote call failed.

    `reason` is already user-presentable: it is either the server's own
    `{"error": ...}` message, the raw body prefixed with the status code, or a
    short description of the network/decoding failure.
    """

    def __init__(self, reason: str, *, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class MastermindApi(Protocol):
    """What the session controller needs from the remote game server."""

    async def create_game(self) -> CreateGameResponse:  # pragma: no cover
        ...

    async def delete_game(self, *, game_id: str) -> None:  # pragma: no cover
        ...

    async def make_guess(self, *, game_id: str, guess: str) -> GuessResponse:  # pragma: no cover
        ...


def failure_reason(response: httpx.Response) -> str:
    """Best-effort reason for a non-2xx response."""

    try:
        return ErrorResponse.model_validate_json(response.content).error
    except ValidationError:
        pass

    text = response.text
    if text:
        return f"Status {response.status_code}: {text}"
    return f"Status {response.status_code}"


def ensure_ok(response: httpx.Response) -> None:
    if not response.is_success:
        raise MastermindApiError(failure_reason(response), status_code=response.status_code)


def _decode(model: type[_ModelT], response: httpx.Response) -> _ModelT:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        logger.debug("Malformed %s body: %s", model.__name__, e)
        raise MastermindApiError("Malformed response from server", status_code=response.status_code) from e


class MastermindClient:
    """`MastermindApi` over an `httpx.AsyncClient`.

    The http client is owned by the caller (it carries base URL, timeout and
    default headers, see `mastermind_cli.infra.http_client`).
    """

    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _send(self, method: str, path: str, *, json: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await self._http.request(method, path, json=json, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %r", method, path, e)
            raise MastermindApiError(f"Request failed: {str(e) or type(e).__name__}") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)
        ensure_ok(response)
        return response

    async def create_game(self) -> CreateGameResponse:
        response = await self._send("POST", "/game")
        return _decode(CreateGameResponse, response)

    async def delete_game(self, *, game_id: str) -> None:
        await self._send("DELETE", f"/game/{quote(game_id, safe='')}")

    async def make_guess(self, *, game_id: str, guess: str) -> GuessResponse:
        body = GuessRequest(game_id=game_id, guess=guess)
        response = await self._send("POST", "/guess", json=body.model_dump())
        return _decode(GuessResponse, response)
