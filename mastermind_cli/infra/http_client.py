from __future__ import annotations

import math
import os
from dataclasses import dataclass

import httpx

DEFAULT_BASE_URL = "https://mastermind.darkube.app"


@dataclass(frozen=True, slots=True)
class ClientSettings:
    base_url: str
    # None => httpx's own default timeout.
    timeout: float | None = None


def settings_from_env() -> ClientSettings:
    base_url = os.environ.get("MASTERMIND_BASE_URL", "").strip() or DEFAULT_BASE_URL

    raw_timeout = os.environ.get("MASTERMIND_TIMEOUT", "").strip()
    timeout: float | None = None
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise RuntimeError(f"MASTERMIND_TIMEOUT must be a number of seconds, got {raw_timeout!r}") from e
        if not math.isfinite(timeout) or timeout <= 0:
            raise RuntimeError("MASTERMIND_TIMEOUT must be a positive, finite number of seconds")

    return ClientSettings(base_url=base_url.rstrip("/"), timeout=timeout)


def create_http_client(settings: ClientSettings) -> httpx.AsyncClient:
    if settings.timeout is None:
        return httpx.AsyncClient(base_url=settings.base_url)
    return httpx.AsyncClient(base_url=settings.base_url, timeout=settings.timeout)
