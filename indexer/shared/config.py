from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

RPC_URL_PREFIX = "RPC_URL_"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


def _rpc_urls() -> dict[int, str]:
    urls = {int(chain_id): str(url) for chain_id, url in _json("RPC_URLS").items()}
    for name, value in os.environ.items():
        suffix = name[len(RPC_URL_PREFIX):]
        if name.startswith(RPC_URL_PREFIX) and suffix.isdigit() and value:
            urls[int(suffix)] = value
    return urls


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    rpc_urls: dict[int, str]
    rpc_timeout_seconds: float
    log_level: str


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        rpc_urls=_rpc_urls(),
        rpc_timeout_seconds=float(_env("RPC_TIMEOUT_SECONDS", "10")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
