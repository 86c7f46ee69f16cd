from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from ..core.constants import DEFAULT_HTTP_TIMEOUT
from .client import resolve_api_url

CACHE_PATH_ENV = "REGISTROS_CACHE_PATH"


@dataclass(frozen=True)
class ClientSettings:
    """Settings of the client side (workbench + sync client)."""

    api_url: str
    cache_path: Optional[str] = None
    timeout: float = DEFAULT_HTTP_TIMEOUT
    username: Optional[str] = None
    password_hash: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, *, hostname: Optional[str] = None) -> "ClientSettings":
        if env is None:
            load_dotenv(override=False)
            env = os.environ
        return cls(
            api_url=resolve_api_url(env, hostname),
            cache_path=(env.get(CACHE_PATH_ENV) or None),
            timeout=float(env.get("REGISTROS_HTTP_TIMEOUT") or DEFAULT_HTTP_TIMEOUT),
            username=env.get("APP_USERNAME") or None,
            password_hash=env.get("APP_PASSWORD_HASH") or None,
            password=env.get("APP_PASSWORD") or None,
        )
