"""Configuration loaded once at startup from a ``key=value`` file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, SecretStr, model_validator

from maestro.sources.presence import presence_url_from_endpoint

# Maps keys of the environment file onto MaestroConfig fields.
ENV_KEYS: dict[str, str] = {
    "URL": "url",
    "ROOM": "room",
    "USER": "user",
    "PASS": "password",
    "OPENAI_KEY": "openai_key",
    "OPENAI_BASE_URL": "openai_base_url",
    "MODEL": "model",
    "PRESENCE_URL": "presence_url",
    "POLL_INTERVAL": "poll_interval",
    "MAX_BACKLOG": "max_backlog",
    "MAX_FALLBACK_DRAWS": "max_fallback_draws",
    "SERIALIZE_RESOLUTION": "serialize_resolution",
}


def load_env_file(path: str | Path) -> dict[str, str]:
    """Read ``KEY=value`` lines.

    Blank lines and ``#`` comments are skipped. Everything after the first
    ``=`` is the value, so values may themselves contain ``=``.
    """
    values: dict[str, str] = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = value
    return values


class MaestroConfig(BaseModel):
    """Everything needed to join a room and route its conversation.

    Attributes:
        url: Chat server endpoint.
        room: Room identifier.
        user: Account the engine logs in with; also excluded from routing.
        password: Password for ``user``.
        openai_key: API key for the oracle.
        presence_url: Presence endpoint. Derived from ``url`` when unset.
    """

    url: str
    room: str
    user: str
    password: SecretStr
    openai_key: SecretStr
    openai_base_url: str | None = None
    model: str = "gpt-4o-mini"
    presence_url: str | None = None
    poll_interval: float = Field(default=15.0, gt=0)
    max_backlog: int = Field(default=10, ge=1)
    max_fallback_draws: int = Field(default=5, ge=0)
    serialize_resolution: bool = False

    @model_validator(mode="after")
    def _default_presence_url(self) -> MaestroConfig:
        if not self.presence_url:
            self.presence_url = presence_url_from_endpoint(self.url)
        return self

    @classmethod
    def from_env(cls, env: dict[str, str]) -> MaestroConfig:
        """Build a config from parsed environment-file values.

        Unknown keys are ignored; empty optional values fall back to their
        defaults.
        """
        data: dict[str, Any] = {}
        for key, field in ENV_KEYS.items():
            value = env.get(key)
            if value is None:
                continue
            if value == "" and field != "password":
                continue
            data[field] = value
        return cls.model_validate(data)

    @classmethod
    def from_env_file(cls, path: str | Path) -> MaestroConfig:
        return cls.from_env(load_env_file(path))
