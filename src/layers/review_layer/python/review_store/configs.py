import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from review_store.errors import ConfigError

DEFAULT_PATH = "data/reviews.json"
DEFAULT_BRANCH = "main"
DEFAULT_API_URL = "https://api.github.com"

_REQUIRED_STORE_VARS = {"owner": "GH_OWNER", "repo": "GH_REPO", "token": "GH_TOKEN"}


class AppConfig(BaseModel):
    """Process-wide settings, read once from the environment."""

    model_config = ConfigDict(frozen=True)

    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: str = DEFAULT_BRANCH
    token: Optional[SecretStr] = None
    api_url: str = DEFAULT_API_URL
    path: str = DEFAULT_PATH
    admin_pin: SecretStr = SecretStr("")
    allowed_origins: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("owner", "repo", "token", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            return tuple(s.strip() for s in v.split(",") if s.strip())
        return v

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def require_store(self) -> "AppConfig":
        missing = [
            env_name
            for field, env_name in _REQUIRED_STORE_VARS.items()
            if getattr(self, field) is None
        ]
        if missing:
            raise ConfigError(
                f"Missing environment variables: {', '.join(missing)}"
            )
        return self


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    env = os.environ if environ is None else environ
    return AppConfig(
        owner=env.get("GH_OWNER"),
        repo=env.get("GH_REPO"),
        branch=env.get("GH_BRANCH") or DEFAULT_BRANCH,
        token=env.get("GH_TOKEN"),
        api_url=env.get("GH_API_URL") or DEFAULT_API_URL,
        path=env.get("REVIEWS_PATH") or DEFAULT_PATH,
        admin_pin=env.get("ADMIN_PIN", ""),
        allowed_origins=env.get("ALLOWED_ORIGINS", ""),
    )


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_config()
