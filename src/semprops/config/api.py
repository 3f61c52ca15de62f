"""Configuration for the semantic property API and its backends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from semprops.domain.formatting import DEFAULT_ARTICLE_PATH
from semprops.domain.normalize import DEFAULT_NAMESPACE_PREFIXES

from .env import env_flag, env_list, optional_env_var, require_env_vars
from .errors import ConfigurationError

DEFAULT_REST_PATH: Final[str] = "/rest.php"
DEFAULT_ACTION_API_PATH: Final[str] = "/api.php"


class Backend(StrEnum):
    """Where fact sets are persisted."""

    SQLALCHEMY = "sqlalchemy"
    WIKITEXT = "wikitext"
    MEMORY = "memory"


@dataclass(frozen=True, slots=True)
class ApiConfig:
    backend: Backend = Backend.SQLALCHEMY
    namespace_prefixes: tuple[str, ...] = DEFAULT_NAMESPACE_PREFIXES
    article_path: str = DEFAULT_ARTICLE_PATH
    edit_token: str | None = None
    allow_anonymous_edits: bool = False
    undeclared_type_id: str | None = None

    @property
    def edits_enabled(self) -> bool:
        return self.edit_token is not None or self.allow_anonymous_edits


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Settings for talking to a remote wiki's REST and Action APIs."""

    base_url: str
    rest_path: str = DEFAULT_REST_PATH
    action_api_path: str = DEFAULT_ACTION_API_PATH
    username: str | None = None
    password: str | None = None
    timeout_seconds: float = 10.0


def _parse_backend(value: str | None) -> Backend:
    if value is None:
        return Backend.SQLALCHEMY
    try:
        return Backend(value.lower())
    except ValueError as exc:
        choices = ", ".join(backend.value for backend in Backend)
        raise ConfigurationError(
            f"SEMPROPS_BACKEND must be one of {choices}, got {value!r}", variable="SEMPROPS_BACKEND"
        ) from exc


def get_api_config() -> ApiConfig:
    article_path = optional_env_var("SEMPROPS_ARTICLE_PATH") or DEFAULT_ARTICLE_PATH
    if "$1" not in article_path:
        raise ConfigurationError(
            "SEMPROPS_ARTICLE_PATH must contain the $1 placeholder",
            variable="SEMPROPS_ARTICLE_PATH",
        )
    return ApiConfig(
        backend=_parse_backend(optional_env_var("SEMPROPS_BACKEND")),
        namespace_prefixes=env_list(
            "SEMPROPS_NAMESPACE_PREFIXES", default=DEFAULT_NAMESPACE_PREFIXES
        ),
        article_path=article_path,
        edit_token=optional_env_var("SEMPROPS_EDIT_TOKEN"),
        allow_anonymous_edits=env_flag("SEMPROPS_ALLOW_ANONYMOUS_EDITS"),
        undeclared_type_id=optional_env_var("SEMPROPS_UNDECLARED_TYPE"),
    )


def _credentials() -> tuple[str | None, str | None]:
    names = ("SEMPROPS_WIKI_USER", "SEMPROPS_WIKI_PASSWORD")
    if all(optional_env_var(name) is None for name in names):
        return None, None
    values = require_env_vars(names)
    return values[names[0]], values[names[1]]


def get_client_config() -> ClientConfig:
    """Remote wiki settings; a bot username and password must be given together."""

    base_url = require_env_vars(["SEMPROPS_WIKI_URL"])["SEMPROPS_WIKI_URL"]
    username, password = _credentials()
    return ClientConfig(
        base_url=base_url.rstrip("/"),
        rest_path=optional_env_var("SEMPROPS_REST_PATH") or DEFAULT_REST_PATH,
        action_api_path=optional_env_var("SEMPROPS_ACTION_API_PATH") or DEFAULT_ACTION_API_PATH,
        username=username,
        password=password,
    )
