from __future__ import annotations

import pytest

from semprops.config import (
    ApiConfig,
    Backend,
    ConfigurationError,
    MissingConfigurationError,
    get_api_config,
    get_client_config,
)
from semprops.domain.normalize import DEFAULT_NAMESPACE_PREFIXES

API_VARS = (
    "SEMPROPS_BACKEND",
    "SEMPROPS_NAMESPACE_PREFIXES",
    "SEMPROPS_ARTICLE_PATH",
    "SEMPROPS_EDIT_TOKEN",
    "SEMPROPS_ALLOW_ANONYMOUS_EDITS",
    "SEMPROPS_UNDECLARED_TYPE",
    "SEMPROPS_WIKI_URL",
    "SEMPROPS_REST_PATH",
    "SEMPROPS_ACTION_API_PATH",
    "SEMPROPS_WIKI_USER",
    "SEMPROPS_WIKI_PASSWORD",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in API_VARS:
        monkeypatch.delenv(name, raising=False)


def test_api_defaults() -> None:
    config = get_api_config()

    assert config == ApiConfig()
    assert config.backend is Backend.SQLALCHEMY
    assert config.namespace_prefixes == DEFAULT_NAMESPACE_PREFIXES
    assert config.article_path == "/wiki/$1"
    assert not config.edits_enabled


def test_api_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMPROPS_BACKEND", "Wikitext")
    monkeypatch.setenv("SEMPROPS_NAMESPACE_PREFIXES", "Eigenschaft:,Property:")
    monkeypatch.setenv("SEMPROPS_ARTICLE_PATH", "https://wiki.example.org/index.php?title=$1")
    monkeypatch.setenv("SEMPROPS_EDIT_TOKEN", "s3cret")
    monkeypatch.setenv("SEMPROPS_UNDECLARED_TYPE", "_txt")

    config = get_api_config()

    assert config.backend is Backend.WIKITEXT
    assert config.namespace_prefixes == ("Eigenschaft:", "Property:")
    assert config.article_path.endswith("title=$1")
    assert config.edit_token == "s3cret"
    assert config.undeclared_type_id == "_txt"
    assert config.edits_enabled


def test_anonymous_edits_enable_writes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMPROPS_ALLOW_ANONYMOUS_EDITS", "yes")

    assert get_api_config().edits_enabled


def test_invalid_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMPROPS_BACKEND", "mongo")

    with pytest.raises(ConfigurationError, match="mongo") as exc:
        get_api_config()

    assert exc.value.variable == "SEMPROPS_BACKEND"


def test_article_path_needs_placeholder(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMPROPS_ARTICLE_PATH", "/wiki/")

    with pytest.raises(ConfigurationError, match=r"\$1"):
        get_api_config()


def test_client_config_requires_wiki_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SEMPROPS_WIKI_URL", raising=False)

    with pytest.raises(MissingConfigurationError, match="SEMPROPS_WIKI_URL"):
        get_client_config()


def test_client_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMPROPS_WIKI_URL", "https://wiki.example.org/")
    monkeypatch.setenv("SEMPROPS_REST_PATH", "/w/rest.php")
    monkeypatch.setenv("SEMPROPS_WIKI_USER", "Bot@semprops")
    monkeypatch.setenv("SEMPROPS_WIKI_PASSWORD", "secret")

    config = get_client_config()

    assert config.base_url == "https://wiki.example.org"
    assert config.rest_path == "/w/rest.php"
    assert config.action_api_path == "/api.php"
    assert config.username == "Bot@semprops"
    assert config.password == "secret"


def test_client_credentials_come_in_pairs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMPROPS_WIKI_URL", "https://wiki.example.org")
    monkeypatch.setenv("SEMPROPS_WIKI_USER", "Bot@semprops")
    monkeypatch.delenv("SEMPROPS_WIKI_PASSWORD", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        get_client_config()

    assert exc.value.variables == ("SEMPROPS_WIKI_PASSWORD",)


def test_client_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEMPROPS_WIKI_URL", "https://wiki.example.org")
    monkeypatch.delenv("SEMPROPS_WIKI_USER", raising=False)
    monkeypatch.setenv("SEMPROPS_WIKI_PASSWORD", " ")

    config = get_client_config()

    assert (config.username, config.password) == (None, None)
