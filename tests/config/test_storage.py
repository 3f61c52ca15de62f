from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from semprops.config import StorageConfig, get_database_config, get_storage_config
from semprops.config.storage import DEFAULT_DB_FILENAME


def test_storage_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("SEMPROPS_DATA_DIR", str(custom))
    monkeypatch.setenv("SEMPROPS_DATABASE_FILE", "wiki.db")
    monkeypatch.delenv("SEMPROPS_PAGES_DIR", raising=False)

    result = get_storage_config()

    assert result.database_path() == custom.resolve() / "wiki.db"
    assert result.pages_dir(ensure=False) == custom.resolve() / "pages"


def test_pages_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SEMPROPS_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SEMPROPS_PAGES_DIR", str(tmp_path / "wiki-export"))

    pages = get_storage_config().pages_dir()

    assert pages == (tmp_path / "wiki-export").resolve()
    assert pages.is_dir()
    assert not (tmp_path / "data").exists()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_uri_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    storage = StorageConfig(data_dir=tmp_path / "data-dir")

    uri = get_database_config(storage=storage).uri

    expected_path = (tmp_path / "data-dir" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_pages_dir_is_created(tmp_path: Path) -> None:
    storage = StorageConfig(data_dir=tmp_path)

    pages = storage.pages_dir()

    assert pages == tmp_path.resolve() / "pages"
    assert pages.is_dir()
    assert storage.pages_dir(ensure=False) == pages
