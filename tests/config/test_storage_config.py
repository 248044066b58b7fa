from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from bulkgraph.config import storage


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("BULKGRAPH_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert storage.get_database_config().uri == "sqlite:///override.db"


def test_database_config_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("BULKGRAPH_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_database_config().uri

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("BULKGRAPH_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = storage.get_storage_config()

    assert config.data_dir == (tmp_path / storage.APP_DIR_NAME).resolve()


def test_blank_database_uri_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("DATABASE_URI", "  ")
    config = storage.StorageConfig(data_dir=tmp_path / "graphs", database_filename="g.db")

    uri = storage.get_database_config(storage=config).uri

    assert uri == f"sqlite+pysqlite:///{(tmp_path / 'graphs' / 'g.db').resolve()}"


def test_database_path_without_ensure_leaves_disk_untouched(tmp_path: Path) -> None:
    config = storage.StorageConfig(data_dir=tmp_path / "absent")

    path = config.database_path(ensure=False)

    assert path == (tmp_path / "absent" / storage.DEFAULT_DB_FILENAME).resolve()
    assert not path.parent.exists()
