from __future__ import annotations

import os
from pathlib import Path  # noqa: TC003

import pytest

from graphrecon.config import storage


def test_get_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("GRAPHRECON_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()


@pytest.mark.skipif(os.name == "nt", reason="XDG_DATA_HOME is not used on Windows")
def test_get_storage_config_falls_back_to_xdg_data_home(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("GRAPHRECON_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    config = storage.get_storage_config()

    assert config.data_dir == (tmp_path / "xdg" / storage.APP_DIR_NAME).resolve()


def test_http_cache_path_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GRAPHRECON_DATA_DIR", str(tmp_path / "data-dir"))

    path = storage.get_storage_config().http_cache_path()

    assert path == (tmp_path / "data-dir" / storage.HTTP_CACHE_FILENAME).resolve()
    assert path.parent.exists()
