"""Common test fixtures."""

import os
from pathlib import Path

import pytest
from loguru import logger

from json_schema_diff.config import CONFIG_DIR_ENV


@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch) -> Path:
    """Point the config directory at a temp dir and drop any JSON_SCHEMA_DIFF_ settings."""
    for name in list(os.environ):
        if name.upper().startswith("JSON_SCHEMA_DIFF_"):
            monkeypatch.delenv(name)

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
    yield config_dir
    # CLI runs install sinks on streams that CliRunner closes afterwards
    logger.remove()


@pytest.fixture
def write_schema(tmp_path):
    """Write a JSON document to a file under tmp_path and return its path."""
    import json

    def _write(name: str, document) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
