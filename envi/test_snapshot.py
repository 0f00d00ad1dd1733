"""
Tests for snapshot sources
"""

import os
from dataclasses import dataclass
from typing import Annotated

import pytest

from envi import Env, load_config
from envi.snapshot import dotenv_snapshot, environ_snapshot, mapping_snapshot


@dataclass
class DbConfig:
    url: Annotated[str, Env("ENVI_TEST_DB_URL")]
    pool: Annotated[int, Env("ENVI_TEST_DB_POOL")] = 5


def test_mapping_snapshot_is_a_frozen_copy():
    source = {"A": "1"}
    snapshot = mapping_snapshot(source)
    source["A"] = "2"
    assert snapshot["A"] == "1"
    with pytest.raises(TypeError):
        snapshot["A"] = "3"


def test_environ_snapshot(monkeypatch):
    monkeypatch.setenv("ENVI_TEST_DB_URL", "postgres://env")
    snapshot = environ_snapshot()
    monkeypatch.setenv("ENVI_TEST_DB_URL", "postgres://later")
    assert snapshot["ENVI_TEST_DB_URL"] == "postgres://env"


def test_dotenv_snapshot_process_env_wins(tmp_path, monkeypatch):
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text("ENVI_TEST_DB_URL=postgres://file\nENVI_TEST_DB_POOL=10\nENVI_TEST_BARE\n")
    monkeypatch.setenv("ENVI_TEST_DB_URL", "postgres://env")
    monkeypatch.delenv("ENVI_TEST_DB_POOL", raising=False)

    snapshot = dotenv_snapshot(dotenv_file)
    assert snapshot["ENVI_TEST_DB_URL"] == "postgres://env"
    assert snapshot["ENVI_TEST_DB_POOL"] == "10"
    assert "ENVI_TEST_BARE" not in snapshot

    cfg = load_config(DbConfig, snapshot)
    assert cfg == DbConfig(url="postgres://env", pool=10)


def test_dotenv_snapshot_override(tmp_path, monkeypatch):
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text("ENVI_TEST_DB_URL=postgres://file\n")
    monkeypatch.setenv("ENVI_TEST_DB_URL", "postgres://env")

    snapshot = dotenv_snapshot(dotenv_file, override=True)
    assert snapshot["ENVI_TEST_DB_URL"] == "postgres://file"


def test_dotenv_snapshot_does_not_touch_environ(tmp_path, monkeypatch):
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text("ENVI_TEST_ONLY_IN_FILE=1\n")
    monkeypatch.delenv("ENVI_TEST_ONLY_IN_FILE", raising=False)

    snapshot = dotenv_snapshot(dotenv_file)
    assert snapshot["ENVI_TEST_ONLY_IN_FILE"] == "1"
    assert "ENVI_TEST_ONLY_IN_FILE" not in os.environ


def test_dotenv_snapshot_finds_file_from_cwd(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("ENVI_TEST_DB_URL=postgres://found\n")
    monkeypatch.delenv("ENVI_TEST_DB_URL", raising=False)
    monkeypatch.chdir(tmp_path)

    assert dotenv_snapshot()["ENVI_TEST_DB_URL"] == "postgres://found"
