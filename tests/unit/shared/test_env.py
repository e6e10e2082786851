from __future__ import annotations

import logging
import os

import pytest

from particle_cloud.shared.env import load_secret_file_variables


def _unset(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    # setenv first so monkeypatch also removes whatever the loader writes.
    monkeypatch.setenv(key, "placeholder")
    monkeypatch.delenv(key)


def test_access_token_is_read_from_secret_file(tmp_path, monkeypatch):
    secret_file = tmp_path / "particle_token"
    secret_file.write_text("abc123\n", encoding="utf-8")

    monkeypatch.setenv("PARTICLE_ACCESS_TOKEN_FILE", str(secret_file))
    _unset(monkeypatch, "PARTICLE_ACCESS_TOKEN")

    load_secret_file_variables()

    assert os.environ["PARTICLE_ACCESS_TOKEN"] == "abc123"


def test_custom_suffix(tmp_path, monkeypatch):
    secret_file = tmp_path / "token"
    secret_file.write_text("xyz", encoding="utf-8")

    monkeypatch.setenv("CUSTOM_TOKEN_PATH", str(secret_file))
    _unset(monkeypatch, "CUSTOM_TOKEN")

    load_secret_file_variables(suffix="_PATH")

    assert os.environ["CUSTOM_TOKEN"] == "xyz"


def test_missing_file_is_logged(monkeypatch, caplog):
    monkeypatch.setenv("MISSING_SECRET_FILE", "/tmp/does-not-exist")
    _unset(monkeypatch, "MISSING_SECRET")

    with caplog.at_level(logging.WARNING):
        load_secret_file_variables()

    assert any(record.message == "env.secret_file.missing" for record in caplog.records)
    assert "MISSING_SECRET" not in os.environ


def test_undecodable_file_is_logged(tmp_path, monkeypatch, caplog):
    binary_file = tmp_path / "binary.bin"
    binary_file.write_bytes(b"\xff\xfe\xfd")

    monkeypatch.setenv("BINARY_SECRET_FILE", str(binary_file))
    _unset(monkeypatch, "BINARY_SECRET")

    with caplog.at_level(logging.WARNING):
        load_secret_file_variables()

    assert any(
        record.message == "env.secret_file.decode_failed" for record in caplog.records
    )


def test_os_error_is_logged(monkeypatch, caplog):
    def _raise_os_error(self, *args, **kwargs):
        raise OSError("permission denied")

    monkeypatch.setenv("BROKEN_SECRET_FILE", "/tmp/any")
    _unset(monkeypatch, "BROKEN_SECRET")
    monkeypatch.setattr(
        "particle_cloud.shared.env.Path.read_text", _raise_os_error, raising=False
    )

    with caplog.at_level(logging.WARNING):
        load_secret_file_variables()

    assert any(
        record.message == "env.secret_file.load_failed" for record in caplog.records
    )


def test_existing_variable_wins(monkeypatch):
    monkeypatch.setenv("EXISTING_SECRET", "present")
    monkeypatch.setenv("EXISTING_SECRET_FILE", "/tmp/ignored")

    load_secret_file_variables()

    assert os.environ["EXISTING_SECRET"] == "present"


def test_empty_path_is_skipped(monkeypatch):
    _unset(monkeypatch, "EMPTY_SECRET")
    monkeypatch.setenv("EMPTY_SECRET_FILE", "")

    load_secret_file_variables()

    assert "EMPTY_SECRET" not in os.environ
