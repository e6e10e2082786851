from __future__ import annotations

import dataclasses

import pytest

from particle_cloud.domain.entities.results import (
    CompileResult,
    FlashOptions,
    FlashResult,
)


def test_flash_options_default_to_source_files() -> None:
    assert FlashOptions().binary is False


def test_failed_mirrors_ok() -> None:
    assert FlashResult(ok=True).failed is False
    assert FlashResult(ok=False, errors="app.ino:3: error").failed is True
    assert CompileResult(ok=False, errors="boom").failed is True


def test_results_are_immutable() -> None:
    result = CompileResult(ok=True, binary_id="abc")
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.ok = False  # type: ignore[misc]
