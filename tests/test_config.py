"""Tests for environment-driven configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from eclipse_tools import config


def test_data_path_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without ECLIPSE_DATA_PATH the data directory is ./data."""
    monkeypatch.delenv('ECLIPSE_DATA_PATH', raising=False)
    assert config.get_data_path() == 'data'
    assert config.get_eclipse_file(2026) == Path('data') / 'eclipse-2026.json'


def test_data_path_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """ECLIPSE_DATA_PATH overrides the data directory."""
    monkeypatch.setenv('ECLIPSE_DATA_PATH', str(tmp_path))
    assert config.get_eclipse_file(2027) == tmp_path / 'eclipse-2027.json'


def test_max_step_km(monkeypatch: pytest.MonkeyPatch) -> None:
    """ECLIPSE_MAX_STEP_KM defaults to 20 and accepts positive numbers."""
    monkeypatch.delenv('ECLIPSE_MAX_STEP_KM', raising=False)
    assert config.get_max_step_km() == 20.0
    monkeypatch.setenv('ECLIPSE_MAX_STEP_KM', '7.5')
    assert config.get_max_step_km() == 7.5


@pytest.mark.parametrize('raw', ['abc', '0', '-3', 'nan'])
def test_max_step_km_invalid(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, raw: str
) -> None:
    """Invalid values fall back to the default with a warning."""
    monkeypatch.setenv('ECLIPSE_MAX_STEP_KM', raw)
    with caplog.at_level(logging.WARNING, logger='eclipse_tools.config'):
        assert config.get_max_step_km() == 20.0
    assert 'Invalid ECLIPSE_MAX_STEP_KM' in caplog.text
