"""Tests for eclipse-tools command-line subcommands."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from eclipse_tools.cli import main as cli_main


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, 'argv', ['eclipse-tools', *argv])
    return cli_main.main()


def test_totality_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """totality prints the result as JSON using the embedded elements."""
    rc = _run(monkeypatch, 'totality', '43.36', '-5.85')
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert data['inTotality'] is True
    assert data['start'].startswith('2026-08-12T18:')


def test_totality_outside(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A location outside the path reports its magnitude."""
    rc = _run(monkeypatch, 'totality', '51.5', '-0.13')
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert data['inTotality'] is False
    assert 0 < data['magnitude'] < 1


def test_totality_year(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    eclipse_file: Path,
) -> None:
    """--year loads elements from ECLIPSE_DATA_PATH."""
    monkeypatch.setenv('ECLIPSE_DATA_PATH', str(eclipse_file.parent))
    rc = _run(monkeypatch, 'totality', '--year', '2026', '43.36', '-5.85')
    assert rc == 0
    assert json.loads(capsys.readouterr().out)['inTotality'] is True


def test_totality_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    """Invalid input and missing files exit with status 1 and a message."""
    assert _run(monkeypatch, 'totality', 'nan', '0') == 1
    assert 'Error:' in capsys.readouterr().err
    missing = str(tmp_path / 'missing.json')
    assert _run(monkeypatch, 'totality', '--elements', missing, '43.36', '-5.85') == 1
    assert 'Error:' in capsys.readouterr().err


def test_totality_enforce_validity(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    eclipse_document: dict[str, object],
) -> None:
    """--enforce-validity fails when mid-eclipse is outside the fitted window."""
    document = json.loads(json.dumps(eclipse_document))
    document['besselianElements']['elements']['validFrom'] = 19.0
    path = tmp_path / 'narrow.json'
    path.write_text(json.dumps(document), encoding='utf-8')
    argv = ['totality', '--elements', str(path), '43.36', '-5.85']
    assert _run(monkeypatch, *argv) == 0
    capsys.readouterr()
    assert _run(monkeypatch, *argv, '--enforce-validity') == 1
    assert 'validity window' in capsys.readouterr().err


def test_path_summary(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], eclipse_file: Path
) -> None:
    """path prints sample, vertex and bounds lines, plus point containment."""
    rc = _run(
        monkeypatch, 'path', str(eclipse_file), '--max-step-km', '50', '--point', '40.35', '-4.5'
    )
    assert rc == 0
    out = capsys.readouterr().out
    assert 'Samples:   16' in out
    assert 'Area:      -27.000000' in out
    assert 'N 42.9000' in out
    assert 'In path:   yes' in out
    assert '40.35°N, 4.50°W' in out


def test_path_uses_env_step(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], eclipse_file: Path
) -> None:
    """Without --max-step-km the step comes from ECLIPSE_MAX_STEP_KM."""
    monkeypatch.setenv('ECLIPSE_MAX_STEP_KM', '1000')
    assert _run(monkeypatch, 'path', str(eclipse_file)) == 0
    assert 'Vertices:  32' in capsys.readouterr().out


def test_path_missing_file(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    """A missing path file exits with status 1."""
    assert _run(monkeypatch, 'path', str(tmp_path / 'none.json')) == 1
    assert 'Error:' in capsys.readouterr().err
