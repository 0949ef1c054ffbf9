"""Test :mod:`mpsparse.cli`."""

# ruff: noqa: S101

from pathlib import Path

import pytest

from mpsparse.cli import main


@pytest.fixture
def problem(tmp_path: Path) -> Path:
    """Small problem written to disk."""
    path = tmp_path / "small.mps"
    path.write_text(
        "NAME small\nROWS\n N  obj\n L  lim\nCOLUMNS\n    x  obj  1  lim  1\n"
        "RHS\n    rhs  lim  4\nBOUNDS\n UP bnd  x  3\nENDATA\n",
        encoding="utf-8",
    )
    return path


def test_summary(problem: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Sections present in the file are listed."""
    assert main([str(problem)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[:3] == ["NAME small", "ROWS 2", "COLUMNS 1 lines, 1 columns"]
    assert "RHS 1" in out
    assert "BOUNDS 1" in out
    assert not any(line.startswith("RANGES") for line in out)


def test_model(problem: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``--model`` adds model sizes."""
    assert main([str(problem), "--model", "--located"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert "coefficients 2" in out
    assert "bound entries 1" in out


def test_parse_error(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Malformed files exit with status 1."""
    path = tmp_path / "bad.mps"
    path.write_text("NAME bad\nROWS\n Q  r\nENDATA\n", encoding="utf-8")
    assert main([str(path)]) == 1
    assert "invalid row type" in caplog.text


def test_model_error(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Model errors are only reported with ``--model``."""
    path = tmp_path / "dangling.mps"
    path.write_text(
        "NAME d\nROWS\n N  obj\nCOLUMNS\n    x  nowhere  1\nENDATA\n", encoding="utf-8"
    )
    assert main([str(path)]) == 0
    assert main([str(path), "--model"]) == 1
    assert "referenced row of unspecified type: nowhere" in caplog.text


def test_missing_file(tmp_path: Path) -> None:
    """Unreadable paths exit with status 1."""
    assert main([str(tmp_path / "missing.mps")]) == 1
