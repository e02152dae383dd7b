import sys
from pathlib import Path

import pytest

from chromelaunch.executable import (
    CANDIDATE_NAMES,
    ExecutableNotFound,
    default_executable,
)


def _make_executable(directory: Path, name: str) -> Path:
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir))
    monkeypatch.delenv("CHROME", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    return bin_dir


def test_env_var_wins_when_path_exists(isolated, tmp_path, monkeypatch):
    _make_executable(isolated, "chromium")
    target = tmp_path / "my-chrome"
    target.write_text("")
    monkeypatch.setenv("CHROME", str(target))
    assert default_executable() == target


def test_env_var_ignored_when_path_missing(isolated, tmp_path, monkeypatch):
    expected = _make_executable(isolated, "chromium")
    monkeypatch.setenv("CHROME", str(tmp_path / "does-not-exist"))
    assert default_executable() == expected


def test_finds_program_on_path(isolated):
    expected = _make_executable(isolated, "google-chrome-stable")
    assert default_executable() == expected


def test_earlier_candidate_name_preferred(isolated):
    _make_executable(isolated, "chrome")
    preferred = _make_executable(isolated, "chromium")
    assert CANDIDATE_NAMES.index("chromium") < CANDIDATE_NAMES.index("chrome")
    assert default_executable() == preferred


def test_every_candidate_name_is_found(isolated):
    for name in CANDIDATE_NAMES:
        path = _make_executable(isolated, name)
        assert default_executable() == path
        path.unlink()


def test_not_found_raises(isolated):
    with pytest.raises(ExecutableNotFound, match="Could not auto detect a chrome executable"):
        default_executable()


def test_not_found_is_lookup_error(isolated):
    with pytest.raises(LookupError):
        default_executable()