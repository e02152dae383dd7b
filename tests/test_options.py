import sys
from pathlib import Path

import pytest

from chromelaunch.executable import ExecutableNotFound
from chromelaunch.fetcher import CUR_REV, FetchError, FetcherOptions
from chromelaunch.options import LaunchOptions


def test_defaults_match_documented_values():
    options = LaunchOptions()
    assert options.headless is True
    assert options.sandbox is True
    assert options.ignore_certificate_errors is True
    assert options.idle_browser_timeout == 30.0
    assert options.port is None
    assert options.path is None
    assert options.extensions == []
    assert options.args == []
    assert options.disable_default_args is False


def test_paths_and_args_are_normalised(tmp_path):
    options = LaunchOptions(
        path=str(tmp_path / "chrome"),
        user_data_dir=str(tmp_path / "profile"),
        args=[Path("--flag")],
        extensions=[tmp_path / "ext"],
    )
    assert options.path == tmp_path / "chrome"
    assert options.user_data_dir == tmp_path / "profile"
    assert options.args == ["--flag"]
    assert options.extensions == [str(tmp_path / "ext")]


def test_resolve_path_keeps_explicit_path(tmp_path):
    chrome = tmp_path / "my-chrome"
    options = LaunchOptions(path=chrome)
    assert options.resolve_path() == chrome
    assert options.path == chrome


def test_resolve_path_uses_chrome_env(tmp_path, monkeypatch):
    chrome = tmp_path / "chrome-bin"
    chrome.write_text("")
    monkeypatch.setenv("CHROME", str(chrome))
    options = LaunchOptions()
    assert options.resolve_path() == chrome
    assert options.path == chrome


def test_resolve_path_raises_when_nothing_found(tmp_path, monkeypatch):
    monkeypatch.delenv("CHROME", raising=False)
    monkeypatch.setenv("PATH", str(tmp_path))
    monkeypatch.setattr(sys, "platform", "linux")
    with pytest.raises(ExecutableNotFound):
        LaunchOptions().resolve_path()


def test_resolve_path_uses_fetcher_install(tmp_path):
    executable = tmp_path / f"linux-{CUR_REV}" / "chrome-linux" / "chrome"
    executable.parent.mkdir(parents=True)
    executable.write_text("")
    fetcher_options = FetcherOptions(
        install_dir=tmp_path,
        allow_download=False,
        allow_standard_dirs=False,
        platform="linux",
    )
    options = LaunchOptions(fetcher_options=fetcher_options)
    assert options.resolve_path() == executable


def test_resolve_path_fetcher_without_install_or_download(tmp_path):
    fetcher_options = FetcherOptions(
        install_dir=tmp_path,
        allow_download=False,
        allow_standard_dirs=False,
        platform="linux",
    )
    options = LaunchOptions(fetcher_options=fetcher_options)
    with pytest.raises(FetchError):
        options.resolve_path()
    assert options.path is None