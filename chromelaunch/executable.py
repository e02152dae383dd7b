"""Find an installed Chrome or Chromium executable."""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

ENV_VAR = "CHROME"


def _channels(base: str, channels: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(f"{base}-{channel}" for channel in channels)


CANDIDATE_NAMES: tuple[str, ...] = (
    *_channels("google-chrome", ("stable", "beta", "dev", "unstable")),
    "chromium",
    "chromium-browser",
    *_channels("microsoft-edge", ("stable", "beta", "dev")),
    "chrome",
    "chrome-browser",
    "msedge",
)


def _app_bundle(name: str) -> str:
    return f"/Applications/{name}.app/Contents/MacOS/{name}"


def _app_family(base: str) -> tuple[str, ...]:
    variants = (base, *(f"{base} {suffix}" for suffix in ("Beta", "Dev", "Canary")))
    return tuple(_app_bundle(variant) for variant in variants)


MAC_PATHS: tuple[str, ...] = (
    *_app_family("Google Chrome"),
    _app_bundle("Chromium"),
    *_app_family("Microsoft Edge"),
)

WINDOWS_FALLBACK_PATHS: tuple[str, ...] = (
    "\\".join(
        ("C:", "Program Files (x86)", "Microsoft", "Edge", "Application", "msedge.exe")
    ),
)

_REGISTRY_KEY = "\\".join(
    ("SOFTWARE", "Microsoft", "Windows", "CurrentVersion", "App Paths", "chrome.exe")
)


class ExecutableNotFound(LookupError):
    """Raised when no Chrome executable can be found."""


def _chrome_path_from_registry() -> Path | None:
    try:
        import winreg
    except ImportError:
        return None
    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, _REGISTRY_KEY) as key:
            value, _kind = winreg.QueryValueEx(key, "")
    except OSError:
        return None
    return Path(value)


def _first_existing(paths: tuple[str, ...]) -> Path | None:
    return next((Path(p) for p in paths if Path(p).exists()), None)


def default_executable() -> Path:
    """Return the path of a Chrome executable.

    The ``CHROME`` environment variable wins if it names an existing path.
    Otherwise well-known program names are looked up on ``PATH``, then the
    standard application locations on macOS or the registry on Windows.
    """
    env_path = os.environ.get(ENV_VAR)
    if env_path and Path(env_path).exists():
        return Path(env_path)

    for name in CANDIDATE_NAMES:
        found = shutil.which(name)
        if found:
            return Path(found)

    if sys.platform == "darwin":
        found_mac = _first_existing(MAC_PATHS)
        if found_mac is not None:
            return found_mac

    if sys.platform == "win32":
        registry_path = _chrome_path_from_registry()
        if registry_path is not None:
            if registry_path.exists():
                return registry_path
            found_win = _first_existing(WINDOWS_FALLBACK_PATHS)
            if found_win is not None:
                return found_win

    raise ExecutableNotFound("Could not auto detect a chrome executable")