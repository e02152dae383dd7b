"""Options describing how a Chrome process is launched."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from chromelaunch.executable import default_executable
from chromelaunch.fetcher import Fetcher, FetcherOptions


@dataclass
class LaunchOptions:
    """How Chrome is run.

    By default a Chrome binary is searched for on the system, a free port is
    chosen for debugging and the browser starts headless. When ``path`` is
    unset and ``fetcher_options`` is given, a pinned Chromium revision is
    located or downloaded instead of searching the system.
    """

    headless: bool = True
    sandbox: bool = True
    window_size: tuple[int, int] | None = None
    port: int | None = None
    # Skipping certificate checks exposes the browser to man-in-the-middle attacks.
    ignore_certificate_errors: bool = True
    path: Path | None = None
    user_data_dir: Path | None = None
    extensions: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    disable_default_args: bool = False
    fetcher_options: FetcherOptions | None = None
    idle_browser_timeout: float = 30.0
    process_envs: dict[str, str] | None = None

    def __post_init__(self) -> None:
        if self.path is not None:
            self.path = Path(self.path)
        if self.user_data_dir is not None:
            self.user_data_dir = Path(self.user_data_dir)
        self.extensions = [os.fspath(e) for e in self.extensions]
        self.args = [os.fspath(a) for a in self.args]
        if self.window_size is not None:
            width, height = self.window_size
            self.window_size = (int(width), int(height))

    def resolve_path(self) -> Path:
        """Return the executable path, finding or fetching it when unset."""
        if self.path is None:
            if self.fetcher_options is not None:
                self.path = Fetcher(self.fetcher_options).fetch()
            else:
                self.path = default_executable()
        return self.path