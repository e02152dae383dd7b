"""Start a Chrome process and discover its DevTools WebSocket URL."""

from __future__ import annotations

import logging
import os
import queue
import random
import re
import socket
import subprocess
import tempfile
import threading
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlsplit

from chromelaunch.options import LaunchOptions

log = logging.getLogger(__name__)

WS_URL_TIMEOUT = 30.0
MAX_ATTEMPTS = 10
PORT_RANGE = range(8000, 9000)

DEFAULT_ARGS = (
    "--disable-background-networking",
    "--enable-features=NetworkService,NetworkServiceInProcess",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-breakpad",
    "--disable-client-side-phishing-detection",
    "--disable-component-extensions-with-background-pages",
    "--disable-default-apps",
    "--disable-dev-shm-usage",
    "--disable-extensions",
    "--disable-features=TranslateUI,BlinkGenPropertyTrees",
    "--disable-hang-monitor",
    "--disable-ipc-flooding-protection",
    "--disable-popup-blocking",
    "--disable-prompt-on-repost",
    "--disable-renderer-backgrounding",
    "--disable-sync",
    "--force-color-profile=srgb",
    "--metrics-recording-only",
    "--no-first-run",
    "--enable-automation",
    "--password-store=basic",
    "--use-mock-keychain",
)

_PORT_TAKEN_RE = re.compile(r"ERROR.*bind\(\)")
_WS_URL_RE = re.compile(r"listening on (.*/devtools/browser/.*)$")


class ChromeLaunchError(Exception):
    """Raised when Chrome cannot be launched or does not report its URL."""


class PortOpenTimeout(ChromeLaunchError):
    def __init__(self) -> None:
        super().__init__(
            "Chrome launched, but didn't give us a WebSocket URL before we timed out"
        )


class NoAvailablePorts(ChromeLaunchError):
    def __init__(self) -> None:
        super().__init__("There are no available ports between 8000 and 9000 for debugging")


class DebugPortInUse(ChromeLaunchError):
    def __init__(self) -> None:
        super().__init__("The chosen debugging port is already in use")


def ws_url_from_lines(lines: Iterable[str]) -> str | None:
    """Scan Chrome's output for the DevTools URL.

    Returns the URL, or ``None`` if the output ends without one. Raises
    :class:`DebugPortInUse` if Chrome reports that it could not bind its port.
    """
    for raw in lines:
        line = raw.rstrip("\r\n")
        log.debug("Chrome output: %s", line)
        if _PORT_TAKEN_RE.search(line):
            raise DebugPortInUse()
        match = _WS_URL_RE.search(line)
        if match:
            return match.group(1)
    return None


def port_is_available(port: int) -> bool:
    """Whether a TCP listener can bind to ``127.0.0.1:port``."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind(("127.0.0.1", port))
        except OSError:
            return False
    return True


def get_available_port() -> int | None:
    """A random free port between 8000 and 8999, or ``None`` if none is free."""
    ports = list(PORT_RANGE)
    random.shuffle(ports)
    return next((port for port in ports if port_is_available(port)), None)


def build_args(options: LaunchOptions, port: int, user_data_dir: Path | str) -> list[str]:
    """Command-line arguments passed to Chrome for the given options."""
    args = [
        f"--remote-debugging-port={port}",
        "--disable-gpu",
        "--enable-logging",
        "--verbose",
        "--log-level=0",
        "--no-first-run",
        "--disable-audio-output",
        f"--user-data-dir={os.fspath(user_data_dir)}",
    ]
    if not options.disable_default_args:
        args.extend(DEFAULT_ARGS)
    args.extend(options.args)
    if options.window_size is not None:
        width, height = options.window_size
        args.append(f"--window-size={width},{height}")
    if options.headless:
        args.append("--headless")
    if options.ignore_certificate_errors:
        args.append("--ignore-certificate-errors")
    if not options.sandbox:
        args.extend(["--no-sandbox", "--disable-setuid-sandbox"])
    args.extend(f"--load-extension={ext}" for ext in options.extensions)
    return args


def _validate_ws_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ChromeLaunchError(f"Invalid WebSocket URL: {url!r}")
    return url


class _Launch:
    """A started Chrome child together with its temporary profile."""

    def __init__(self, options: LaunchOptions, executable: Path) -> None:
        port = options.port if options.port is not None else get_available_port()
        if port is None:
            raise NoAvailablePorts()

        self.profile: tempfile.TemporaryDirectory[str] | None = None
        if options.user_data_dir is not None:
            user_data_dir: Path | str = options.user_data_dir
        else:
            self.profile = tempfile.TemporaryDirectory(prefix="chromelaunch-profile")
            user_data_dir = self.profile.name
        log.debug("Chrome will have profile: %s", user_data_dir)

        env = None
        if options.process_envs is not None:
            env = {**os.environ, **options.process_envs}

        log.info("Launching Chrome binary at %s", executable)
        try:
            self.child = subprocess.Popen(
                [os.fspath(executable), *build_args(options, port, user_data_dir)],
                stderr=subprocess.PIPE,
                env=env,
                text=True,
                errors="replace",
            )
        except BaseException:
            self._cleanup_profile()
            raise

    def ws_url(self, timeout: float) -> str:
        results: queue.Queue[tuple[str | None, BaseException | None]] = queue.Queue()
        stderr = self.child.stderr

        def read() -> None:
            try:
                results.put((ws_url_from_lines(stderr), None))
            except BaseException as exc:  # handed to the waiting thread
                results.put((None, exc))

        threading.Thread(target=read, daemon=True).start()
        try:
            url, error = results.get(timeout=timeout)
        except queue.Empty:
            raise PortOpenTimeout() from None
        if error is not None:
            raise error
        if url is None:
            raise PortOpenTimeout()
        return _validate_ws_url(url)

    def release_stderr(self) -> None:
        if self.child.stderr is not None:
            self.child.stderr.close()
            self.child.stderr = None

    def _cleanup_profile(self) -> None:
        if self.profile is not None:
            self.profile.cleanup()
            self.profile = None

    def kill(self) -> None:
        log.info("Killing Chrome. PID: %s", self.child.pid)
        if self.child.poll() is None:
            try:
                self.child.kill()
            except OSError:
                pass
        self.child.wait()
        self.release_stderr()
        self._cleanup_profile()


class Process:
    """A running Chrome process with its DevTools WebSocket URL.

    The process is killed by :meth:`close` or on leaving a ``with`` block.
    """

    def __init__(self, launch_options: LaunchOptions) -> None:
        executable = launch_options.resolve_path()
        launch = _Launch(launch_options, executable)
        log.info("Started Chrome. PID: %s", launch.child.pid)

        attempts = 0
        while True:
            if attempts > MAX_ATTEMPTS:
                launch.kill()
                raise NoAvailablePorts()
            try:
                url = launch.ws_url(WS_URL_TIMEOUT)
            except ChromeLaunchError as error:
                log.debug("Problem getting WebSocket URL from Chrome: %s", error)
                launch.kill()
                if launch_options.port is not None:
                    raise
                launch = _Launch(launch_options, executable)
            else:
                log.debug("Found debugging WS URL: %s", url)
                break
            log.debug(
                "Trying again to find available debugging port. Attempts: %d", attempts
            )
            attempts += 1

        launch.release_stderr()
        self._launch: _Launch | None = launch
        self._pid = launch.child.pid
        self.debug_ws_url = url

    @property
    def pid(self) -> int:
        """Operating-system process id of Chrome."""
        return self._pid

    def close(self) -> None:
        """Kill Chrome and wait for it to exit. Safe to call twice."""
        if self._launch is not None:
            self._launch.kill()
            self._launch = None

    def __enter__(self) -> Process:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()