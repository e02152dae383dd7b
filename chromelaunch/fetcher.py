"""Locate, download and install a pinned Chromium revision."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import subprocess
import sys
import urllib.request
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import platformdirs

log = logging.getLogger(__name__)

CUR_REV = "634997"
APP_NAME = "chromelaunch"
DEFAULT_HOST = "https://storage.googleapis.com"

_SNAPSHOT_DIRS = {"linux": "Linux_x64", "mac": "Mac", "win": "Win_x64"}
_EXECUTABLE_PARTS = {
    "linux": ("chrome",),
    "mac": ("Chromium.app", "Contents", "MacOS", "Chromium"),
    "win": ("chrome.exe",),
}
# The Windows archive name changed after this revision.
_WIN_ARCHIVE_RENAME_REV = 591_479


class FetchError(Exception):
    """Raised when a Chromium revision cannot be found or installed."""


def current_platform() -> str:
    """Return the platform tag used in archive and directory names."""
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        return "mac"
    if sys.platform in ("win32", "cygwin"):
        return "win"
    raise FetchError(f"Unsupported platform: {sys.platform}")


def _check_platform(platform: str) -> None:
    if platform not in _SNAPSHOT_DIRS:
        raise FetchError(f"Unsupported platform: {platform!r}")


def archive_name(revision: str, platform: str) -> str:
    """Name of the top-level folder inside the snapshot archive."""
    _check_platform(platform)
    if platform == "linux":
        return "chrome-linux"
    if platform == "mac":
        return "chrome-mac"
    try:
        number = int(revision)
    except ValueError as exc:
        raise FetchError(f"Invalid revision {revision!r}") from exc
    return "chrome-win" if number > _WIN_ARCHIVE_RENAME_REV else "chrome-win32"


def dl_url(revision: str, platform: str) -> str:
    """Download URL of the snapshot archive for a revision."""
    _check_platform(platform)
    return (
        f"{DEFAULT_HOST}/chromium-browser-snapshots/{_SNAPSHOT_DIRS[platform]}/"
        f"{revision}/{archive_name(revision, platform)}.zip"
    )


def get_size(url: str) -> int:
    """Size in whole MiB of the resource at ``url``, from its Content-Length."""
    with urllib.request.urlopen(url) as response:
        length = response.headers.get("Content-Length")
    if length is None:
        raise FetchError("response doesn't include the content length")
    try:
        return int(length) // 2**20
    except ValueError as exc:
        raise FetchError(f"Invalid Content-Length {length!r}") from exc


def project_data_dir() -> Path:
    """The standard per-user data directory for installs."""
    log.info("Getting project dir")
    return Path(platformdirs.user_data_dir(APP_NAME, appauthor=False))


def _walk(root: Path) -> Iterator[Path]:
    if not root.exists():
        return
    yield root
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in [*dirnames, *sorted(filenames)]:
            yield Path(dirpath) / name


@dataclass(frozen=True)
class FetcherOptions:
    """Where to look for a revision and whether it may be downloaded."""

    revision: str = CUR_REV
    install_dir: Path | None = None
    allow_download: bool = True
    allow_standard_dirs: bool = True
    platform: str = field(default_factory=current_platform)

    def __post_init__(self) -> None:
        if self.install_dir is not None:
            object.__setattr__(self, "install_dir", Path(self.install_dir))
        _check_platform(self.platform)


class Fetcher:
    """Finds an installed Chromium revision, downloading it when allowed."""

    def __init__(self, options: FetcherOptions | None = None) -> None:
        self.options = options if options is not None else FetcherOptions()

    @property
    def _install_name(self) -> str:
        return f"{self.options.platform}-{self.options.revision}"

    def fetch(self) -> Path:
        """Return the executable path, installing the revision if needed."""
        try:
            return self.chrome_path()
        except FetchError:
            pass
        if self.options.allow_download:
            zip_path = self.download()
            self.unzip(zip_path)
            return self.chrome_path()
        raise FetchError("Could not fetch")

    def base_path(self) -> Path:
        """Find the install directory named ``{platform}-{revision}``."""
        search_dirs: list[Path] = []
        if self.options.install_dir is not None:
            search_dirs.append(self.options.install_dir)
        if self.options.allow_standard_dirs:
            search_dirs.append(project_data_dir())

        for root in search_dirs:
            for entry in _walk(root):
                parts = entry.name.split("-")
                if (
                    len(parts) == 2
                    and parts[0] == self.options.platform
                    and parts[1] == self.options.revision
                ):
                    return entry
        raise FetchError("Could not find an existing revision")

    def chrome_path(self) -> Path:
        """Full path of the Chromium executable inside the install."""
        path = self.base_path() / archive_name(
            self.options.revision, self.options.platform
        )
        return path.joinpath(*_EXECUTABLE_PARTS[self.options.platform])

    def download(self) -> Path:
        """Download the revision's archive and return where it was saved."""
        url = dl_url(self.options.revision, self.options.platform)
        log.info("Chrome download url: %s", url)
        log.info("Total size of download: %s MiB", get_size(url))

        if self.options.install_dir is not None:
            directory = self.options.install_dir
        elif self.options.allow_standard_dirs:
            directory = project_data_dir()
        else:
            raise FetchError("No allowed installation directory")

        path = directory / f"{self._install_name}.zip"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FetchError(f"Could not create directory at {path.parent}") from exc

        log.info("Creating file for download: %s", path)
        with urllib.request.urlopen(url) as response, path.open("wb") as out:
            shutil.copyfileobj(response, out)
        return path

    def _extract_with_unzip(self, zip_path: Path, extract_path: Path) -> None:
        result = subprocess.run(
            ["unzip", str(zip_path)],
            cwd=extract_path,
            capture_output=True,
        )
        if result.returncode != 0:
            log.error(
                "Unable to extract zip using unzip command: \n---- stdout:\n%s\n---- stderr:\n%s",
                result.stdout.decode(errors="replace"),
                result.stderr.decode(errors="replace"),
            )

    @staticmethod
    def _extract_with_zipfile(zip_path: Path, extract_path: Path) -> None:
        with zipfile.ZipFile(zip_path) as archive:
            for index, info in enumerate(archive.infolist()):
                if info.comment:
                    log.debug("File %d comment: %s", index, info.comment)
                out_path = Path(archive.extract(info, extract_path))
                log.debug("File %d extracted to %s", index, out_path)
                mode = info.external_attr >> 16
                if info.create_system == 3 and mode and os.name == "posix":
                    os.chmod(out_path, stat.S_IMODE(mode))

    def unzip(self, zip_path: Path | str) -> Path:
        """Extract the archive next to itself, delete it, return the folder."""
        zip_path = Path(zip_path)
        extract_path = zip_path.parent / zip_path.stem
        extract_path.mkdir(parents=True, exist_ok=True)
        log.info("Extracting (this can take a while): %s", extract_path)

        if self.options.platform == "mac":
            self._extract_with_unzip(zip_path, extract_path)
        else:
            self._extract_with_zipfile(zip_path, extract_path)

        log.info("Cleaning up")
        try:
            zip_path.unlink()
        except OSError:
            log.info("Failed to delete zip")
        return extract_path