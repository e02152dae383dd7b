# chromelaunch

Find, fetch and start a Chrome or Chromium browser with remote debugging
enabled, and get back the DevTools WebSocket URL it listens on.

## Install

```
pip install chromelaunch
```

## Finding a browser

`chromelaunch.executable.default_executable()` returns the path of a browser
binary. It uses the `CHROME` environment variable if that names an existing
path, then looks on `PATH` for well-known names (`google-chrome-stable`,
`google-chrome-beta`, `chromium`, `chromium-browser`,
`microsoft-edge-stable`, `chrome`, `chrome-browser`, `msedge`, ...), then the
standard application bundles under `/Applications` on macOS or the
`chrome.exe` App Paths registry entry on Windows. It raises
`ExecutableNotFound` when nothing turns up.

```python
from chromelaunch.executable import default_executable

print(default_executable())
```

## Launching

```python
from chromelaunch.options import LaunchOptions
from chromelaunch.process import Process

options = LaunchOptions(headless=True, window_size=(1280, 800))

with Process(options) as chrome:
    print(chrome.pid, chrome.debug_ws_url)
# the browser is killed when the block ends
```

`LaunchOptions` fields:

- `headless` (default `True`) adds `--headless`.
- `sandbox` (default `True`); when false, `--no-sandbox` and
  `--disable-setuid-sandbox` are added.
- `window_size`: `(width, height)`, passed as `--window-size`.
- `port`: a fixed debugging port. Without it a free port between 8000 and
  8999 is picked at random, and the launch is retried on a new port if the
  browser fails to report its URL.
- `ignore_certificate_errors` (default `True`) adds
  `--ignore-certificate-errors`. This leaves the browser open to
  man-in-the-middle attacks.
- `path`: the browser binary. When unset, `resolve_path()` uses a `Fetcher`
  if `fetcher_options` is set, and `default_executable()` otherwise.
- `user_data_dir`: the profile directory. When unset, a temporary directory
  is created for each launch and removed when the process is closed.
- `extensions`: folders passed as `--load-extension=...`.
- `args`: extra command-line arguments.
- `disable_default_args`: leave out the standard flags in
  `chromelaunch.process.DEFAULT_ARGS`.
- `process_envs`: extra environment variables for the browser process.
- `idle_browser_timeout` (default `30.0` seconds): kept with the options for
  callers that hold a connection to the browser; launching does not use it.

`build_args(options, port, user_data_dir)` returns the full argument list
for inspection. `Process` waits up to 30 seconds for the
`listening on ws://.../devtools/browser/...` line on the browser's standard
error; `ws_url_from_lines(lines)` does that scan on any iterable of lines.
Failures raise subclasses of `ChromeLaunchError`: `PortOpenTimeout`,
`NoAvailablePorts` or `DebugPortInUse`. `Process.close()` kills the browser
and may be called more than once.

## Downloading a pinned Chromium

A `Fetcher` looks for an existing install of a Chromium snapshot revision
(a directory named `{platform}-{revision}`, searched in `install_dir` and then
the per-user data directory) and, if `allow_download` is true, downloads and
unpacks it:

```python
from chromelaunch.fetcher import Fetcher, FetcherOptions

fetcher = Fetcher(FetcherOptions(install_dir="/tmp/chromium"))
chrome_binary = fetcher.fetch()
```

`FetcherOptions` takes `revision` (default `CUR_REV`, `"634997"`),
`install_dir`, `allow_download`, `allow_standard_dirs` and `platform`
(`"linux"`, `"mac"` or `"win"`, detected by default). The archive is saved as
`{platform}-{revision}.zip`, extracted into a folder of the same name and then
deleted. On macOS extraction runs the `unzip` command. The helpers
`archive_name`, `dl_url`, `get_size` and `project_data_dir` are available
too. Problems during lookup or download raise `FetchError`.

To have `Process` use a fetched browser, pass the options through:

```python
options = LaunchOptions(fetcher_options=FetcherOptions())
```

## What this package does not do

It starts the browser and reports its DevTools WebSocket URL, and nothing
more. It does not connect to that URL or speak the DevTools protocol: there
are no tabs, navigation, screenshots, PDF printing, JavaScript evaluation or
event listeners here. It has no command-line interface.