"""Locate, download and launch Chrome/Chromium and report its DevTools WebSocket URL."""

__version__ = "0.1.0"
__all__ = ["executable", "fetcher", "options", "process"]