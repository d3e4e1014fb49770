"""Platform paths for bundled and per-user files."""

import os
import sys
from pathlib import Path


def executable_dir() -> Path:
    """Directory of the running executable (the app binary when frozen)."""
    return Path(sys.executable).resolve().parent


def user_data_dir(app_name: str) -> Path:
    """Per-user application data directory for ``app_name``.

    Windows: %APPDATA%, macOS: ~/Library/Application Support,
    elsewhere: $XDG_DATA_HOME or ~/.local/share.
    """
    if sys.platform == 'win32':
        base = os.getenv('APPDATA') or str(Path.home() / 'AppData' / 'Roaming')
        return Path(base) / app_name
    if sys.platform == 'darwin':
        return Path.home() / 'Library' / 'Application Support' / app_name
    base = os.getenv('XDG_DATA_HOME') or str(Path.home() / '.local' / 'share')
    return Path(base) / app_name
