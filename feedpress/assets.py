"""Cache-busting URLs for static assets."""

from __future__ import annotations

import os


def file_version(path: str) -> str:
    """Return the modification time of ``../path`` as Unix seconds, or '0'."""
    try:
        info = os.stat(f"../{path}")
    except OSError:
        return "0"
    return str(int(info.st_mtime))


def asset_url(path: str) -> str:
    """Append a version query built from the file's modification time."""
    return f"{path}?v={file_version(path)}"