"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

log = logging.getLogger(__name__)

# Timeout for a single ``du`` run (seconds). Large games on slow SD cards take a while.
_DU_TIMEOUT = 600


def _xdg_dir(variable: str, fallback: Path) -> Path:
    # An empty variable counts as unset
    value = os.environ.get(variable)
    return Path(value) if value else fallback


def xdg_config_home() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config")


def xdg_data_home() -> Path:
    """Base of per-user data, where Steam keeps its internal library."""
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share")


def dir_size(path: Path | str) -> int | None:
    """Return the disk usage of a directory tree in bytes.

    Uses ``du`` when available, falling back to ``os.scandir`` on systems
    without it.  Any permission error or vanished path yields ``None``
    instead of a partial total.
    """
    try:
        return _dir_size_du(str(path))
    except FileNotFoundError:
        return _dir_size_scandir(path)
    except (OSError, subprocess.SubprocessError, ValueError) as exc:
        log.debug("Cannot measure %s: %s", path, exc)
        return None


def _dir_size_du(path_str: str) -> int | None:
    """Measure with ``du -s -B1`` (allocated bytes, like the shell tools report)."""
    proc = subprocess.run(
        ["du", "-s", "-B1", path_str],
        capture_output=True,
        timeout=_DU_TIMEOUT,
    )
    if proc.returncode != 0:
        log.debug("du failed for %s: %s", path_str, proc.stderr.decode(errors="replace").strip())
        return None
    return int(proc.stdout.split(b"\t", 1)[0])


def _dir_size_scandir(path: Path | str) -> int | None:
    """Walk a directory tree using os.scandir (pure Python fallback)."""
    total = 0
    stack: list[Path | str] = [path]
    try:
        while stack:
            current = stack.pop()
            with os.scandir(current) as it:
                for entry in it:
                    if entry.is_dir(follow_symlinks=False):
                        stack.append(entry.path)
                    else:
                        st = entry.stat(follow_symlinks=False)
                        # st_blocks is in 512-byte units on every POSIX system
                        total += st.st_blocks * 512 if hasattr(st, "st_blocks") else st.st_size
    except OSError as exc:
        log.debug("Cannot measure %s: %s", path, exc)
        return None
    return total


_UNITS = ("B", "KB", "MB", "GB", "TB")


def bytes_to_human(size_bytes: int) -> str:
    """Format a byte count with binary units, e.g. ``10.0 GB``."""
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{size_bytes} B"
    return f"{value:.1f} {_UNITS[unit]}"


def format_elapsed(seconds: float) -> str:
    """Short duration for the end-of-scan summary."""
    if seconds >= 60:
        minutes, secs = divmod(round(seconds), 60)
        return f"{minutes}m {secs}s"
    if seconds >= 1:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000:.0f} ms"
