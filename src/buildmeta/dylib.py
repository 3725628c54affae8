"""Platform dynamic library search variable handling."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path


def dylib_path_envvar(platform: str = sys.platform) -> str:
    """Return the environment variable the loader searches for shared libraries."""
    if platform in ("win32", "cygwin"):
        return "PATH"
    if platform == "darwin":
        return "DYLD_FALLBACK_LIBRARY_PATH"
    if platform.startswith("aix"):
        return "LIBPATH"
    return "LD_LIBRARY_PATH"


def _path_separator(platform: str) -> str:
    return ";" if platform == "win32" else ":"


def dylib_path_value(
    paths: Iterable[Path],
    environ: Mapping[str, str] | None = None,
    platform: str = sys.platform,
) -> str:
    """Prepend *paths* to the current value of the dynamic library variable.

    *environ* defaults to the process environment. Empty entries in the
    existing value are dropped.
    """
    env = os.environ if environ is None else environ
    separator = _path_separator(platform)
    existing = env.get(dylib_path_envvar(platform), "")
    entries = [str(path) for path in paths]
    entries.extend(entry for entry in existing.split(separator) if entry)
    return separator.join(entries)
