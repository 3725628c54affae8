"""Helpers for build-relative paths."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path, PurePath


def to_main_separator(rel_path: str, sep: str = os.sep) -> str:
    """Rewrite ``/`` to the main separator of the running platform.

    Summaries always use ``/``. Only Windows needs rewriting; elsewhere ``\\``
    is an ordinary file name character and is left alone.
    """
    if sep == "/":
        return rel_path
    return rel_path.replace("/", sep)


def join_relative(base: Path, rel_path: str) -> Path:
    return base / to_main_separator(rel_path)


def rel_path_key(rel_path: str, sep: str = os.sep) -> tuple[str, ...]:
    """Sort key ordering relative paths component by component.

    ``a/b`` sorts before ``a-b`` because the component ``a`` is a prefix of
    ``a-b``; plain string ordering would put them the other way around.
    """
    parts = to_main_separator(rel_path, sep).split(sep)
    return tuple(part for part in parts if part not in ("", "."))


def sorted_rel_paths(rel_paths: Iterable[str | PurePath]) -> tuple[str, ...]:
    unique = {str(rel_path) for rel_path in rel_paths}
    return tuple(sorted(unique, key=lambda rel: (rel_path_key(rel), rel)))
