"""Target directory remapping used when a build is reused on another machine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from buildmeta.errors import PathMapperError


class TargetDirOverride(Protocol):
    def new_target_dir(self) -> Path | None:
        """Return the replacement target directory, or ``None`` to keep the original."""


@dataclass(frozen=True, slots=True)
class PathMapper:
    target_dir_remap: Path | None = None

    @classmethod
    def new(cls, target_dir_remap: str | Path | None = None) -> PathMapper:
        """Create a mapper, validating that the remapped target directory exists."""
        if target_dir_remap is None:
            return cls()
        remap = Path(target_dir_remap)
        if not remap.is_dir():
            raise PathMapperError(
                "Remapped target directory does not exist or is not a directory.",
                hint="Extract the build archive before remapping its target directory.",
                context={"target_dir_remap": str(remap)},
            )
        return cls(target_dir_remap=remap.resolve())

    @classmethod
    def noop(cls) -> PathMapper:
        return cls()

    def new_target_dir(self) -> Path | None:
        return self.target_dir_remap
