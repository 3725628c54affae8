"""Build metadata used for discovering test binaries and running them.

Metadata goes through two phases, each with its own class:

* :class:`DiscoveryBuildMeta` is collected while test binaries are listed.
* :class:`ExecutionBuildMeta` is what test runs consume. It is obtained from a
  discovery value through :meth:`DiscoveryBuildMeta.map_paths`, which applies
  any target directory remapping for reused builds.

Only execution metadata can compute dynamic library paths, so paths that have
not been remapped are never handed to a test process.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TypeVar

from buildmeta.dylib import dylib_path_envvar, dylib_path_value
from buildmeta.path_mapper import TargetDirOverride
from buildmeta.paths import join_relative, rel_path_key, sorted_rel_paths
from buildmeta.summary import BuildMetaSummary, NonTestBinarySummary
from buildmeta.triple import (
    TargetTriple,
    UnknownTargetTriple,
    deserialize_triple,
    serialize_triple,
)

logger = logging.getLogger(__name__)

MetaT = TypeVar("MetaT", bound="BuildMeta")


def _sorted_linked_paths(
    linked_paths: Mapping[str | Path, Iterable[str]],
) -> dict[str, frozenset[str]]:
    by_key = {str(rel): frozenset(requesters) for rel, requesters in linked_paths.items()}
    return {
        rel: by_key[rel] for rel in sorted(by_key, key=lambda rel: (rel_path_key(rel), rel))
    }


@dataclass(frozen=True, slots=True)
class BuildMeta:
    """Fields shared by both phases.

    ``base_output_directories`` and the keys of ``linked_paths`` are relative
    to ``target_directory``. Collections are normalized on construction: they
    are deduplicated, frozen and kept in sorted order.
    """

    target_directory: Path
    base_output_directories: tuple[str, ...] = ()
    non_test_binaries: dict[str, frozenset[NonTestBinarySummary]] = field(default_factory=dict)
    # values are the ids of the packages that requested each path
    linked_paths: dict[str, frozenset[str]] = field(default_factory=dict)
    target_triple: TargetTriple | UnknownTargetTriple | None = None

    def __post_init__(self) -> None:
        if type(self) is BuildMeta:
            raise TypeError("BuildMeta has no phase; use DiscoveryBuildMeta or ExecutionBuildMeta")
        object.__setattr__(self, "target_directory", Path(self.target_directory))
        object.__setattr__(
            self, "base_output_directories", sorted_rel_paths(self.base_output_directories)
        )
        object.__setattr__(
            self,
            "non_test_binaries",
            {
                package_id: frozenset(binaries)
                for package_id, binaries in sorted(self.non_test_binaries.items())
            },
        )
        object.__setattr__(self, "linked_paths", _sorted_linked_paths(self.linked_paths))

    @classmethod
    def from_summary(cls: type[MetaT], summary: BuildMetaSummary) -> MetaT:
        """Rebuild metadata from its persisted summary.

        The summary carries no phase, so the class this is called on decides
        it. Linked paths come back with empty requester sets since the summary
        never stored them.
        """
        return cls(
            target_directory=Path(summary.target_directory),
            base_output_directories=summary.base_output_directories,
            non_test_binaries={
                package_id: frozenset(binaries)
                for package_id, binaries in summary.non_test_binaries.items()
            },
            linked_paths={rel: frozenset() for rel in summary.linked_paths},
            target_triple=deserialize_triple(summary.target_triple),
        )

    def to_summary(self) -> BuildMetaSummary:
        return BuildMetaSummary(
            target_directory=str(self.target_directory),
            base_output_directories=self.base_output_directories,
            non_test_binaries={
                package_id: tuple(sorted(binaries))
                for package_id, binaries in self.non_test_binaries.items()
            },
            linked_paths=tuple(self.linked_paths),
            target_triple=serialize_triple(self.target_triple),
        )


@dataclass(frozen=True, slots=True)
class DiscoveryBuildMeta(BuildMeta):
    """Metadata collected while listing test binaries."""

    @classmethod
    def new(
        cls,
        target_directory: str | Path,
        target_triple: TargetTriple | UnknownTargetTriple | None = None,
    ) -> DiscoveryBuildMeta:
        return cls(target_directory=Path(target_directory), target_triple=target_triple)

    def with_base_output_directory(self, rel_path: str | Path) -> DiscoveryBuildMeta:
        return replace(
            self,
            base_output_directories=(*self.base_output_directories, str(rel_path)),
        )

    def with_linked_path(self, rel_path: str | Path, package_id: str) -> DiscoveryBuildMeta:
        linked_paths = dict(self.linked_paths)
        key = str(rel_path)
        linked_paths[key] = linked_paths.get(key, frozenset()) | {package_id}
        return replace(self, linked_paths=linked_paths)

    def with_non_test_binary(
        self, package_id: str, binary: NonTestBinarySummary
    ) -> DiscoveryBuildMeta:
        non_test_binaries = dict(self.non_test_binaries)
        non_test_binaries[package_id] = non_test_binaries.get(package_id, frozenset()) | {binary}
        return replace(self, non_test_binaries=non_test_binaries)

    def map_paths(self, path_mapper: TargetDirOverride) -> ExecutionBuildMeta:
        """Convert to execution metadata, remapping the target directory if requested.

        Every other field is relative to the target directory or self-contained,
        so it is carried over unchanged.
        """
        new_target_dir = path_mapper.new_target_dir()
        if new_target_dir is not None:
            logger.debug(
                "remapping target directory %s -> %s", self.target_directory, new_target_dir
            )
        return ExecutionBuildMeta(
            target_directory=(
                Path(new_target_dir) if new_target_dir is not None else self.target_directory
            ),
            base_output_directories=self.base_output_directories,
            non_test_binaries=dict(self.non_test_binaries),
            linked_paths=dict(self.linked_paths),
            target_triple=self.target_triple,
        )


@dataclass(frozen=True, slots=True)
class ExecutionBuildMeta(BuildMeta):
    """Metadata ready to be used for running tests."""

    def dylib_paths(self) -> list[Path]:
        """Return the dynamic library paths for this build, in cargo's order.

        These are prepended to the platform's dynamic library search variable
        (``LD_LIBRARY_PATH`` on Linux). Linked paths come first and are only
        kept if they exist on disk at the time of the call. Each base output
        directory contributes its ``deps`` subdirectory and then itself, with
        no existence check. The result is not deduplicated.
        """
        linked: list[Path] = []
        for rel_path in self.linked_paths:
            abs_path = join_relative(self.target_directory, rel_path)
            if abs_path.exists():
                linked.append(abs_path)
            else:
                logger.debug("skipping linked path that does not exist: %s", abs_path)

        base_outputs: list[Path] = []
        for rel_path in self.base_output_directories:
            abs_base = join_relative(self.target_directory, rel_path)
            base_outputs.extend((abs_base / "deps", abs_base))

        return linked + base_outputs

    def dylib_environment(self, environ: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return ``{variable: value}`` with this build's library paths prepended."""
        return {dylib_path_envvar(): dylib_path_value(self.dylib_paths(), environ)}
