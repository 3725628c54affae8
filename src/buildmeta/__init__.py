"""Build metadata for reusing native builds in test runs."""

from .errors import BuildMetaError, PathMapperError, SummaryError, TargetTripleError
from .meta import BuildMeta, DiscoveryBuildMeta, ExecutionBuildMeta
from .path_mapper import PathMapper, TargetDirOverride
from .summary import (
    BuildMetaSummary,
    NonTestBinaryKind,
    NonTestBinarySummary,
    parse_summary,
    read_summary,
    serialize_summary,
    write_summary,
)
from .triple import TargetTriple, UnknownTargetTriple, parse_triple

__all__ = [
    "BuildMeta",
    "BuildMetaError",
    "BuildMetaSummary",
    "DiscoveryBuildMeta",
    "ExecutionBuildMeta",
    "NonTestBinaryKind",
    "NonTestBinarySummary",
    "PathMapper",
    "PathMapperError",
    "SummaryError",
    "TargetDirOverride",
    "TargetTriple",
    "TargetTripleError",
    "UnknownTargetTriple",
    "parse_summary",
    "parse_triple",
    "read_summary",
    "serialize_summary",
    "write_summary",
]
