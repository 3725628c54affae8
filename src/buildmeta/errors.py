"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import ClassVar


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    SUMMARY = "E_SUMMARY"
    PATH_MAPPING = "E_PATH_MAPPING"
    TARGET_TRIPLE = "E_TARGET_TRIPLE"


class BuildMetaError(Exception):
    """Base error; subclasses fix ``code`` and may add a hint and string context."""

    code: ClassVar[ErrorCode]

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        lines = [f"[{self.code}] {self.args[0]}"]
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        lines.extend(f"  {key}: {value}" for key, value in self.context.items() if value)
        return "\n".join(lines)


class SummaryError(BuildMetaError):
    """A persisted summary could not be read or decoded."""

    code = ErrorCode.SUMMARY


class PathMapperError(BuildMetaError):
    """A target directory remapping was rejected."""

    code = ErrorCode.PATH_MAPPING


class TargetTripleError(BuildMetaError):
    """A target triple string was not recognized."""

    code = ErrorCode.TARGET_TRIPLE


__all__ = [
    "BuildMetaError",
    "ErrorCode",
    "PathMapperError",
    "SummaryError",
    "TargetTripleError",
]
