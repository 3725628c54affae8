"""Persisted build metadata summary: typed model, JSON/CBOR codec and file helpers.

The summary is the projection of :class:`buildmeta.meta.BuildMeta` that is
written next to a reusable build archive. Its field names are read by other
tools, so they are stable. ``linked_paths`` only carries the paths, not the
packages that requested them.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

import cbor2

from buildmeta.errors import SummaryError
from buildmeta.paths import sorted_rel_paths


class NonTestBinaryKind(StrEnum):
    """Binary kinds emitted by the build tool. Other strings are kept verbatim."""

    DYLIB = "dylib"
    BIN_EXE = "bin-exe"


@dataclass(frozen=True, slots=True, order=True)
class NonTestBinarySummary:
    name: str
    kind: str
    path: str

    def __post_init__(self) -> None:
        # enum members are stored as their plain string value
        object.__setattr__(self, "kind", str(self.kind))
        object.__setattr__(self, "path", str(self.path))

    def to_payload(self) -> dict[str, str]:
        return {"name": self.name, "kind": self.kind, "path": self.path}


@dataclass(frozen=True, slots=True)
class BuildMetaSummary:
    target_directory: str
    base_output_directories: tuple[str, ...] = ()
    non_test_binaries: dict[str, tuple[NonTestBinarySummary, ...]] = field(default_factory=dict)
    linked_paths: tuple[str, ...] = ()
    target_triple: str | dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "target_directory": self.target_directory,
            "base_output_directories": list(sorted_rel_paths(self.base_output_directories)),
            "non_test_binaries": {
                package_id: [binary.to_payload() for binary in sorted(set(binaries))]
                for package_id, binaries in sorted(self.non_test_binaries.items())
            },
            "linked_paths": list(sorted_rel_paths(self.linked_paths)),
            "target_triple": self.target_triple,
        }

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self.to_payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self.to_payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    @classmethod
    def from_payload(cls, payload: Any) -> BuildMetaSummary:
        if not isinstance(payload, Mapping):
            raise SummaryError("Invalid build metadata summary payload type.")
        return cls(
            target_directory=_required_str(payload, "target_directory"),
            base_output_directories=_str_list(payload, "base_output_directories"),
            non_test_binaries=_non_test_binaries(payload, "non_test_binaries"),
            linked_paths=_str_list(payload, "linked_paths"),
            target_triple=_target_triple(payload, "target_triple"),
        )


def serialize_summary(summary: BuildMetaSummary) -> str:
    return summary.to_json()


def parse_summary(raw: str | bytes) -> BuildMetaSummary:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SummaryError("Invalid build metadata summary JSON.", hint=str(exc)) from exc
    return BuildMetaSummary.from_payload(payload)


def parse_summary_cbor(raw: bytes) -> BuildMetaSummary:
    try:
        payload = cbor2.loads(raw)
    except cbor2.CBORDecodeError as exc:
        raise SummaryError("Invalid build metadata summary CBOR.", hint=str(exc)) from exc
    return BuildMetaSummary.from_payload(payload)


def read_summary(path: str | Path) -> BuildMetaSummary:
    summary_path = Path(path)
    try:
        raw = summary_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SummaryError(
            "Build metadata summary does not exist.",
            hint="Archive the build before reusing it.",
            context={"path": str(summary_path)},
        ) from exc
    except UnicodeDecodeError as exc:
        raise SummaryError(
            "Build metadata summary is not valid UTF-8.",
            hint=str(exc),
            context={"path": str(summary_path)},
        ) from exc
    return parse_summary(raw)


def write_summary(summary: BuildMetaSummary, path: str | Path) -> Path:
    summary_path = Path(path)
    summary_path.parent.mkdir(parents=True, exist_ok=True)
    summary_path.write_text(serialize_summary(summary), encoding="utf-8")
    return summary_path


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise SummaryError(f"Invalid summary `{key}` value.")
    return value


def _str_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SummaryError(f"Invalid summary `{key}` value.", hint="Expected a list of paths.")
    return tuple(value)


def _non_test_binaries(
    payload: Mapping[str, Any], key: str
) -> dict[str, tuple[NonTestBinarySummary, ...]]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise SummaryError(f"Invalid summary `{key}` value.")
    parsed: dict[str, tuple[NonTestBinarySummary, ...]] = {}
    for package_id, binaries in value.items():
        if not isinstance(package_id, str):
            raise SummaryError("Invalid summary non-test binary package id.")
        if not isinstance(binaries, list):
            raise SummaryError(
                "Invalid summary non-test binary list.",
                context={"package_id": package_id},
            )
        parsed[package_id] = tuple(_parse_binary(item, package_id) for item in binaries)
    return parsed


def _parse_binary(item: Any, package_id: str) -> NonTestBinarySummary:
    if not isinstance(item, dict):
        raise SummaryError("Invalid non-test binary entry.", context={"package_id": package_id})
    fields = {}
    for name in ("name", "kind", "path"):
        value = item.get(name)
        if not isinstance(value, str):
            raise SummaryError(
                f"Invalid non-test binary `{name}` value.",
                context={"package_id": package_id},
            )
        fields[name] = value
    return NonTestBinarySummary(**fields)


def _target_triple(payload: Mapping[str, Any], key: str) -> str | dict[str, Any] | None:
    value = payload.get(key)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        return dict(value)
    raise SummaryError(f"Invalid summary `{key}` value.", hint="Expected a string or an object.")
