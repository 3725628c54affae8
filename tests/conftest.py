"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildmeta import DiscoveryBuildMeta, NonTestBinaryKind, NonTestBinarySummary, parse_triple


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Provide an existing, empty target directory."""
    path = tmp_path / "target"
    path.mkdir()
    return path


@pytest.fixture
def discovery_meta(target_dir: Path) -> DiscoveryBuildMeta:
    """Provide discovery metadata with every collection populated."""
    return (
        DiscoveryBuildMeta.new(target_dir, parse_triple("x86_64-unknown-linux-gnu"))
        .with_base_output_directory("debug")
        .with_base_output_directory("x86_64-unknown-linux-gnu/debug")
        .with_linked_path("debug/build/zstd-sys-1234/out", "zstd-sys 2.0.9")
        .with_linked_path("debug/build/zstd-sys-1234/out", "zstd 0.13.0")
        .with_non_test_binary(
            "my-crate 0.1.0",
            NonTestBinarySummary(
                name="my-cli",
                kind=NonTestBinaryKind.BIN_EXE,
                path=str(target_dir / "debug" / "my-cli"),
            ),
        )
        .with_non_test_binary(
            "my-crate 0.1.0",
            NonTestBinarySummary(
                name="my_crate",
                kind=NonTestBinaryKind.DYLIB,
                path=str(target_dir / "debug" / "libmy_crate.so"),
            ),
        )
    )
