"""Reuse an archived build: load its summary, remap the target dir, run a binary."""

import os
import subprocess
import sys
from pathlib import Path

from buildmeta import BuildMetaError, DiscoveryBuildMeta, PathMapper, read_summary


def run_with_reused_build(summary_path: Path, extracted_target: Path, binary: Path) -> int:
    # Archived summaries are written before remapping, so load them as discovery metadata.
    discovered = DiscoveryBuildMeta.from_summary(read_summary(summary_path))
    meta = discovered.map_paths(PathMapper.new(extracted_target))
    env = {**os.environ, **meta.dylib_environment()}
    return subprocess.run([str(binary)], env=env, check=False).returncode


if __name__ == "__main__":
    try:
        sys.exit(run_with_reused_build(Path(sys.argv[1]), Path(sys.argv[2]), Path(sys.argv[3])))
    except BuildMetaError as exc:
        print(exc, file=sys.stderr)
        sys.exit(2)
