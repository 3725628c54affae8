"""Target triple model and its summary codec."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from buildmeta.errors import TargetTripleError

logger = logging.getLogger(__name__)

TripleSource = Literal["cli-option", "env", "config", "metadata"]

_ARCH = re.compile(
    r"^(x86_64h?|i[3-6]86|aarch64(_be)?|arm64(_32|e|ec)?|arm(eb)?(v\w+)?|thumbv\w+"
    r"|riscv(32|64)\w*|powerpc(64(le)?)?|s390x|mips(isa)?(32|64)?\w*|sparc(64|v9)?"
    r"|wasm(32|64)|loongarch64|bpfe[lb]|csky|hexagon|m68k|avr|nvptx64|msp430|xtensa)$"
)

KNOWN_OPERATING_SYSTEMS = frozenset(
    {
        "aix",
        "android",
        "cuda",
        "cygwin",
        "darwin",
        "dragonfly",
        "emscripten",
        "espidf",
        "freebsd",
        "fuchsia",
        "haiku",
        "hermit",
        "hurd",
        "illumos",
        "ios",
        "l4re",
        "linux",
        "netbsd",
        "none",
        "nto",
        "openbsd",
        "redox",
        "solaris",
        "tvos",
        "uefi",
        "unknown",
        "visionos",
        "vxworks",
        "wasi",
        "wasip1",
        "wasip2",
        "watchos",
        "windows",
    }
)


Descriptor = dict[str, Any]


@dataclass(frozen=True, slots=True)
class TargetTriple:
    """A recognized compilation target.

    ``source`` records where the triple was specified. ``descriptor`` keeps the
    structured summary form the triple was read from, if any, so that it is
    written back unchanged. Neither is part of equality: a triple read back
    from a summary is the same target as the one that was written.
    """

    triple: str
    arch: str
    vendor: str
    os: str
    env: str | None = None
    source: TripleSource = field(default="metadata", compare=False)
    descriptor: Descriptor | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.triple


@dataclass(frozen=True, slots=True)
class UnknownTargetTriple:
    """A triple that was present in a summary but could not be recognized."""

    raw: str
    descriptor: Descriptor | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.raw


def _split(text: str) -> tuple[str, str, str, str | None] | None:
    parts = text.split("-")
    if len(parts) == 4:
        arch, vendor, os_name, env = parts
    elif len(parts) == 3:
        if parts[1] in KNOWN_OPERATING_SYSTEMS and parts[1] != "unknown":
            # arch-os-env, e.g. aarch64-linux-android or thumbv7em-none-eabihf
            arch, vendor, os_name, env = parts[0], "unknown", parts[1], parts[2]
        else:
            arch, vendor, os_name, env = parts[0], parts[1], parts[2], None
    elif len(parts) == 2:
        arch, vendor, os_name, env = parts[0], "unknown", parts[1], None
    else:
        return None
    if not _ARCH.match(arch) or os_name not in KNOWN_OPERATING_SYSTEMS:
        return None
    if not vendor or env == "":
        return None
    return arch, vendor, os_name, env


def parse_triple(text: str, source: TripleSource = "cli-option") -> TargetTriple:
    """Parse *text* strictly, raising :class:`TargetTripleError` when unrecognized."""
    split = _split(text.strip())
    if split is None:
        raise TargetTripleError(
            "Unrecognized target triple.",
            hint="Expected `arch-vendor-os[-env]`, e.g. `x86_64-unknown-linux-gnu`.",
            context={"triple": text, "source": source},
        )
    arch, vendor, os_name, env = split
    return TargetTriple(
        triple=text.strip(),
        arch=arch,
        vendor=vendor,
        os=os_name,
        env=env,
        source=source,
    )


def serialize_triple(
    triple: TargetTriple | UnknownTargetTriple | None,
) -> str | Descriptor | None:
    if triple is None:
        return None
    if triple.descriptor is not None:
        return dict(triple.descriptor)
    return str(triple)


def deserialize_triple(value: Any) -> TargetTriple | UnknownTargetTriple | None:
    """Rebuild a triple from its summary form.

    Accepts a plain string or a structured ``{"triple": ...}`` descriptor.
    Anything that cannot be recognized yields :class:`UnknownTargetTriple`
    rather than an error.
    """
    if value is None:
        return None
    descriptor: Descriptor | None = None
    if isinstance(value, Mapping):
        descriptor = dict(value)
        text = value.get("triple")
        if not isinstance(text, str):
            raw = json.dumps(descriptor, sort_keys=True, default=str)
            logger.debug("target triple descriptor has no triple string: %s", raw)
            return UnknownTargetTriple(raw=raw, descriptor=descriptor)
    elif isinstance(value, str):
        text = value
    else:
        logger.debug("target triple has unexpected type %s", type(value).__name__)
        return UnknownTargetTriple(raw=str(value))

    try:
        triple = parse_triple(text, source="metadata")
    except TargetTripleError as exc:
        logger.debug("keeping unrecognized target triple from summary: %s", exc)
        return UnknownTargetTriple(raw=text, descriptor=descriptor)
    return replace(triple, descriptor=descriptor)
