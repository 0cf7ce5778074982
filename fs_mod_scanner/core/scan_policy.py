# Copyright 2026 Cisco Systems, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Scan policy: file quotas, size limits and lookup tables.

A ``ScanPolicy`` captures every fixed table the validation pipeline
consults: how many files of a type are acceptable, how large each file
type may be, which extensions are expected, which lua calls look
malicious and which mod names are known to be safe.

Usage
-----
    from fs_mod_scanner.core.scan_policy import ScanPolicy

    # Load built-in defaults
    policy = ScanPolicy.default()

    # Load a custom policy (merges on top of defaults)
    policy = ScanPolicy.from_yaml("my_policy.yaml")

    # Dump the current (including default) policy for editing
    policy.to_yaml("generated_policy.yaml")

Policies are immutable and may be shared by concurrent scans. The only
mutable piece, the per-scan ``QuotaTracker``, is created fresh for each
artifact from ``policy.quotas``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from ..config.constants import ModScannerConstants
from .exceptions import PolicyError

logger = logging.getLogger(__name__)

_DEFAULT_POLICY_PATH = ModScannerConstants.DEFAULT_POLICY_PATH


# ---------------------------------------------------------------------------
# Data classes for each policy section
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtensionPolicy:
    """Archive and member file extensions (lower-case, no leading dot)."""

    supported_archive: str = "zip"
    unsupported_archives: frozenset[str] = frozenset()
    known_good: frozenset[str] = frozenset()
    piracy: frozenset[str] = frozenset()


@dataclass(frozen=True)
class MalwarePolicy:
    """Lua scan patterns and the mods exempt from it."""

    patterns: tuple[re.Pattern, ...] = ()
    safe_names: frozenset[str] = frozenset()

    def matches(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.patterns)


@dataclass(frozen=True)
class NamePolicy:
    """Regular expressions applied to the artifact's short name."""

    valid_pattern: re.Pattern = re.compile(r"^[A-Z_a-z]\w+$")
    copy_pattern: re.Pattern = re.compile(r"^([A-Za-z]\w+)(?: - .+$| \(.+$)")
    zip_pack_pattern: re.Pattern = re.compile(r"unzip", re.IGNORECASE)


@dataclass(frozen=True)
class DescriptorPolicy:
    """Names of well-known members and tags."""

    filename: str = ModScannerConstants.MOD_DESC_FILENAME
    savegame_marker: str = ModScannerConstants.SAVEGAME_MARKER
    keyboard_device: str = "KB_MOUSE_DEFAULT"
    base_game_prefix: str = "$"


@dataclass(frozen=True)
class FlagPolicy:
    """Optional flags that are off unless enabled."""

    png_texture: bool = False


# ---------------------------------------------------------------------------
# Top-level policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScanPolicy:
    """Complete, read-only scan policy."""

    policy_name: str = "default"
    policy_version: str = "1.0"

    quotas: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    size_limits: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    extensions: ExtensionPolicy = field(default_factory=ExtensionPolicy)
    malware: MalwarePolicy = field(default_factory=MalwarePolicy)
    names: NamePolicy = field(default_factory=NamePolicy)
    descriptor: DescriptorPolicy = field(default_factory=DescriptorPolicy)
    flags: FlagPolicy = field(default_factory=FlagPolicy)

    # -----------------------------------------------------------------------
    # Convenience helpers
    # -----------------------------------------------------------------------

    def size_limit(self, tag: str) -> int | None:
        """Maximum byte size for *tag*, or None when the type is unlimited."""
        return self.size_limits.get(tag)

    def is_safe_name(self, short_name: str) -> bool:
        return short_name in self.malware.safe_names

    # -----------------------------------------------------------------------
    # Loading / saving
    # -----------------------------------------------------------------------

    @classmethod
    def default(cls) -> ScanPolicy:
        """Load the built-in default policy that ships with the package."""
        return cls.from_yaml(_DEFAULT_POLICY_PATH)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ScanPolicy:
        """
        Load a policy from a YAML file.

        The YAML is first merged on top of the built-in defaults so that
        users only need to specify the sections they want to override.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Policy file not found: {path}")

        raw = cls._read_raw(path)

        if path.resolve() == _DEFAULT_POLICY_PATH.resolve():
            return cls._from_dict(raw)

        merged = cls._deep_merge(cls._read_raw(_DEFAULT_POLICY_PATH), raw)
        policy = cls._from_dict(merged)
        logger.debug("Loaded scan policy %r from %s", policy.policy_name, path)
        return policy

    def to_yaml(self, path: str | Path) -> None:
        """Dump the full policy to a YAML file for editing."""
        data = self._to_dict()
        with open(path, "w", encoding="utf-8") as fh:
            fh.write("# FS Mod Scanner - Scan Policy\n")
            fh.write("# Only include sections you want to override; omitted sections\n")
            fh.write("# will use the built-in defaults.\n\n")
            yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False, width=120)

    # -----------------------------------------------------------------------
    # Internal parsing
    # -----------------------------------------------------------------------

    @staticmethod
    def _read_raw(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise PolicyError(f"Invalid YAML in policy file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise PolicyError(f"Policy file {path} must contain a mapping at the top level")
        return raw

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Recursively merge *override* into *base*.

        Lists are replaced, not concatenated, so a custom policy can narrow
        a table without repeating every entry.
        """
        result = dict(base)
        for key, val in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(val, dict):
                result[key] = ScanPolicy._deep_merge(result[key], val)
            else:
                result[key] = val
        return result

    @classmethod
    def _from_dict(cls, d: dict[str, Any]) -> ScanPolicy:
        ex = d.get("extensions", {}) or {}
        mw = d.get("malware", {}) or {}
        nm = d.get("names", {}) or {}
        ds = d.get("descriptor", {}) or {}
        fl = d.get("flags", {}) or {}

        return cls(
            policy_name=str(d.get("policy_name", "default")),
            policy_version=str(d.get("policy_version", "1.0")),
            quotas=_int_table(d.get("quotas", {}), "quotas"),
            size_limits=_int_table(d.get("size_limits", {}), "size_limits"),
            extensions=ExtensionPolicy(
                supported_archive=str(ex.get("supported_archive", "zip")).lower(),
                unsupported_archives=_lower_set(ex.get("unsupported_archives", [])),
                known_good=_lower_set(ex.get("known_good", [])),
                piracy=_lower_set(ex.get("piracy", [])),
            ),
            malware=MalwarePolicy(
                patterns=tuple(_compile(p, "malware.patterns") for p in mw.get("patterns", [])),
                safe_names=frozenset(str(n) for n in mw.get("safe_names", [])),
            ),
            names=NamePolicy(
                valid_pattern=_compile(nm.get("valid_pattern", NamePolicy.valid_pattern.pattern), "names.valid_pattern"),
                copy_pattern=_compile(nm.get("copy_pattern", NamePolicy.copy_pattern.pattern), "names.copy_pattern"),
                zip_pack_pattern=_compile(
                    nm.get("zip_pack_pattern", NamePolicy.zip_pack_pattern.pattern),
                    "names.zip_pack_pattern",
                    re.IGNORECASE,
                ),
            ),
            descriptor=DescriptorPolicy(
                filename=str(ds.get("filename", DescriptorPolicy.filename)),
                savegame_marker=str(ds.get("savegame_marker", DescriptorPolicy.savegame_marker)),
                keyboard_device=str(ds.get("keyboard_device", DescriptorPolicy.keyboard_device)),
                base_game_prefix=str(ds.get("base_game_prefix", DescriptorPolicy.base_game_prefix)),
            ),
            flags=FlagPolicy(png_texture=bool(fl.get("png_texture", False))),
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "policy_name": self.policy_name,
            "policy_version": self.policy_version,
            "quotas": dict(self.quotas),
            "size_limits": dict(self.size_limits),
            "extensions": {
                "supported_archive": self.extensions.supported_archive,
                "unsupported_archives": sorted(self.extensions.unsupported_archives),
                "known_good": sorted(self.extensions.known_good),
                "piracy": sorted(self.extensions.piracy),
            },
            "malware": {
                "patterns": [p.pattern for p in self.malware.patterns],
                "safe_names": sorted(self.malware.safe_names),
            },
            "names": {
                "valid_pattern": self.names.valid_pattern.pattern,
                "copy_pattern": self.names.copy_pattern.pattern,
                "zip_pack_pattern": self.names.zip_pack_pattern.pattern,
            },
            "descriptor": {
                "filename": self.descriptor.filename,
                "savegame_marker": self.descriptor.savegame_marker,
                "keyboard_device": self.descriptor.keyboard_device,
                "base_game_prefix": self.descriptor.base_game_prefix,
            },
            "flags": {"png_texture": self.flags.png_texture},
        }


def _int_table(raw: Any, section: str) -> Mapping[str, int]:
    if not isinstance(raw, dict):
        raise PolicyError(f"Policy section '{section}' must be a mapping")
    table: dict[str, int] = {}
    for key, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise PolicyError(f"{section}.{key} must be an integer, got {value!r}")
        table[str(key).lower()] = value
    return MappingProxyType(table)


def _lower_set(values: Any) -> frozenset[str]:
    return frozenset(str(v).lower() for v in values or [])


def _compile(pattern: str, where: str, flags: int = 0) -> re.Pattern:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise PolicyError(f"Invalid regular expression in {where}: {e}") from e


class QuotaTracker:
    """Per-scan countdown of how many more files of each type are acceptable."""

    def __init__(self, limits: Mapping[str, int]):
        self._initial = dict(limits)
        self._remaining = dict(limits)

    @classmethod
    def from_policy(cls, policy: ScanPolicy) -> QuotaTracker:
        return cls(policy.quotas)

    def tick(self, tag: str) -> None:
        if tag in self._remaining:
            self._remaining[tag] -= 1

    def remaining(self, tag: str) -> int:
        return self._remaining[tag]

    def counted(self, tag: str) -> int:
        return self._initial[tag] - self._remaining[tag]

    def exhausted(self) -> list[str]:
        """Tracked types whose remaining quota has dropped below 1."""
        return [tag for tag, left in self._remaining.items() if left < 1]
