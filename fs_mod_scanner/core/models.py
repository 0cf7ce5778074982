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
Data models for mod artifacts and scan reports.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

from ..config.constants import ModScannerConstants
from .flags import Flag


class Badge(str, Enum):
    """Human-facing summary markers derived from flags and metadata."""

    BROKEN = "broken"
    FOLDER = "folder"
    MALWARE = "malware"
    NO_MULTIPLAYER = "no-multiplayer"
    NOT_A_MOD = "not-a-mod"
    SCRIPTS_ONLY = "scripts-only"
    PROBLEM = "problem"
    SAVEGAME = "savegame"


def _freeze_value(value: Any) -> Any:
    if isinstance(value, _Snapshotable):
        return value.snapshot()
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(v) for v in value)
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze_value(v) for k, v in value.items()})
    return value


class _Snapshotable:
    """Mixin for working models that are filled in during a scan.

    ``snapshot()`` returns a detached, read-only copy: lists become tuples,
    dicts become mapping proxies and attribute assignment raises
    ``FrozenInstanceError``.
    """

    _frozen = False

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        super().__setattr__(name, value)

    def snapshot(self):
        if self._frozen:
            return self
        copy = replace(self, **{f.name: _freeze_value(getattr(self, f.name)) for f in fields(self)})
        object.__setattr__(copy, "_frozen", True)
        return copy


@dataclass(frozen=True)
class ZipPackFile:
    """A zip nested inside a mod pack."""

    name: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "size": self.size}


@dataclass
class FileDetail(_Snapshotable):
    """Physical facts about the artifact and the classification of its members."""

    full_path: str
    short_name: str
    is_folder: bool = False
    file_size: int = 0
    file_date: str | None = None
    is_save_game: bool = False
    is_mod_pack: bool = False
    copy_name: str | None = None
    image_dds: list[str] = field(default_factory=list)
    image_non_dds: list[str] = field(default_factory=list)
    png_texture: list[str] = field(default_factory=list)
    i3d_files: list[str] = field(default_factory=list)
    too_big_files: list[str] = field(default_factory=list)
    space_files: list[str] = field(default_factory=list)
    extra_files: list[str] = field(default_factory=list)
    zip_files: list[ZipPackFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "copyName": self.copy_name,
            "extraFiles": list(self.extra_files),
            "fileDate": self.file_date,
            "fileSize": self.file_size,
            "fullPath": self.full_path,
            "i3dFiles": list(self.i3d_files),
            "imageDDS": list(self.image_dds),
            "imageNonDDS": list(self.image_non_dds),
            "isFolder": self.is_folder,
            "isModPack": self.is_mod_pack,
            "isSaveGame": self.is_save_game,
            "pngTexture": list(self.png_texture),
            "shortName": self.short_name,
            "spaceFiles": list(self.space_files),
            "tooBigFiles": list(self.too_big_files),
            "zipFiles": [z.to_dict() for z in self.zip_files],
        }


@dataclass
class CropOutput(_Snapshotable):
    """Crop calendar entry. Periods are 1-based, 1 being early spring."""

    name: str
    growth_time: int
    harvest_periods: list[int] = field(default_factory=list)
    plant_periods: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "growthTime": self.growth_time,
            "harvestPeriods": list(self.harvest_periods),
            "plantPeriods": list(self.plant_periods),
        }


@dataclass
class ModDescriptor(_Snapshotable):
    """Metadata declared by the mod, with safe defaults for everything."""

    author: str = ModScannerConstants.DEFAULT_AUTHOR
    version: str = "--"
    desc_version: int = 0
    multiplayer: bool = False
    dependencies: list[str] = field(default_factory=list)
    store_items: int = 0
    script_files: int = 0
    icon_filename: str | None = None
    icon_image: str | None = None
    map_config_file: str | None = None
    map_image: str | None = None
    map_is_south: bool = False
    map_custom_env: bool = False
    map_custom_crop: bool = False
    map_custom_grow: bool = False
    crop_weather: dict[str, dict[str, int]] | None = None
    crop_info: list[CropOutput] | None = None
    actions: dict[str, str] = field(default_factory=dict)
    binds: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "actions": dict(self.actions),
            "author": self.author,
            "binds": {name: list(inputs) for name, inputs in self.binds.items()},
            "cropInfo": [c.to_dict() for c in self.crop_info] if self.crop_info is not None else None,
            "cropWeather": (
                {season: dict(temps) for season, temps in self.crop_weather.items()}
                if self.crop_weather is not None
                else None
            ),
            "depend": list(self.dependencies),
            "descVersion": self.desc_version,
            "iconFileName": self.icon_filename,
            "iconImage": self.icon_image,
            "mapConfigFile": self.map_config_file,
            "mapCustomEnv": self.map_custom_env,
            "mapCustomCrop": self.map_custom_crop,
            "mapCustomGrow": self.map_custom_grow,
            "mapImage": self.map_image,
            "mapIsSouth": self.map_is_south,
            "multiPlayer": self.multiplayer,
            "scriptFiles": self.script_files,
            "storeItems": self.store_items,
            "version": self.version,
        }


@dataclass(frozen=True)
class LocalizedStrings:
    """Title and description resolved for the requested locale."""

    title: str = ModScannerConstants.TITLE_FALLBACK
    description: str = ModScannerConstants.DESCRIPTION_FALLBACK

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "description": self.description}


@dataclass(frozen=True)
class StageResult:
    """Outcome of one pipeline stage: keep going, or stop with a reason."""

    halted: bool = False
    reason: str | None = None

    @classmethod
    def proceed(cls) -> StageResult:
        return _PROCEED

    @classmethod
    def halt(cls, reason: str) -> StageResult:
        return cls(halted=True, reason=reason)


_PROCEED = StageResult()


@dataclass(frozen=True)
class ModReport:
    """Final, immutable result of scanning one artifact."""

    uuid: str
    file_detail: FileDetail
    mod_desc: ModDescriptor
    l10n: LocalizedStrings
    issues: frozenset[Flag]
    badges: tuple[Badge, ...]
    can_not_use: bool
    checksum: str | None = None
    log: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_usable(self) -> bool:
        return not self.can_not_use

    def has_issue(self, flag: Flag) -> bool:
        return flag in self.issues

    def has_badge(self, badge: Badge) -> bool:
        return badge in self.badges

    def to_dict(self) -> dict[str, Any]:
        """Convert the report to the JSON shape consumed by mod managers."""
        return {
            "log": list(self.log),
            "record": {
                "badgeArray": [b.value for b in self.badges],
                "canNotUse": self.can_not_use,
                "fileDetail": self.file_detail.to_dict(),
                "issues": sorted(flag.value for flag in self.issues),
                "l10n": self.l10n.to_dict(),
                "md5Sum": self.checksum,
                "modDesc": self.mod_desc.to_dict(),
                "uuid": self.uuid,
            },
        }


@dataclass
class BatchReport:
    """Reports for every artifact found in a mod folder."""

    reports: list[ModReport] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add(self, report: ModReport) -> None:
        self.reports.append(report)

    @property
    def total(self) -> int:
        return len(self.reports)

    @property
    def usable_count(self) -> int:
        return sum(1 for r in self.reports if r.is_usable)

    @property
    def broken_count(self) -> int:
        return sum(1 for r in self.reports if Badge.BROKEN in r.badges)

    @property
    def problem_count(self) -> int:
        return sum(1 for r in self.reports if Badge.PROBLEM in r.badges)

    @property
    def savegame_count(self) -> int:
        return sum(1 for r in self.reports if Badge.SAVEGAME in r.badges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "total": self.total,
                "usable": self.usable_count,
                "broken": self.broken_count,
                "problem": self.problem_count,
                "savegame": self.savegame_count,
                "timestamp": self.timestamp.isoformat(),
            },
            "mods": [r.to_dict() for r in self.reports],
        }
