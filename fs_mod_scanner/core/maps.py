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
Map configuration: weather, crop calendar and orientation.

Map mods point at three support files (fruit types, growth, environment)
which are either shipped in the mod or borrowed from the base game via
the ``$data`` path variable. ``MapExtractor`` resolves those references
and ``CropDataReader`` turns the files, or the bundled base-game tables,
into the crop calendar shown to players.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Any

import yaml

from ..config.constants import ModScannerConstants
from .archive import ModArchive, parse_xml
from .exceptions import ArchiveError, IconDecodeError, ParseError
from .log_collector import LogCollector
from .models import CropOutput, FileDetail, ModDescriptor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base game tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FruitDefinition:
    """Growth states of a fruit type."""

    name: str
    max_harvest: int
    min_harvest: int
    states: int


@dataclass(frozen=True)
class BaseGameData:
    crop_types: tuple[FruitDefinition, ...]
    weather: dict[str, dict[str, dict[str, int]]]
    crops: tuple[dict[str, Any], ...]
    skip_crop_types: frozenset[str]

    def crop_calendar(self) -> list[CropOutput]:
        return [
            CropOutput(
                name=crop["name"],
                growth_time=crop["growth_time"],
                harvest_periods=list(crop["harvest_periods"]),
                plant_periods=list(crop["plant_periods"]),
            )
            for crop in self.crops
        ]

    def weather_for(self, key: str) -> dict[str, dict[str, int]] | None:
        seasons = self.weather.get(key)
        if seasons is None:
            return None
        return {name: dict(temps) for name, temps in seasons.items()}


@lru_cache(maxsize=1)
def load_base_game_data() -> BaseGameData:
    """Load the bundled base-game crop and weather tables (cached)."""
    with open(ModScannerConstants.BASE_GAME_DATA_PATH, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return BaseGameData(
        crop_types=tuple(FruitDefinition(**item) for item in raw["crop_types"]),
        weather=raw["weather"],
        crops=tuple(raw["crops"]),
        skip_crop_types=frozenset(raw.get("skip_crop_types", [])),
    )


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------


def _to_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def decode_max_range(value: str | None) -> int:
    """Upper bound of a growth range: ``"3-5"`` gives 5, ``"4"`` gives 4."""
    if value is None:
        return 0
    if "-" in value:
        value = value.split("-", 1)[1]
    return _to_int(value, 0)


class CropDataReader:
    """
    Weather, crop calendar and hemisphere for a map.

    Args:
        fruit_types_xml: Contents of the map's fruit types file, if custom
        growth_xml: Contents of the map's growth file, if custom
        environment_xml: Contents of the map's environment file, if custom
        base_game_key: Base-game map folder (``mapUS``...) when the
            environment is borrowed from the base game
    """

    def __init__(
        self,
        fruit_types_xml: str | None,
        growth_xml: str | None,
        environment_xml: str | None,
        base_game_key: str | None = None,
    ):
        self._base = load_base_game_data()
        self._is_south = False
        self._weather = self._read_weather(environment_xml, base_game_key)
        self._crops = self._read_crops(fruit_types_xml, growth_xml)

    @property
    def weather(self) -> dict[str, dict[str, int]] | None:
        return self._weather

    @property
    def crops(self) -> list[CropOutput]:
        return self._crops

    @property
    def is_south(self) -> bool:
        return self._is_south

    # -- weather -----------------------------------------------------------

    def _read_weather(self, environment_xml: str | None, base_game_key: str | None):
        if base_game_key is not None:
            return self._base.weather_for(base_game_key)

        if environment_xml is None:
            return self._base.weather_for(ModScannerConstants.FALLBACK_WEATHER_KEY)

        try:
            tree = parse_xml(environment_xml, "environment.xml")
        except ParseError as e:
            logger.debug("Falling back to base game weather: %s", e)
            return self._base.weather_for(ModScannerConstants.FALLBACK_WEATHER_KEY)

        for latitude in tree.iter("latitude"):
            if latitude.text is None:
                continue
            try:
                self._is_south = float(latitude.text.strip()) < 0
            except ValueError:
                pass
            break

        weather: dict[str, dict[str, int]] = {}
        for season in tree.iter("season"):
            name = season.get("name")
            if name is None:
                continue
            min_temp, max_temp = 127, -127
            for variation in season.iter("variation"):
                if "mintemperature" not in variation.attrib or "maxtemperature" not in variation.attrib:
                    continue
                min_temp = min(min_temp, _to_int(variation.get("mintemperature"), 127))
                max_temp = max(max_temp, _to_int(variation.get("maxtemperature"), -127))
            weather[name] = {"min": min_temp, "max": max_temp}
        return weather

    # -- crops -------------------------------------------------------------

    def _fruit_definitions(self, fruit_types_xml: str | None) -> dict[str, FruitDefinition]:
        base = {fruit.name: fruit for fruit in self._base.crop_types}
        if fruit_types_xml is None:
            return base

        try:
            tree = parse_xml(fruit_types_xml, "fruitTypes.xml")
        except ParseError as e:
            logger.debug("Falling back to base game fruit types: %s", e)
            return base

        default = ModScannerConstants.DEFAULT_GROWTH_STATE
        fruits: dict[str, FruitDefinition] = {}
        for item in tree.iter("fruittype"):
            name = item.get("name", "unknown")
            if name in self._base.skip_crop_types:
                continue

            harvest = item.find("harvest")
            growth = item.find("growth")
            max_harvest = _to_int(harvest.get("maxharvestinggrowthstate") if harvest is not None else None, default)
            min_harvest = _to_int(harvest.get("minharvestinggrowthstate") if harvest is not None else None, default)
            states = _to_int(growth.get("numgrowthstates") if growth is not None else None, default)

            preparing = item.find("preparing")
            if preparing is not None:
                min_harvest = _to_int(preparing.get("mingrowthstate"), min_harvest)
                max_harvest = _to_int(preparing.get("maxgrowthstate"), max_harvest)

            fruits.setdefault(name, FruitDefinition(name, max_harvest, min_harvest, states))
        return fruits

    def _read_crops(self, fruit_types_xml: str | None, growth_xml: str | None) -> list[CropOutput]:
        if growth_xml is None:
            return self._base.crop_calendar()

        fruits = self._fruit_definitions(fruit_types_xml)

        try:
            tree = parse_xml(growth_xml, "growth.xml")
        except ParseError as e:
            logger.debug("Falling back to base game crop calendar: %s", e)
            return self._base.crop_calendar()

        crops = []
        for fruit in tree.iter("fruit"):
            name = fruit.get("name", "unknown")
            if name in self._base.skip_crop_types or name not in fruits:
                continue
            crops.append(self._crop_calendar_entry(fruit, fruits[name]))
        return crops

    @staticmethod
    def _crop_calendar_entry(fruit: ET.Element, definition: FruitDefinition) -> CropOutput:
        crop = CropOutput(name=definition.name, growth_time=definition.states)
        last_maximum_state = 0

        for period in fruit.findall("period"):
            index = _to_int(period.get("index"), 0)
            if index == 0:
                continue

            if period.get("plantingallowed") == "true":
                crop.plant_periods.append(index)

            die_back = False
            for update in period.findall("update"):
                # "set" at or below the final state is die back, above it a regrow
                if update.get("set") is not None:
                    range_max = decode_max_range(update.get("range"))
                    if range_max <= definition.states:
                        last_maximum_state = range_max
                        die_back = True
                if not die_back and update.get("add") is not None:
                    grown = decode_max_range(update.get("range")) + _to_int(update.get("add"), 0)
                    last_maximum_state = max(last_maximum_state, grown)

            # periods without updates keep the previous state
            if definition.min_harvest <= last_maximum_state <= definition.max_harvest:
                crop.harvest_periods.append(index)

        return crop


# ---------------------------------------------------------------------------
# Map configuration stage
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MapReferences:
    """Support files referenced by a map config. None means base game."""

    fruit_types: str | None = None
    growth: str | None = None
    environment: str | None = None
    base_game_key: str | None = None

    @classmethod
    def from_tree(cls, tree: ET.Element | None, prefix: str) -> MapReferences:
        if tree is None:
            return cls()

        def custom(tag: str) -> str | None:
            node = tree.find(tag)
            filename = node.get("filename") if node is not None else None
            if filename is None or filename.startswith(prefix):
                return None
            return filename

        environment = tree.find("environment")
        env_filename = environment.get("filename") if environment is not None else None

        return cls(
            fruit_types=custom("fruittypes"),
            growth=custom("growth"),
            environment=custom("environment"),
            base_game_key=_base_game_folder(env_filename, prefix),
        )


def _base_game_folder(filename: str | None, prefix: str) -> str | None:
    """Last folder of a ``$data`` reference: ``$data/maps/mapUS/env.xml`` gives ``mapUS``."""
    if filename is None or not filename.startswith(prefix):
        return None
    stripped = filename.replace(ModScannerConstants.BASE_GAME_DATA_VARIABLE, "", 1).replace("\\", "/")
    return PurePosixPath(stripped).parent.name or None


class MapExtractor:
    """Reads a map mod's crop, weather and overview data into its descriptor."""

    def __init__(
        self,
        file_detail: FileDetail,
        mod_desc: ModDescriptor,
        log: LogCollector,
        prefix: str = "$",
        image_decoder=None,
    ):
        self.file_detail = file_detail
        self.mod_desc = mod_desc
        self.log = log
        self.prefix = prefix
        self.image_decoder = image_decoder

    def run(self, archive: ModArchive) -> None:
        """Extract map data. Never raises; failures leave crop data unset."""
        config_file = self.mod_desc.map_config_file
        if config_file is None:
            return

        try:
            tree = self._read_config(archive, config_file)
            refs = MapReferences.from_tree(tree, self.prefix)

            reader = CropDataReader(
                self._read_optional(archive, refs.fruit_types),
                self._read_optional(archive, refs.growth),
                self._read_optional(archive, refs.environment),
                refs.base_game_key,
            )

            self.mod_desc.crop_weather = reader.weather
            self.mod_desc.crop_info = reader.crops
            self.mod_desc.map_is_south = reader.is_south
            self.mod_desc.map_custom_env = refs.environment is not None
            self.mod_desc.map_custom_crop = refs.fruit_types is not None
            self.mod_desc.map_custom_grow = refs.growth is not None

            if tree is not None and self.image_decoder is not None:
                self._decode_overview(archive, tree)
        except Exception as e:
            self.log.notice(f"Caught map fail: {e}")

    def _read_config(self, archive: ModArchive, config_file: str) -> ET.Element | None:
        try:
            tree = archive.read_xml(config_file)
        except ParseError as e:
            self.log.warning(f"Map config unreadable: {e}")
            return None
        if tree is None:
            self.log.warning(f"Map XML files not found: {config_file}")
        return tree

    @staticmethod
    def _read_optional(archive: ModArchive, filename: str | None) -> str | None:
        if filename is None:
            return None
        return archive.read_text(filename)

    def _decode_overview(self, archive: ModArchive, tree: ET.Element) -> None:
        image_name = tree.get("imagefilename")
        if not image_name:
            return
        index = image_name.find(".png")
        if index != -1:
            image_name = f"{image_name[:index]}.dds"
        if image_name not in self.file_detail.image_dds:
            return

        try:
            data = archive.read_bin(image_name)
            if data is not None:
                self.mod_desc.map_image = self.image_decoder.decode_map_image(data)
        except (ArchiveError, IconDecodeError) as e:
            self.log.notice(f"Caught map image fail: {e}")
