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
Mod descriptor (``modDesc.xml``) extraction.

The descriptor tree is first read into a typed ``ParsedDescriptor`` where
every field carries exactly one default, then folded into the report's
``ModDescriptor`` while raising flags for missing or suspicious values.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from ..config.constants import ModScannerConstants
from .archive import ModArchive
from .exceptions import ArchiveError, ParseError
from .flags import Flag, FlagSet
from .log_collector import LogCollector
from .models import FileDetail, ModDescriptor, StageResult
from .scan_policy import ScanPolicy

DDS_SUFFIX = ".dds"


def _text(element: ET.Element | None) -> str | None:
    if element is None or element.text is None:
        return None
    value = element.text.strip()
    return value or None


def _int_or_zero(value: str | None) -> int:
    if value is None:
        return 0
    try:
        return int(value.strip())
    except ValueError:
        return 0


@dataclass
class ParsedDescriptor:
    """Typed view of a descriptor tree.

    =================  =====================  ===============================
    field              default                source
    =================  =====================  ===============================
    desc_version       0                      ``descVersion`` root attribute
    version            ``"0.0.0.0"``          ``<version>``
    author             ``"--"``               ``<author>``
    multiplayer        False                  ``<multiplayer supported>``
    store_items        0                      count of ``<storeItem>``
    map_config_file    None                   first ``<map configFilename>``
    dependencies       []                     ``<dependency>`` texts
    has_product_id     False                  presence of ``<productId>``
    icon_filename      ``""``                 first ``<iconFilename>``
    =================  =====================  ===============================
    """

    desc_version: int = 0
    version: str = ModScannerConstants.DEFAULT_MOD_VERSION
    author: str = ModScannerConstants.DEFAULT_AUTHOR
    multiplayer: bool = False
    store_items: int = 0
    map_config_file: str | None = None
    dependencies: list[str] = field(default_factory=list)
    has_product_id: bool = False
    icon_filename: str = ""

    @classmethod
    def from_tree(cls, root: ET.Element) -> ParsedDescriptor:
        parsed = cls()

        parsed.desc_version = _int_or_zero(root.get("descversion"))
        parsed.version = _text(root.find("version")) or parsed.version
        parsed.author = _text(root.find("author")) or parsed.author

        multiplayer = root.find("multiplayer")
        if multiplayer is not None:
            parsed.multiplayer = multiplayer.get("supported", "").strip().lower() == "true"

        parsed.store_items = len(root.findall("storeitems/storeitem"))

        map_entry = root.find("maps/map")
        if map_entry is not None:
            parsed.map_config_file = map_entry.get("configfilename") or None

        parsed.dependencies = [
            text for text in (_text(dep) for dep in root.findall("dependencies/dependency")) if text
        ]
        parsed.has_product_id = root.find("productid") is not None
        parsed.icon_filename = _text(root.find("iconfilename")) or ""
        return parsed


class DescriptorExtractor:
    """Reads the descriptor of one artifact into its ``ModDescriptor``.

    Must run after file classification: icon validation looks the icon up
    in the collected DDS list.
    """

    def __init__(
        self,
        file_detail: FileDetail,
        mod_desc: ModDescriptor,
        flags: FlagSet,
        policy: ScanPolicy,
        log: LogCollector,
    ):
        self.file_detail = file_detail
        self.mod_desc = mod_desc
        self.flags = flags
        self.policy = policy
        self.log = log
        self.tree: ET.Element | None = None

    def run(self, archive: ModArchive) -> StageResult:
        """Read the descriptor from *archive* and extract it."""
        filename = self.policy.descriptor.filename
        try:
            tree = archive.read_xml(filename)
        except (ParseError, ArchiveError) as e:
            self.log.warning(f"Unable to parse {filename}: {e}")
            return self.extract(None, parse_error=True)
        return self.extract(tree)

    def extract(self, tree: ET.Element | None, parse_error: bool = False) -> StageResult:
        """
        Populate the mod descriptor from a parsed tree.

        Args:
            tree: Root element of the descriptor, or None when it is missing
            parse_error: True when the descriptor exists but is not valid XML

        Returns:
            StageResult, halted when the descriptor is unusable
        """
        if parse_error:
            self.flags.raise_flag(Flag.MODDESC_PARSE_ERROR)
            return StageResult.halt("modDesc.xml parse error")

        if tree is None:
            self.flags.raise_flag(Flag.MODDESC_MISSING)
            return StageResult.halt("modDesc.xml missing")

        self.tree = tree
        parsed = ParsedDescriptor.from_tree(tree)
        desc = self.mod_desc

        desc.desc_version = parsed.desc_version
        if desc.desc_version == 0:
            self.flags.raise_flag(Flag.MODDESC_VERSION_OLD_OR_MISSING)

        desc.version = parsed.version
        if desc.version == ModScannerConstants.DEFAULT_MOD_VERSION:
            self.flags.raise_flag(Flag.NO_MOD_VERSION)

        desc.author = parsed.author
        desc.multiplayer = parsed.multiplayer
        desc.store_items = parsed.store_items
        desc.map_config_file = parsed.map_config_file
        desc.dependencies = parsed.dependencies

        if parsed.has_product_id:
            self.flags.raise_flag(Flag.MIGHT_BE_PIRACY)

        self._resolve_icon(parsed.icon_filename)
        self._extract_actions(tree)
        return StageResult.proceed()

    def _resolve_icon(self, declared: str) -> None:
        icon = declared
        if not icon.endswith(DDS_SUFFIX):
            icon = f"{icon[:-4]}{DDS_SUFFIX}"

        if icon in self.file_detail.image_dds:
            self.mod_desc.icon_filename = icon
        else:
            self.log.info(f"Icon not found: {declared or '(none declared)'}")
            self.flags.raise_flag(Flag.NO_MOD_ICON)

    def _extract_actions(self, tree: ET.Element) -> None:
        keyboard = self.policy.descriptor.keyboard_device
        try:
            for action in tree.findall("actions/action"):
                category = action.get("category") or ModScannerConstants.DEFAULT_ACTION_CATEGORY
                self.mod_desc.actions[action.attrib["name"]] = category

            for action_binding in tree.findall("inputbinding/actionbinding"):
                action_name = action_binding.attrib["action"]
                for binding in action_binding.findall("binding"):
                    if binding.get("device") == keyboard:
                        self.mod_desc.binds.setdefault(action_name, []).append(binding.attrib["input"])
        except KeyError as e:
            self.log.warning(f"Key binding read failed: missing attribute {e}")
