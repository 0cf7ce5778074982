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
File classifier and quota tracking.

Walks every member of a mod artifact once, sorting files into the
classification lists of ``FileDetail``, checking per-type size limits and
counting quota-limited types. Lua scripts are scanned for calls that
delete files on the player's machine.
"""

from __future__ import annotations

from typing import Iterable

from .archive import ArchiveEntry, ModArchive
from .exceptions import ArchiveError
from .flags import TOO_BIG_FLAGS, TOO_MANY_FLAGS, Flag, FlagSet
from .log_collector import LogCollector
from .models import FileDetail, ModDescriptor, ZipPackFile
from .scan_policy import QuotaTracker, ScanPolicy

WEIGHT_MAP_SUFFIX = "_weight.png"


class FileClassifier:
    """Classifies the members of one artifact. Create a new instance per scan."""

    # Types that only count towards a quota
    QUOTA_ONLY_TYPES = frozenset({"grle", "pdf", "txt"})
    # Types that only get a size check
    SIZE_ONLY_TYPES = frozenset({"cache", "gdm", "xml", "shapes"})

    def __init__(
        self,
        archive: ModArchive,
        file_detail: FileDetail,
        mod_desc: ModDescriptor,
        flags: FlagSet,
        policy: ScanPolicy,
        log: LogCollector,
    ):
        self.archive = archive
        self.file_detail = file_detail
        self.mod_desc = mod_desc
        self.flags = flags
        self.policy = policy
        self.log = log
        self.quotas = QuotaTracker.from_policy(policy)
        self._scan_lua = not policy.is_safe_name(file_detail.short_name)

    def classify(self, entries: Iterable[ArchiveEntry]) -> QuotaTracker:
        """Classify every entry, then apply the quota checks once.

        Returns:
            The quota tracker, for inspection by callers and tests
        """
        for entry in entries:
            if entry.is_folder:
                continue
            self._classify_entry(entry)

        for tag in self.quotas.exhausted():
            if tag in TOO_MANY_FLAGS:
                self.flags.raise_flag(TOO_MANY_FLAGS[tag])

        if self.policy.flags.png_texture and self.file_detail.png_texture:
            self.flags.raise_flag(Flag.PNG_TEXTURE)

        return self.quotas

    def _classify_entry(self, entry: ArchiveEntry) -> None:
        name = entry.name
        tag = entry.extension

        if " " in name:
            self.file_detail.space_files.append(name)
            self.flags.raise_flag(Flag.SPACE_IN_FILE)

        if tag not in self.policy.extensions.known_good:
            if tag in self.policy.extensions.piracy:
                self.flags.raise_flag(Flag.MIGHT_BE_PIRACY)
            self.flags.raise_flag(Flag.HAS_EXTRA)
            self.file_detail.extra_files.append(name)
            return

        if tag == "png":
            self.quotas.tick("png")
            if not name.endswith(WEIGHT_MAP_SUFFIX):
                self.file_detail.image_non_dds.append(name)
                self.file_detail.png_texture.append(name)
        elif tag == "dds":
            self.file_detail.image_dds.append(name)
            self._check_size(entry, tag)
        elif tag == "i3d":
            self.file_detail.i3d_files.append(name)
        elif tag == "lua":
            self.mod_desc.script_files += 1
            if self._scan_lua:
                self._check_lua(name)
        elif tag in self.SIZE_ONLY_TYPES:
            self._check_size(entry, tag)
        elif tag in self.QUOTA_ONLY_TYPES:
            self.quotas.tick(tag)

    def _check_size(self, entry: ArchiveEntry, tag: str) -> None:
        limit = self.policy.size_limit(tag)
        if limit is not None and entry.size > limit:
            self.file_detail.too_big_files.append(entry.name)
            self.flags.raise_flag(TOO_BIG_FLAGS[tag])

    def _check_lua(self, name: str) -> None:
        try:
            contents = self.archive.read_text(name)
        except ArchiveError as e:
            self.log.warning(f"Unable to read script {name}: {e}")
            return

        if contents is None:
            return

        if self.policy.malware.matches(contents):
            self.log.warning(f"Possibly malicious file operations in {name}")
            self.flags.raise_flag(Flag.MALICIOUS_CODE)


def detect_mod_pack(entries: Iterable[ArchiveEntry], max_other_files: int = 1) -> list[ZipPackFile] | None:
    """Recognise a zip that only bundles other mod zips.

    A mod pack holds no folders, no xml, at least one zip and at most
    *max_other_files* other files (usually a readme).

    Returns:
        The nested zips, or None when the archive is not a mod pack
    """
    zips: list[ZipPackFile] = []
    others = 0
    for entry in entries:
        if entry.is_folder or entry.extension == "xml":
            return None
        if entry.extension == "zip":
            zips.append(ZipPackFile(name=entry.name, size=entry.size))
        else:
            others += 1

    if not zips or others > max_other_files:
        return None
    return zips
