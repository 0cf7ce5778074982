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
Mod scanning pipeline.

``ModScanner`` runs every stage for one artifact in a fixed order::

    name check -> open -> save-game / descriptor presence
        -> file classification -> descriptor -> map data -> icon
        -> localization -> report

Stages return a ``StageResult``; a halted stage skips everything up to
localization, which always runs. The archive is closed on every path.
"""

from __future__ import annotations

import hashlib
import logging
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from ..config.config import Config
from .archive import ArchiveEntry, ModArchive, open_archive
from .classifier import FileClassifier, detect_mod_pack
from .descriptor import DescriptorExtractor
from .exceptions import ArchiveError, IconDecodeError
from .flags import Flag, FlagSet
from .icons import PillowIconDecoder
from .l10n import resolve_localization
from .log_collector import LogCollector
from .maps import MapExtractor
from .models import BatchReport, FileDetail, LocalizedStrings, ModDescriptor, ModReport, StageResult
from .name_validator import validate_name
from .report import assemble_report
from .scan_policy import ScanPolicy

logger = logging.getLogger(__name__)


@dataclass
class _ScanState:
    """Working state of one scan. Nothing here outlives the run except via the report."""

    uuid: str
    file_detail: FileDetail
    log: LogCollector
    flags: FlagSet = field(default_factory=FlagSet)
    mod_desc: ModDescriptor = field(default_factory=ModDescriptor)
    l10n: LocalizedStrings = field(default_factory=LocalizedStrings)
    descriptor_tree: ET.Element | None = None
    checksum: str | None = None


class ModScanner:
    """Validates mod artifacts and extracts their metadata."""

    def __init__(
        self,
        policy: ScanPolicy | None = None,
        config: Config | None = None,
        icon_decoder=None,
    ):
        """
        Initialize the scanner.

        Args:
            policy: Scan policy. If None, loads ``config.policy_path`` or the
                built-in defaults.
            config: Scanner configuration. If None, read from the environment.
            icon_decoder: Object with ``decode_icon(data, want_thumbnail)`` and
                ``decode_map_image(data)``. Defaults to the Pillow decoder.
        """
        self.config = config or Config()
        if policy is None:
            policy = ScanPolicy.from_yaml(self.config.policy_path) if self.config.policy_path else ScanPolicy.default()
        self.policy = policy
        self.icon_decoder = icon_decoder or PillowIconDecoder()

    def scan_mod(self, mod_path: str | Path) -> ModReport:
        """
        Scan a single mod zip or folder.

        Never raises for problems with the artifact itself; those are
        reported as flags.

        Args:
            mod_path: Path to the mod zip file or unpacked folder

        Returns:
            ModReport for the artifact
        """
        if not isinstance(mod_path, Path):
            mod_path = Path(mod_path)

        is_folder = mod_path.is_dir()
        full_path = str(mod_path)
        uuid = hashlib.md5(full_path.encode("utf-8")).hexdigest()

        state = _ScanState(
            uuid=uuid,
            file_detail=FileDetail(full_path=full_path, short_name=mod_path.stem, is_folder=is_folder),
            log=LogCollector(uuid),
        )
        state.log.info(f"Adding Mod File: {state.file_detail.short_name}")

        if is_folder:
            state.flags.raise_flag(Flag.NO_MULTIPLAYER_UNZIPPED)

        name_check = validate_name(
            state.file_detail.short_name,
            is_folder,
            mod_path.suffix,
            state.flags,
            self.policy,
        )
        state.file_detail.copy_name = name_check.copy_name
        if not name_check.valid:
            state.flags.raise_flag(Flag.NAME_INVALID)

        archive = open_archive(mod_path, is_folder)
        try:
            result = self._run_stages(state, archive, name_check.valid)
            if result.halted:
                state.log.notice(f"Stopping Mod Parse : {result.reason}")
        finally:
            state.l10n = resolve_localization(state.descriptor_tree, self.config.locale, state.flags, state.log)
            archive.close()

        return assemble_report(
            uuid=state.uuid,
            flags=state.flags,
            file_detail=state.file_detail,
            mod_desc=state.mod_desc,
            l10n=state.l10n,
            checksum=state.checksum,
            log_lines=state.log.lines,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _run_stages(self, state: _ScanState, archive: ModArchive, name_valid: bool) -> StageResult:
        result = self._open(state, archive, name_valid)
        if result.halted:
            return result

        try:
            entries = archive.list()
        except ArchiveError as e:
            state.log.warning(str(e))
            state.flags.raise_flag(Flag.UNREADABLE_ARCHIVE)
            return StageResult.halt("Unreadable ZIP File")
        self._record_artifact_facts(state, archive, entries)

        result = self._check_contents(state, archive, name_valid, entries)
        if result.halted:
            return result

        FileClassifier(archive, state.file_detail, state.mod_desc, state.flags, self.policy, state.log).classify(
            entries
        )

        extractor = DescriptorExtractor(state.file_detail, state.mod_desc, state.flags, self.policy, state.log)
        result = extractor.run(archive)
        state.descriptor_tree = extractor.tree
        if result.halted:
            return result

        if state.mod_desc.map_config_file is not None:
            MapExtractor(
                state.file_detail,
                state.mod_desc,
                state.log,
                prefix=self.policy.descriptor.base_game_prefix,
                image_decoder=self.icon_decoder if self.config.decode_map_image else None,
            ).run(archive)

        self._decode_icon(state, archive)
        return StageResult.proceed()

    def _open(self, state: _ScanState, archive: ModArchive, name_valid: bool) -> StageResult:
        if archive.open():
            return StageResult.proceed()
        if not name_valid:
            return StageResult.halt("Invalid Mod")
        state.flags.raise_flag(Flag.UNREADABLE_ARCHIVE)
        return StageResult.halt("Unreadable ZIP File")

    def _check_contents(
        self,
        state: _ScanState,
        archive: ModArchive,
        name_valid: bool,
        entries: list[ArchiveEntry],
    ) -> StageResult:
        descriptor = self.policy.descriptor

        if archive.exists(descriptor.savegame_marker):
            state.file_detail.is_save_game = True
            state.mod_desc.version = "--"
            state.flags.raise_flag(Flag.IS_A_SAVEGAME)
            return StageResult.halt("Savegame Detected")

        if not name_valid:
            return StageResult.halt("Invalid Mod")

        if not archive.exists(descriptor.filename):
            state.flags.raise_flag(Flag.MODDESC_MISSING)
            state.checksum = None
            if not state.file_detail.is_folder:
                zip_files = detect_mod_pack(entries)
                if zip_files is not None:
                    state.file_detail.is_mod_pack = True
                    state.file_detail.zip_files = zip_files
                    state.flags.raise_flag(Flag.LIKELY_ZIP_PACK)
            return StageResult.halt("ModDesc Missing, Invalid, or Un-Readable")

        return StageResult.proceed()

    def _record_artifact_facts(self, state: _ScanState, archive: ModArchive, entries: list[ArchiveEntry]) -> None:
        detail = state.file_detail
        try:
            stat = archive.path.stat()
        except OSError as e:
            state.log.warning(f"Unable to stat {archive.path}: {e}")
            return

        detail.file_date = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(timespec="seconds")
        if detail.is_folder:
            detail.file_size = sum(entry.size for entry in entries)
        else:
            detail.file_size = stat.st_size

        if self.config.compute_checksum:
            state.checksum = hashlib.md5(f"{detail.full_path}{stat.st_mtime}".encode("utf-8")).hexdigest()

    def _decode_icon(self, state: _ScanState, archive: ModArchive) -> None:
        icon_filename = state.mod_desc.icon_filename
        if not self.config.decode_icons or icon_filename is None:
            return

        try:
            data = archive.read_bin(icon_filename)
            if data is None:
                raise IconDecodeError(f"{icon_filename} does not exist")
            state.mod_desc.icon_image = self.icon_decoder.decode_icon(data, self.config.icon_thumbnail)
        except (ArchiveError, IconDecodeError) as e:
            state.flags.raise_flag(Flag.NO_MOD_ICON)
            state.log.notice(f"Caught icon fail: {e}")

    # ------------------------------------------------------------------
    # Batch scanning
    # ------------------------------------------------------------------

    def scan_directory(self, mods_directory: str | Path, recursive: bool = False) -> BatchReport:
        """
        Scan every mod artifact in a folder.

        Args:
            mods_directory: Folder holding mod zips and unpacked mod folders
            recursive: Descend into sub-folders that are not mods themselves

        Returns:
            BatchReport with one report per artifact, in sorted path order
        """
        if not isinstance(mods_directory, Path):
            mods_directory = Path(mods_directory)

        if not mods_directory.is_dir():
            raise FileNotFoundError(f"Directory does not exist: {mods_directory}")

        artifacts = self._find_mod_artifacts(mods_directory, recursive)
        report = BatchReport()

        if self.config.max_workers > 1 and len(artifacts) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
                results = list(pool.map(self._scan_isolated, artifacts))
        else:
            results = [self._scan_isolated(path) for path in artifacts]

        for result in results:
            if result is not None:
                report.add(result)
        return report

    def _scan_isolated(self, mod_path: Path) -> ModReport | None:
        try:
            return self.scan_mod(mod_path)
        except Exception as e:
            # One failing artifact must not abort the whole batch
            logger.error("Unexpected error scanning %s: %s", mod_path, e)
            return None

    def _find_mod_artifacts(self, directory: Path, recursive: bool) -> list[Path]:
        """
        Find mod artifacts in a folder.

        Every file and every sub-folder is an artifact. With *recursive*,
        sub-folders holding neither a descriptor nor a save-game marker are
        searched instead of scanned.
        """
        descriptor = self.policy.descriptor
        artifacts: list[Path] = []

        for item in sorted(directory.iterdir()):
            if item.name.startswith("."):
                continue
            if item.is_dir() and recursive:
                is_mod = (item / descriptor.filename).exists() or (item / descriptor.savegame_marker).exists()
                if not is_mod:
                    artifacts.extend(self._find_mod_artifacts(item, recursive))
                    continue
            artifacts.append(item)

        return artifacts


def scan_mod(
    mod_path: str | Path,
    policy: ScanPolicy | None = None,
    config: Config | None = None,
) -> ModReport:
    """
    Convenience function to scan a single mod.

    Args:
        mod_path: Path to the mod zip or folder
        policy: Optional scan policy
        config: Optional configuration

    Returns:
        ModReport
    """
    return ModScanner(policy=policy, config=config).scan_mod(mod_path)


def scan_directory(
    mods_directory: str | Path,
    recursive: bool = False,
    policy: ScanPolicy | None = None,
    config: Config | None = None,
) -> BatchReport:
    """
    Convenience function to scan a folder of mods.

    Args:
        mods_directory: Folder holding mods
        recursive: Descend into sub-folders that are not mods
        policy: Optional scan policy
        config: Optional configuration

    Returns:
        BatchReport with all results
    """
    return ModScanner(policy=policy, config=config).scan_directory(mods_directory, recursive=recursive)
