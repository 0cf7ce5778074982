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
Report assembly: usability, badges and the flat issue list.
"""

from __future__ import annotations

from .flags import Flag, FlagSet
from .models import Badge, FileDetail, LocalizedStrings, ModDescriptor, ModReport


def is_unusable(flags: FlagSet, file_detail: FileDetail) -> bool:
    """An artifact is unusable when any broken flag is raised. Save-games are always usable."""
    if file_detail.is_save_game:
        return False
    return flags.any_broken


def derive_badges(flags: FlagSet, file_detail: FileDetail, mod_desc: ModDescriptor) -> tuple[Badge, ...]:
    """Badges in display order, only those that apply."""
    save_game = file_detail.is_save_game
    candidates = (
        (Badge.BROKEN, not save_game and flags.any_broken),
        (Badge.FOLDER, file_detail.is_folder),
        (Badge.MALWARE, Flag.MALICIOUS_CODE in flags),
        (Badge.NO_MULTIPLAYER, not mod_desc.multiplayer and file_detail.is_folder),
        (Badge.NOT_A_MOD, Flag.MODDESC_MISSING in flags),
        (Badge.SCRIPTS_ONLY, mod_desc.script_files > 0),
        (Badge.PROBLEM, not save_game and flags.any_problem),
        (Badge.SAVEGAME, save_game),
    )
    return tuple(badge for badge, applies in candidates if applies)


def assemble_report(
    uuid: str,
    flags: FlagSet,
    file_detail: FileDetail,
    mod_desc: ModDescriptor,
    l10n: LocalizedStrings,
    checksum: str | None = None,
    log_lines: tuple[str, ...] = (),
) -> ModReport:
    """Fold the state accumulated by one scan into its final report.

    The report holds read-only snapshots of ``file_detail`` and ``mod_desc``,
    so later changes to the working objects do not reach it.
    """
    return ModReport(
        uuid=uuid,
        file_detail=file_detail.snapshot(),
        mod_desc=mod_desc.snapshot(),
        l10n=l10n,
        issues=flags.freeze(),
        badges=derive_badges(flags, file_detail, mod_desc),
        can_not_use=is_unusable(flags, file_detail),
        checksum=checksum,
        log=tuple(log_lines),
    )
