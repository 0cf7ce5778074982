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
Markdown format reporter for mod scan results.
"""

from ..flags import FlagCategory
from ..models import BatchReport, ModReport


class MarkdownReporter:
    """Generates Markdown format reports."""

    def __init__(self, detailed: bool = True):
        """
        Initialize Markdown reporter.

        Args:
            detailed: If True, include file lists and the scan log
        """
        self.detailed = detailed

    def generate_report(self, data: ModReport | BatchReport) -> str:
        """
        Generate Markdown report.

        Args:
            data: ModReport or BatchReport object

        Returns:
            Markdown string
        """
        if isinstance(data, ModReport):
            return "\n".join(self._mod_section(data, level=1))
        return self._generate_batch_report(data)

    def _mod_section(self, report: ModReport, level: int) -> list[str]:
        detail = report.file_detail
        desc = report.mod_desc
        heading = "#" * level
        lines = []

        lines.append(f"{heading} {detail.short_name}")
        lines.append("")
        lines.append(f"**Title:** {report.l10n.title}")
        lines.append(f"**Path:** {detail.full_path}")
        lines.append(f"**Status:** {'[FAIL] NOT USABLE' if report.can_not_use else '[OK] USABLE'}")
        lines.append(f"**Version:** {desc.version}")
        lines.append(f"**Author:** {desc.author}")
        if report.badges:
            lines.append(f"**Badges:** {', '.join(b.value for b in report.badges)}")
        lines.append("")

        if report.issues:
            lines.append(f"{heading}# Issues")
            lines.append("")
            for category in FlagCategory:
                raised = sorted(flag.value for flag in report.issues if flag.category is category)
                for name in raised:
                    lines.append(f"- **{category.value}:** `{name}`")
            lines.append("")
        else:
            lines.append(f"{heading}# [OK] No Issues Found")
            lines.append("")

        if self.detailed:
            file_lists = (
                ("Oversized files", detail.too_big_files),
                ("Files with spaces", detail.space_files),
                ("Unexpected files", detail.extra_files),
                ("PNG textures", detail.png_texture),
            )
            for title, names in file_lists:
                if not names:
                    continue
                lines.append(f"{heading}# {title}")
                lines.append("")
                for name in names:
                    lines.append(f"- `{name}`")
                lines.append("")

            if desc.dependencies:
                lines.append(f"{heading}# Dependencies")
                lines.append("")
                for dep in desc.dependencies:
                    lines.append(f"- {dep}")
                lines.append("")

            if report.log:
                lines.append(f"{heading}# Log")
                lines.append("")
                lines.append("```")
                lines.extend(report.log)
                lines.append("```")
                lines.append("")

        return lines

    def _generate_batch_report(self, report: BatchReport) -> str:
        lines = []

        lines.append("# Mod Folder Scan Report")
        lines.append("")
        lines.append(f"**Timestamp:** {report.timestamp.isoformat()}")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append(f"- **Mods Scanned:** {report.total}")
        lines.append(f"- **Usable:** {report.usable_count}")
        lines.append(f"- **Broken:** {report.broken_count}")
        lines.append(f"- **With Problems:** {report.problem_count}")
        lines.append(f"- **Save Games:** {report.savegame_count}")
        lines.append("")

        lines.append("## Mods")
        lines.append("")
        lines.append("| Mod | Usable | Version | Issues |")
        lines.append("|-----|--------|---------|--------|")
        for mod in report.reports:
            usable = "no" if mod.can_not_use else "yes"
            lines.append(f"| {mod.file_detail.short_name} | {usable} | {mod.mod_desc.version} | {len(mod.issues)} |")
        lines.append("")

        if self.detailed:
            for mod in report.reports:
                lines.extend(self._mod_section(mod, level=3))

        return "\n".join(lines)
