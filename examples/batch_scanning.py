#!/usr/bin/env python3
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
Batch scanning example - scan every mod in a Farming Simulator mod folder.

This example demonstrates:
1. Scanning a mod folder, optionally descending into collections
2. Listing broken mods and likely copies
3. Saving the full JSON report

Usage:
    python batch_scanning.py <mods_directory> [--recursive] [--workers=N] [--output=FILE]
"""

import argparse
from pathlib import Path

from fs_mod_scanner import Config, ModScanner
from fs_mod_scanner.core.flags import FlagCategory
from fs_mod_scanner.core.reporters.json_reporter import JSONReporter


def main():
    parser = argparse.ArgumentParser(description="Batch scan a mod folder")
    parser.add_argument("mods_directory", type=str, help="Path to the mods folder")
    parser.add_argument("--recursive", "-r", action="store_true", help="Descend into non-mod sub-folders")
    parser.add_argument("--workers", type=int, default=4, help="Number of mods scanned in parallel")
    parser.add_argument("--output", type=str, help="Save report to file (JSON)")

    args = parser.parse_args()

    mods_dir = Path(args.mods_directory)
    if not mods_dir.exists():
        print(f"Error: Directory not found: {mods_dir}")
        return 1

    scanner = ModScanner(config=Config(max_workers=args.workers, decode_icons=False))

    print(f"Scanning mods in: {mods_dir}")
    print(f"Recursive: {args.recursive}\n")

    try:
        report = scanner.scan_directory(mods_dir, recursive=args.recursive)
    except OSError as e:
        print(f"Error scanning directory: {e}")
        return 1

    print(f"{'=' * 60}")
    print("Mod Folder Report")
    print(f"{'=' * 60}")
    print(f"Total Mods Scanned: {report.total}")
    print(f"Usable: {report.usable_count}")
    print(f"Broken: {report.broken_count}")
    print(f"Save Games: {report.savegame_count}")

    print(f"\n{'=' * 60}")
    print("Mods that will not load:")
    print(f"{'=' * 60}")
    for result in report.reports:
        if result.is_usable:
            continue
        print(f"[BROKEN] {result.file_detail.short_name}")
        broken = sorted(flag.value for flag in result.issues if flag.category is FlagCategory.BROKEN)
        for name in broken[:3]:
            print(f"      - {name}")
        if len(broken) > 3:
            print(f"      ... and {len(broken) - 3} more")
        if result.file_detail.copy_name:
            print(f"    Likely a copy of {result.file_detail.copy_name}")
        print()

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(JSONReporter().generate_report(report))
        print(f"[OK] Report saved to {args.output}")

    return 0 if report.broken_count == 0 else 1


if __name__ == "__main__":
    exit(main())
