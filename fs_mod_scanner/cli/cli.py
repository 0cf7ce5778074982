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

"""Command-line interface for FS Mod Scanner."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from ..config.config import Config
from ..core.exceptions import ModScannerError
from ..core.models import BatchReport, ModReport
from ..core.reporters.json_reporter import JSONReporter
from ..core.reporters.markdown_reporter import MarkdownReporter
from ..core.scan_policy import ScanPolicy
from ..core.scanner import ModScanner


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _make_status_printer(args: argparse.Namespace) -> Callable[[str], None]:
    """Return a printer that sends to stderr when JSON output is active."""
    is_json = getattr(args, "format", "summary") == "json"

    def _print(msg: str) -> None:
        print(msg, file=sys.stderr if is_json else sys.stdout)

    return _print


def _format_output(args: argparse.Namespace, report: ModReport | BatchReport) -> str:
    """Generate the formatted output string for a report."""
    fmt = getattr(args, "format", "summary")
    if fmt == "json":
        return JSONReporter(pretty=not args.compact).generate_report(report)
    if fmt == "markdown":
        return MarkdownReporter(detailed=args.detailed).generate_report(report)
    if isinstance(report, BatchReport):
        return _generate_batch_summary(report)
    return _generate_summary(report)


def _write_output(args: argparse.Namespace, output: str) -> None:
    """Write *output* to a file or stdout."""
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(output)
        _make_status_printer(args)(f"Report saved to: {args.output}")
    else:
        print(output)


def _build_scanner(args: argparse.Namespace) -> ModScanner:
    config = Config(
        locale=args.locale,
        policy_path=args.policy,
        decode_icons=not args.no_icons,
        icon_thumbnail=args.thumbnail,
        max_workers=args.workers,
    )
    return ModScanner(config=config)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def scan_command(args: argparse.Namespace) -> int:
    """Handle the ``scan`` command for a single mod."""
    mod_path = Path(args.mod_path)
    if not mod_path.exists():
        print(f"Error: Path does not exist: {mod_path}", file=sys.stderr)
        return 1

    try:
        report = _build_scanner(args).scan_mod(mod_path)
        _write_output(args, _format_output(args, report))
    except ModScannerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1

    if args.fail_on_broken and report.can_not_use:
        return 1
    return 0


def scan_all_command(args: argparse.Namespace) -> int:
    """Handle the ``scan-all`` command for a folder of mods."""
    mods_dir = Path(args.mods_directory)
    if not mods_dir.is_dir():
        print(f"Error: Directory does not exist: {mods_dir}", file=sys.stderr)
        return 1

    try:
        report = _build_scanner(args).scan_directory(mods_dir, recursive=args.recursive)
    except ModScannerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1

    if report.total == 0:
        print("No mods found to scan.", file=sys.stderr)
        return 1

    _write_output(args, _format_output(args, report))

    if args.fail_on_broken and report.usable_count < report.total:
        return 1
    return 0


def generate_policy_command(args: argparse.Namespace) -> int:
    """Handle the ``generate-policy`` command."""
    output_path = Path(args.output)
    try:
        ScanPolicy.default().to_yaml(output_path)
    except (OSError, ModScannerError) as e:
        print(f"Error generating policy: {e}", file=sys.stderr)
        return 1

    print(f"Generated default scan policy: {output_path}\n")
    print("Edit the file to customise, then use:")
    print(f"  fs-mod-scanner scan --policy {output_path} /path/to/FS22_Mod.zip")
    return 0


# ---------------------------------------------------------------------------
# Summary formatters
# ---------------------------------------------------------------------------


def _generate_summary(report: ModReport) -> str:
    detail = report.file_detail
    lines = [
        "=" * 60,
        f"Mod: {detail.short_name}",
        "=" * 60,
        f"Title: {report.l10n.title}",
        f"Status: {'[FAIL] NOT USABLE' if report.can_not_use else '[OK] USABLE'}",
        f"Version: {report.mod_desc.version}",
        f"Author: {report.mod_desc.author}",
        f"Badges: {', '.join(b.value for b in report.badges) or '-'}",
        f"Issues: {len(report.issues)}",
    ]
    for name in sorted(flag.value for flag in report.issues):
        lines.append(f"  - {name}")
    if detail.copy_name:
        lines.append(f"Likely a copy of: {detail.copy_name}")
    return "\n".join(lines)


def _generate_batch_summary(report: BatchReport) -> str:
    lines = [
        "=" * 60,
        "Mod Folder Scan Report",
        "=" * 60,
        f"Mods Scanned: {report.total}",
        f"Usable: {report.usable_count}",
        f"Broken: {report.broken_count}",
        f"With Problems: {report.problem_count}",
        f"Save Games: {report.savegame_count}",
        "",
        "Individual Mods:",
    ]
    for mod in report.reports:
        tag = "[FAIL]" if mod.can_not_use else "[OK]"
        lines.append(f"  {tag} {mod.file_detail.short_name} - {len(mod.issues)} issues")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Shared argparse helpers
# ---------------------------------------------------------------------------


def _add_common_scan_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags shared between ``scan`` and ``scan-all``."""
    parser.add_argument(
        "--format",
        choices=["summary", "json", "markdown"],
        default="summary",
        help="Output format (default: summary)",
    )
    parser.add_argument("--output", "-o", help="Output file path")
    parser.add_argument("--detailed", action="store_true", help="Include file lists and logs (Markdown output only)")
    parser.add_argument("--compact", action="store_true", help="Compact JSON output")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--locale", default=None, help="Locale for title and description (or set FS_MOD_SCANNER_LOCALE)")
    parser.add_argument("--policy", metavar="PATH", help="Path to a custom scan policy YAML")
    parser.add_argument("--no-icons", action="store_true", help="Skip decoding mod icons")
    parser.add_argument("--thumbnail", action="store_true", help="Shrink decoded icons to 256x256")
    parser.add_argument("--workers", type=int, default=1, metavar="N", help="Scan N mods in parallel (scan-all)")
    parser.add_argument("--fail-on-broken", action="store_true", help="Exit with error if any mod is not usable")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="FS Mod Scanner - Validate Farming Simulator mod files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fs-mod-scanner scan FS22_MyMod.zip
  fs-mod-scanner scan FS22_MyMod.zip --format json
  fs-mod-scanner scan-all ~/Documents/My\\ Games/FarmingSimulator2022/mods
  fs-mod-scanner scan-all ./mods --recursive --workers 4 --format markdown -o report.md
  fs-mod-scanner generate-policy -o my_policy.yaml
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # -- scan --------------------------------------------------------------
    scan_p = subparsers.add_parser("scan", help="Scan a single mod zip or folder")
    scan_p.add_argument("mod_path", help="Path to mod zip or folder")
    _add_common_scan_flags(scan_p)

    # -- scan-all ----------------------------------------------------------
    scan_all_p = subparsers.add_parser("scan-all", help="Scan every mod in a folder")
    scan_all_p.add_argument("mods_directory", help="Folder containing mods")
    scan_all_p.add_argument("--recursive", "-r", action="store_true", help="Descend into non-mod sub-folders")
    _add_common_scan_flags(scan_all_p)

    # -- generate-policy ---------------------------------------------------
    gp_p = subparsers.add_parser("generate-policy", help="Generate a default scan policy YAML")
    gp_p.add_argument("--output", "-o", default="scan_policy.yaml", help="Output file path")

    # -- dispatch ----------------------------------------------------------
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(args)

    dispatch = {
        "scan": scan_command,
        "scan-all": scan_all_command,
        "generate-policy": generate_policy_command,
    }
    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
