# Copyright 2026 Cisco Systems, Inc. and its affiliates
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
Tests for the fs-mod-scanner command-line interface.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest
import yaml

from fs_mod_scanner.cli.cli import main


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in ("FS_MOD_SCANNER_LOCALE", "FS_MOD_SCANNER_POLICY", "FS_MOD_SCANNER_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def good_mod(make_zip_mod, clean_mod_files):
    return make_zip_mod("FS22_Good", clean_mod_files)


@pytest.fixture
def broken_mod(tmp_path):
    path = tmp_path / "FS22_Broken.zip"
    path.write_bytes(b"not a zip")
    return path


def run_cli(args: list[str], timeout: int = 60) -> tuple[str, str, int]:
    """Run the fs-mod-scanner CLI in a subprocess and return stdout, stderr, return code."""
    cmd = [sys.executable, "-m", "fs_mod_scanner.cli.cli"] + args
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=timeout,
        cwd=Path(__file__).parent.parent,
    )
    return result.stdout, result.stderr, result.returncode


class TestScanCommand:
    """The ``scan`` command."""

    def test_summary(self, good_mod, capsys):
        code = main(["scan", str(good_mod), "--no-icons"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Mod: FS22_Good" in out
        assert "[OK] USABLE" in out
        assert "Issues: 0" in out

    def test_json(self, good_mod, capsys):
        code = main(["scan", str(good_mod), "--no-icons", "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["record"]["fileDetail"]["shortName"] == "FS22_Good"
        assert data["record"]["canNotUse"] is False

    def test_markdown_to_file(self, good_mod, tmp_path, capsys):
        out_file = tmp_path / "report.md"
        code = main(["scan", str(good_mod), "--no-icons", "--format", "markdown", "-o", str(out_file)])
        assert code == 0
        assert out_file.read_text(encoding="utf-8").startswith("# FS22_Good")
        assert "Report saved to" in capsys.readouterr().out

    def test_fail_on_broken(self, broken_mod, capsys):
        assert main(["scan", str(broken_mod)]) == 0
        assert main(["scan", str(broken_mod), "--fail-on-broken"]) == 1
        assert "FILE_ERROR_UNREADABLE_ZIP" in capsys.readouterr().out

    def test_missing_path(self, tmp_path, capsys):
        code = main(["scan", str(tmp_path / "FS22_Nope.zip")])
        assert code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_custom_policy(self, make_zip_mod, mod_desc, tmp_path, capsys):
        files = {"modDesc.xml": mod_desc(), "icon.dds": b"DDS", "readme.txt": "read me"}
        path = make_zip_mod("FS22_Docs", files)
        policy = tmp_path / "policy.yaml"
        policy.write_text("quotas:\n  txt: 0\n", encoding="utf-8")

        main(["scan", str(path), "--no-icons", "--format", "json", "--policy", str(policy)])
        issues = json.loads(capsys.readouterr().out)["record"]["issues"]
        assert "PERF_TXT_TOO_MANY" in issues


class TestScanAllCommand:
    """The ``scan-all`` command."""

    def test_summary(self, good_mod, broken_mod, capsys):
        code = main(["scan-all", str(good_mod.parent), "--no-icons", "--workers", "2"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Mods Scanned: 2" in out
        assert "[FAIL] FS22_Broken" in out
        assert "[OK] FS22_Good" in out

    def test_fail_on_broken(self, good_mod, broken_mod):
        assert main(["scan-all", str(good_mod.parent), "--no-icons", "--fail-on-broken"]) == 1

    def test_empty_directory(self, tmp_path, capsys):
        empty = tmp_path / "mods"
        empty.mkdir()
        assert main(["scan-all", str(empty)]) == 1
        assert "No mods found" in capsys.readouterr().err

    def test_json(self, good_mod, capsys):
        main(["scan-all", str(good_mod.parent), "--no-icons", "--format", "json", "--compact"])
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["total"] == 1


class TestGeneratePolicy:
    """The ``generate-policy`` command."""

    def test_generate(self, tmp_path, capsys):
        out_file = tmp_path / "my_policy.yaml"
        assert main(["generate-policy", "-o", str(out_file)]) == 0
        data = yaml.safe_load(out_file.read_text(encoding="utf-8"))
        assert data["quotas"]["pdf"] == 1
        assert "Generated default scan policy" in capsys.readouterr().out


class TestEntryPoint:
    """Running the module as a program."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_module_run(self, good_mod):
        stdout, stderr, code = run_cli(["scan", str(good_mod), "--no-icons", "--format", "json"])
        assert code == 0, f"CLI failed: {stderr}"
        assert json.loads(stdout)["record"]["issues"] == []
