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
Tests for the scan policy system.
"""

import pytest
import yaml

from fs_mod_scanner.core.exceptions import PolicyError
from fs_mod_scanner.core.scan_policy import QuotaTracker, ScanPolicy


class TestDefaultPolicy:
    """The built-in policy carries the game's fixed tables."""

    def test_quotas(self):
        policy = ScanPolicy.default()
        assert dict(policy.quotas) == {"grle": 10, "pdf": 1, "png": 128, "txt": 2}

    def test_size_limits(self):
        policy = ScanPolicy.default()
        assert policy.size_limit("cache") == 10 * 1024 * 1024
        assert policy.size_limit("dds") == 12 * 1024 * 1024
        assert policy.size_limit("gdm") == 18 * 1024 * 1024
        assert policy.size_limit("shapes") == 256 * 1024 * 1024
        assert policy.size_limit("xml") == 256 * 1024
        assert policy.size_limit("i3d") is None

    def test_extensions(self):
        ext = ScanPolicy.default().extensions
        assert ext.supported_archive == "zip"
        assert ext.unsupported_archives == frozenset({"rar", "7z"})
        assert "" in ext.known_good
        assert "l64" not in ext.known_good
        assert ext.piracy == frozenset({"l64", "dat"})

    def test_malware(self):
        policy = ScanPolicy.default()
        assert policy.malware.matches("fs.deleteFile(path)")
        assert policy.malware.matches("x.deleteFolder(y)")
        assert not policy.malware.matches("deleteFile(path)")
        assert policy.is_safe_name("FS22_Courseplay")
        assert not policy.is_safe_name("fs22_courseplay")

    def test_descriptor(self):
        descriptor = ScanPolicy.default().descriptor
        assert descriptor.filename == "modDesc.xml"
        assert descriptor.savegame_marker == "careerSavegame.xml"
        assert descriptor.keyboard_device == "KB_MOUSE_DEFAULT"

    def test_policy_is_read_only(self):
        policy = ScanPolicy.default()
        with pytest.raises(TypeError):
            policy.quotas["png"] = 1


class TestCustomPolicy:
    """Custom policies merge on top of the defaults."""

    def test_override_single_quota(self, make_policy):
        policy = make_policy("quotas:\n  png: 10\n")
        assert policy.quotas["png"] == 10
        assert policy.quotas["pdf"] == 1
        assert policy.size_limit("dds") == 12582912

    def test_lists_replace(self, make_policy):
        policy = make_policy("malware:\n  safe_names: [FS22_MyTool]\n")
        assert policy.malware.safe_names == frozenset({"FS22_MyTool"})
        assert len(policy.malware.patterns) == 1

    def test_non_integer_quota(self, make_policy):
        with pytest.raises(PolicyError):
            make_policy("quotas:\n  png: lots\n")

    def test_boolean_quota(self, make_policy):
        with pytest.raises(PolicyError):
            make_policy("quotas:\n  png: true\n")

    def test_bad_regex(self, make_policy):
        with pytest.raises(PolicyError):
            make_policy("names:\n  valid_pattern: '([a-z'\n")

    def test_invalid_yaml(self, make_policy):
        with pytest.raises(PolicyError):
            make_policy("quotas: [unclosed\n")

    def test_top_level_must_be_mapping(self, make_policy):
        with pytest.raises(PolicyError):
            make_policy("- just\n- a list\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScanPolicy.from_yaml(tmp_path / "missing.yaml")

    def test_to_yaml_round_trip(self, tmp_path):
        out = tmp_path / "policy.yaml"
        ScanPolicy.default().to_yaml(out)

        data = yaml.safe_load(out.read_text(encoding="utf-8"))
        assert data["quotas"]["png"] == 128
        assert data["names"]["valid_pattern"] == r"^[A-Z_a-z]\w+$"

        reloaded = ScanPolicy.from_yaml(out)
        assert dict(reloaded.quotas) == dict(ScanPolicy.default().quotas)
        assert reloaded.extensions == ScanPolicy.default().extensions


class TestQuotaTracker:
    """Per-scan quota counting."""

    def test_counting(self):
        tracker = QuotaTracker({"pdf": 2, "txt": 2})
        tracker.tick("pdf")
        tracker.tick("txt")
        tracker.tick("dds")
        assert tracker.remaining("pdf") == 1
        assert tracker.counted("txt") == 1
        assert tracker.exhausted() == []

        tracker.tick("pdf")
        assert tracker.remaining("pdf") == 0
        assert tracker.exhausted() == ["pdf"]

    def test_zero_quota_is_exhausted(self):
        assert QuotaTracker({"pdf": 0}).exhausted() == ["pdf"]

    def test_trackers_are_independent(self):
        policy = ScanPolicy.default()
        first = QuotaTracker.from_policy(policy)
        second = QuotaTracker.from_policy(policy)
        first.tick("png")
        assert second.remaining("png") == 128
        assert policy.quotas["png"] == 128
