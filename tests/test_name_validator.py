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
Tests for artifact name validation.
"""

import pytest

from fs_mod_scanner.core.flags import Flag, FlagSet
from fs_mod_scanner.core.name_validator import validate_name
from fs_mod_scanner.core.scan_policy import ScanPolicy


@pytest.fixture
def policy():
    return ScanPolicy.default()


def _check(policy, short_name, extension="zip", is_folder=False):
    flags = FlagSet()
    result = validate_name(short_name, is_folder, extension, flags, policy)
    return result, set(flags)


class TestArchiveExtension:
    """Only zip files (or folders) can be mods."""

    def test_plain_zip_is_valid(self, policy):
        result, flags = _check(policy, "FS22_Tractor")
        assert result.valid
        assert result.copy_name is None
        assert flags == set()

    def test_extension_with_dot_and_case(self, policy):
        result, flags = _check(policy, "FS22_Tractor", ".ZIP")
        assert result.valid
        assert flags == set()

    @pytest.mark.parametrize("ext", ["rar", "7z"])
    def test_unsupported_archive(self, policy, ext):
        result, flags = _check(policy, "FS22_Tractor", ext)
        assert not result.valid
        assert flags == {Flag.UNSUPPORTED_ARCHIVE}

    def test_garbage_file(self, policy):
        result, flags = _check(policy, "readme", "txt")
        assert not result.valid
        assert flags == {Flag.GARBAGE_FILE}

    def test_folder_ignores_extension(self, policy):
        result, flags = _check(policy, "FS22_Tractor", "", is_folder=True)
        assert result.valid
        assert flags == set()


class TestNameShape:
    """Name rules are applied in a fixed order."""

    def test_starts_with_digit(self, policy):
        result, flags = _check(policy, "22_Tractor")
        assert not result.valid
        assert flags == {Flag.NAME_STARTS_DIGIT}

    def test_zip_pack_hint_does_not_stop_checks(self, policy):
        result, flags = _check(policy, "FS22_Pack_UNZIP_me")
        assert result.valid
        assert flags == {Flag.LIKELY_ZIP_PACK}

    def test_zip_pack_hint_with_digit(self, policy):
        result, flags = _check(policy, "1_unzip_first")
        assert not result.valid
        assert flags == {Flag.LIKELY_ZIP_PACK, Flag.NAME_STARTS_DIGIT}

    def test_numbered_copy(self, policy):
        result, flags = _check(policy, "FS22_Tractor (2)")
        assert not result.valid
        assert result.copy_name == "FS22_Tractor"
        assert flags == {Flag.LIKELY_COPY}

    def test_windows_copy(self, policy):
        result, flags = _check(policy, "FS22_Tractor - Copy")
        assert result.copy_name == "FS22_Tractor"
        assert flags == {Flag.LIKELY_COPY}

    def test_other_invalid_name(self, policy):
        result, flags = _check(policy, "FS22-Tractor")
        assert not result.valid
        assert result.copy_name is None
        assert flags == set()

    def test_single_character_name_is_invalid(self, policy):
        result, _ = _check(policy, "A")
        assert not result.valid

    def test_non_ascii_digit_is_not_a_leading_digit(self, policy):
        result, flags = _check(policy, "٣Mod")
        assert Flag.NAME_STARTS_DIGIT not in flags
        assert not result.valid
