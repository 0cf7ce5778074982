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
File name checks for a mod artifact.

The game only loads zip files (or, for single player, folders) whose
name is a plain identifier. Anything else is flagged as broken.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .flags import Flag, FlagSet
from .scan_policy import ScanPolicy

_STARTS_WITH_DIGIT = re.compile(r"^\d", re.ASCII)


@dataclass(frozen=True)
class NameCheck:
    """Outcome of validating an artifact name."""

    valid: bool
    copy_name: str | None = None


def validate_name(
    short_name: str,
    is_folder: bool,
    extension: str,
    flags: FlagSet,
    policy: ScanPolicy,
) -> NameCheck:
    """
    Check an artifact's name and raise broken flags for every rule it breaks.

    Rules are applied in a fixed order; consumers rely on which single flag
    a given name shape produces.

    Args:
        short_name: File or folder name without its extension
        is_folder: Whether the artifact is an unpacked folder
        extension: Extension of the artifact path, without the dot
        flags: Flag set to raise into
        policy: Scan policy providing the name patterns

    Returns:
        NameCheck with validity and, for likely copies, the recovered base name
    """
    extension = extension.lower().lstrip(".")
    names = policy.names

    if not is_folder and extension != policy.extensions.supported_archive:
        if extension in policy.extensions.unsupported_archives:
            flags.raise_flag(Flag.UNSUPPORTED_ARCHIVE)
        else:
            flags.raise_flag(Flag.GARBAGE_FILE)
        return NameCheck(valid=False)

    if names.zip_pack_pattern.search(short_name):
        flags.raise_flag(Flag.LIKELY_ZIP_PACK)

    if _STARTS_WITH_DIGIT.match(short_name):
        flags.raise_flag(Flag.NAME_STARTS_DIGIT)
        return NameCheck(valid=False)

    if not names.valid_pattern.search(short_name):
        match = names.copy_pattern.search(short_name)
        if match is not None:
            flags.raise_flag(Flag.LIKELY_COPY)
            return NameCheck(valid=False, copy_name=match.group(1))
        return NameCheck(valid=False)

    return NameCheck(valid=True)
