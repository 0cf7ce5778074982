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
Diagnostic flags raised while validating a mod.

Every flag belongs to exactly one of three fixed categories:

* **broken**  - the artifact cannot be used as a mod
* **problem** - usable, but with a quality, performance or policy concern
* **info**    - informational only, never blocking

Flag values are the stable names written to reports.
"""

from __future__ import annotations

from enum import Enum


class FlagCategory(str, Enum):
    """Severity tier of a flag."""

    BROKEN = "broken"
    PROBLEM = "problem"
    INFO = "info"


class Flag(str, Enum):
    """All diagnostic flags, valued by their report name."""

    # broken
    GARBAGE_FILE = "FILE_ERROR_GARBAGE_FILE"
    LIKELY_COPY = "FILE_ERROR_LIKELY_COPY"
    LIKELY_ZIP_PACK = "FILE_ERROR_LIKELY_ZIP_PACK"
    NAME_INVALID = "FILE_ERROR_NAME_INVALID"
    NAME_STARTS_DIGIT = "FILE_ERROR_NAME_STARTS_DIGIT"
    UNREADABLE_ARCHIVE = "FILE_ERROR_UNREADABLE_ZIP"
    UNSUPPORTED_ARCHIVE = "FILE_ERROR_UNSUPPORTED_ARCHIVE"
    NO_MOD_VERSION = "MOD_ERROR_NO_MOD_VERSION"
    MODDESC_MISSING = "NOT_MOD_MODDESC_MISSING"
    MODDESC_PARSE_ERROR = "NOT_MOD_MODDESC_PARSE_ERROR"
    MODDESC_VERSION_OLD_OR_MISSING = "NOT_MOD_MODDESC_VERSION_OLD_OR_MISSING"

    # info
    NO_MULTIPLAYER_UNZIPPED = "INFO_NO_MULTIPLAYER_UNZIPPED"
    IS_A_SAVEGAME = "FILE_IS_A_SAVEGAME"
    MALICIOUS_CODE = "MALICIOUS_CODE"

    # problem
    MIGHT_BE_PIRACY = "INFO_MIGHT_BE_PIRACY"
    MODDESC_DAMAGED_RECOVERABLE = "MOD_ERROR_MODDESC_DAMAGED_RECOVERABLE"
    NO_MOD_ICON = "MOD_ERROR_NO_MOD_ICON"
    DDS_TOO_BIG = "PERF_DDS_TOO_BIG"
    GDM_TOO_BIG = "PERF_GDM_TOO_BIG"
    GRLE_TOO_MANY = "PERF_GRLE_TOO_MANY"
    HAS_EXTRA = "PERF_HAS_EXTRA"
    I3D_TOO_BIG = "PERF_I3D_TOO_BIG"
    L10N_NOT_SET = "PERF_L10N_NOT_SET"
    PDF_TOO_MANY = "PERF_PDF_TOO_MANY"
    PNG_TOO_MANY = "PERF_PNG_TOO_MANY"
    SHAPES_TOO_BIG = "PERF_SHAPES_TOO_BIG"
    SPACE_IN_FILE = "PERF_SPACE_IN_FILE"
    TXT_TOO_MANY = "PERF_TXT_TOO_MANY"
    XML_TOO_BIG = "PERF_XML_TOO_BIG"
    PNG_TEXTURE = "PREF_PNG_TEXTURE"

    @property
    def category(self) -> FlagCategory:
        return _CATEGORY_OF[self]


BROKEN_FLAGS: frozenset[Flag] = frozenset(
    {
        Flag.GARBAGE_FILE,
        Flag.LIKELY_COPY,
        Flag.LIKELY_ZIP_PACK,
        Flag.NAME_INVALID,
        Flag.NAME_STARTS_DIGIT,
        Flag.UNREADABLE_ARCHIVE,
        Flag.UNSUPPORTED_ARCHIVE,
        Flag.NO_MOD_VERSION,
        Flag.MODDESC_MISSING,
        Flag.MODDESC_PARSE_ERROR,
        Flag.MODDESC_VERSION_OLD_OR_MISSING,
    }
)

INFO_FLAGS: frozenset[Flag] = frozenset(
    {
        Flag.NO_MULTIPLAYER_UNZIPPED,
        Flag.IS_A_SAVEGAME,
        Flag.MALICIOUS_CODE,
    }
)

PROBLEM_FLAGS: frozenset[Flag] = frozenset(set(Flag) - BROKEN_FLAGS - INFO_FLAGS)

_CATEGORY_OF: dict[Flag, FlagCategory] = {
    **{flag: FlagCategory.BROKEN for flag in BROKEN_FLAGS},
    **{flag: FlagCategory.PROBLEM for flag in PROBLEM_FLAGS},
    **{flag: FlagCategory.INFO for flag in INFO_FLAGS},
}

# Oversize flag per file type. "cache" files report under the I3D label.
TOO_BIG_FLAGS: dict[str, Flag] = {
    "cache": Flag.I3D_TOO_BIG,
    "dds": Flag.DDS_TOO_BIG,
    "gdm": Flag.GDM_TOO_BIG,
    "shapes": Flag.SHAPES_TOO_BIG,
    "xml": Flag.XML_TOO_BIG,
}

TOO_MANY_FLAGS: dict[str, Flag] = {
    "grle": Flag.GRLE_TOO_MANY,
    "pdf": Flag.PDF_TOO_MANY,
    "png": Flag.PNG_TOO_MANY,
    "txt": Flag.TXT_TOO_MANY,
}


class FlagSet:
    """Flags raised during a single scan.

    Flags are only ever added; raising an already raised flag is a no-op.
    Raising order is kept for logging, membership is what gets reported.
    """

    def __init__(self) -> None:
        self._raised: dict[Flag, None] = {}

    def raise_flag(self, flag: Flag) -> None:
        self._raised.setdefault(flag, None)

    def __contains__(self, flag: object) -> bool:
        return flag in self._raised

    def __iter__(self):
        return iter(self._raised)

    def __len__(self) -> int:
        return len(self._raised)

    def in_category(self, category: FlagCategory) -> list[Flag]:
        return [flag for flag in self._raised if flag.category is category]

    @property
    def any_broken(self) -> bool:
        return any(flag in BROKEN_FLAGS for flag in self._raised)

    @property
    def any_problem(self) -> bool:
        return any(flag in PROBLEM_FLAGS for flag in self._raised)

    def freeze(self) -> frozenset[Flag]:
        return frozenset(self._raised)
