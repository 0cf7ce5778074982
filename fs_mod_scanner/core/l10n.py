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
Localized title and description lookup.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ..config.constants import ModScannerConstants
from .flags import Flag, FlagSet
from .log_collector import LogCollector
from .models import LocalizedStrings


def local_string(
    tree: ET.Element | None,
    key: str,
    locale: str,
    fallback: str,
    log: LogCollector | None = None,
) -> str:
    """
    Resolve a localized descriptor entry.

    Tries the requested locale, then English, then German, then *fallback*.
    """
    if tree is None:
        return fallback

    node = tree.find(key.lower())
    if node is None:
        return fallback

    try:
        for tag in (locale.lower(), *ModScannerConstants.LOCALE_FALLBACKS):
            if not tag:
                continue
            child = node.find(tag)
            if child is not None:
                return (child.text or "").strip()
    except (SyntaxError, KeyError, TypeError) as e:
        # ElementTree rejects locale tags that look like path expressions
        if log is not None:
            log.warning(f"Caught odd entry: {key} :: {e}")
    return fallback


def resolve_localization(
    tree: ET.Element | None,
    locale: str,
    flags: FlagSet,
    log: LogCollector | None = None,
) -> LocalizedStrings:
    """Resolve title and description, raising ``PERF_L10N_NOT_SET`` when either is missing."""
    title = local_string(tree, "title", locale, ModScannerConstants.TITLE_FALLBACK, log)
    description = local_string(tree, "description", locale, ModScannerConstants.DESCRIPTION_FALLBACK, log)

    if title == ModScannerConstants.TITLE_FALLBACK or description == "":
        flags.raise_flag(Flag.L10N_NOT_SET)

    return LocalizedStrings(title=title, description=description)
