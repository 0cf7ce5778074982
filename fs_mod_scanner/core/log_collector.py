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
Per-artifact trace log.

Lines are forwarded to the standard ``logging`` tree and kept, in order,
for inclusion in the artifact's report.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class _ModLogAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        return f"[mod-{self.extra['mod_uuid']}] {msg}", kwargs


class LogCollector:
    """Append-only log for one scan."""

    def __init__(self, mod_uuid: str):
        self.mod_uuid = mod_uuid
        self._adapter = _ModLogAdapter(logger, {"mod_uuid": mod_uuid})
        self._lines: list[str] = []

    def info(self, msg: str) -> None:
        self._lines.append(f"INFO: {msg}")
        self._adapter.info(msg)

    def warning(self, msg: str) -> None:
        self._lines.append(f"WARNING: {msg}")
        self._adapter.warning(msg)

    def notice(self, msg: str) -> None:
        # notices explain why a stage stopped; not a problem with the scanner
        self._lines.append(f"NOTICE: {msg}")
        self._adapter.info(msg)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)
