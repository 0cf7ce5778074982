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
Configuration class for FS Mod Scanner.

Values not passed explicitly are read from ``FS_MOD_SCANNER_*``
environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ..core.exceptions import ConfigError
from .constants import ModScannerConstants

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")


def _env_flag(name: str) -> bool | None:
    value = os.getenv(name, "").strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


@dataclass
class Config:
    """
    Configuration for FS Mod Scanner.
    """

    # Localization
    locale: str | None = None

    # Policy file (None = built-in default policy)
    policy_path: str | None = None

    # Image handling
    decode_icons: bool = True
    icon_thumbnail: bool = False
    decode_map_image: bool = False

    # Batch scanning
    max_workers: int = 1

    # Record an md5 of path + modification time on each report
    compute_checksum: bool = False

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.locale is None:
            self.locale = os.getenv("FS_MOD_SCANNER_LOCALE", ModScannerConstants.DEFAULT_LOCALE)

        if self.policy_path is None:
            self.policy_path = os.getenv("FS_MOD_SCANNER_POLICY") or None

        # Boolean toggles only override when still at their defaults
        if self.decode_icons and _env_flag("FS_MOD_SCANNER_DECODE_ICONS") is False:
            self.decode_icons = False

        if not self.icon_thumbnail and _env_flag("FS_MOD_SCANNER_ICON_THUMBNAIL"):
            self.icon_thumbnail = True

        if not self.decode_map_image and _env_flag("FS_MOD_SCANNER_DECODE_MAP_IMAGE"):
            self.decode_map_image = True

        if not self.compute_checksum and _env_flag("FS_MOD_SCANNER_CHECKSUM"):
            self.compute_checksum = True

        if self.max_workers == 1:
            if env_workers := os.getenv("FS_MOD_SCANNER_MAX_WORKERS"):
                try:
                    self.max_workers = int(env_workers)
                except ValueError as e:
                    raise ConfigError(f"FS_MOD_SCANNER_MAX_WORKERS must be an integer, got {env_workers!r}") from e

        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from .env file.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_file}")

        load_dotenv(config_file, override=True)
        return cls.from_env()
