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
Constants for FS Mod Scanner.
"""

from pathlib import Path

from .._version import __version__ as PACKAGE_VERSION


class ModScannerConstants:
    """Constants used throughout the scanner."""

    VERSION = PACKAGE_VERSION

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    PACKAGE_ROOT = Path(__file__).parent.parent

    # Resource paths
    DATA_DIR = PACKAGE_ROOT / "data"
    DEFAULT_POLICY_PATH = DATA_DIR / "default_policy.yaml"
    BASE_GAME_DATA_PATH = DATA_DIR / "base_game.yaml"

    # Well-known archive members
    MOD_DESC_FILENAME = "modDesc.xml"
    SAVEGAME_MARKER = "careerSavegame.xml"

    # Descriptor defaults
    DEFAULT_AUTHOR = "--"
    DEFAULT_MOD_VERSION = "0.0.0.0"
    SAVEGAME_VERSION = "--"
    DEFAULT_ACTION_CATEGORY = "ALL"

    # Localization
    DEFAULT_LOCALE = "en"
    LOCALE_FALLBACKS = ("en", "de")
    TITLE_FALLBACK = "--"
    DESCRIPTION_FALLBACK = ""

    # Images
    ICON_THUMBNAIL_SIZE = (256, 256)
    MAP_IMAGE_RESIZE = (1024, 1024)
    MAP_IMAGE_CROP = (256, 256, 768, 768)
    WEBP_QUALITY = 75
    WEBP_DATA_URI_PREFIX = "data:image/webp;base64,"

    # Maps
    BASE_GAME_DATA_VARIABLE = "$data"
    FALLBACK_WEATHER_KEY = "mapUS"
    DEFAULT_GROWTH_STATE = 20

    @classmethod
    def get_data_path(cls) -> Path:
        """Get path to data directory."""
        return cls.DATA_DIR
