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
FS Mod Scanner - validation and metadata extraction for Farming Simulator mods.
"""

from ._version import __version__

__author__ = "Cisco Systems, Inc."


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Importing the package for its constants or config does not pull in
    Pillow or the scan pipeline.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "ModScannerConstants": (".config.constants", "ModScannerConstants"),
        "Flag": (".core.flags", "Flag"),
        "FlagCategory": (".core.flags", "FlagCategory"),
        "Badge": (".core.models", "Badge"),
        "BatchReport": (".core.models", "BatchReport"),
        "FileDetail": (".core.models", "FileDetail"),
        "ModDescriptor": (".core.models", "ModDescriptor"),
        "ModReport": (".core.models", "ModReport"),
        "ScanPolicy": (".core.scan_policy", "ScanPolicy"),
        "ModScanner": (".core.scanner", "ModScanner"),
        "scan_mod": (".core.scanner", "scan_mod"),
        "scan_directory": (".core.scanner", "scan_directory"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ModScanner",
    "scan_mod",
    "scan_directory",
    "ModReport",
    "BatchReport",
    "FileDetail",
    "ModDescriptor",
    "Badge",
    "Flag",
    "FlagCategory",
    "ScanPolicy",
    "Config",
    "ModScannerConstants",
]
