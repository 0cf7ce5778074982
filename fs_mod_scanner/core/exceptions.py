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

"""FS Mod Scanner exceptions.

Collaborators (archive access, XML parsing, icon decoding) raise these;
the scan pipeline catches them at the call site and turns them into
flags or log lines, so a report is always produced.

Example:
    >>> from fs_mod_scanner.core.archive import open_archive
    >>> from fs_mod_scanner.core.exceptions import ParseError
    >>>
    >>> with open_archive("FS22_Example.zip", is_folder=False) as archive:
    ...     try:
    ...         tree = archive.read_xml("modDesc.xml")
    ...     except ParseError as e:
    ...         print(f"Broken descriptor: {e}")
"""


class ModScannerError(Exception):
    """Base exception for all FS Mod Scanner errors."""

    pass


class ArchiveError(ModScannerError):
    """Raised when a mod artifact cannot be opened or read.

    This can indicate:
    - Corrupted or truncated zip file
    - Missing file or folder
    - File system permission errors
    """

    pass


class ParseError(ModScannerError):
    """Raised when an XML member is present but structurally invalid."""

    def __init__(self, filename: str, message: str):
        self.filename = filename
        super().__init__(f"{filename}: {message}")


class IconDecodeError(ModScannerError):
    """Raised when an icon or map image cannot be decoded."""

    pass


class PolicyError(ModScannerError):
    """Raised when a scan policy file is invalid.

    This indicates:
    - Malformed YAML
    - Wrong value types (e.g. a non-integer quota)
    - Invalid regular expressions
    """

    pass


class ConfigError(ModScannerError):
    """Raised for invalid configuration values."""

    pass
