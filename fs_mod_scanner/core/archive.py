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
Read-only access to a mod artifact, either a zip archive or an unpacked folder.

Both flavours expose the same small interface: open, list entries, test
for existence and read members as text, bytes or an XML tree. Member
names always use forward slashes relative to the artifact root.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ArchiveError, ParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveEntry:
    """A single member of a mod artifact."""

    name: str
    is_folder: bool
    size: int

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot ("" when there is none)."""
        base = self.name.rsplit("/", 1)[-1]
        if "." not in base.lstrip("."):
            return ""
        return base.rsplit(".", 1)[-1].lower()


def parse_xml(content: str | bytes, filename: str = "<string>") -> ET.Element:
    """Parse XML into an element tree with lower-cased tag and attribute names.

    Mod authors are inconsistent with case (``iconFilename`` vs
    ``iconFileName``), so lookups are done on normalised names.

    Raises:
        ParseError: if the content is not well-formed XML
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ParseError(filename, str(e)) from e

    for element in root.iter():
        if isinstance(element.tag, str):
            element.tag = element.tag.lower()
        if element.attrib:
            element.attrib = {key.lower(): value for key, value in element.attrib.items()}
    return root


class ModArchive:
    """Common behaviour for zip and folder artifacts."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._opened = False

    def __enter__(self) -> ModArchive:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self) -> bool:
        """Open the artifact. Returns False when it cannot be read."""
        raise NotImplementedError

    def close(self) -> None:
        self._opened = False

    def list(self) -> list[ArchiveEntry]:
        raise NotImplementedError

    def exists(self, name: str) -> bool:
        raise NotImplementedError

    def read_bin(self, name: str) -> bytes | None:
        raise NotImplementedError

    def read_text(self, name: str) -> str | None:
        """Read a member as UTF-8 text, or None when it does not exist."""
        data = self.read_bin(name)
        if data is None:
            return None
        return data.decode("utf-8-sig", errors="replace")

    def read_xml(self, name: str) -> ET.Element | None:
        """Read and parse an XML member.

        Returns:
            The root element, or None when the member does not exist

        Raises:
            ParseError: if the member exists but is not well-formed
        """
        data = self.read_bin(name)
        if data is None:
            return None
        return parse_xml(data, name)

    def relative_folder(self, name: str | Path) -> str:
        """Path of *name* relative to the artifact root, with forward slashes."""
        path = Path(name)
        try:
            path = path.relative_to(self.path)
        except ValueError:
            pass
        return path.as_posix()

    def _require_open(self) -> None:
        if not self._opened:
            raise ArchiveError(f"Artifact is not open: {self.path}")


class ZipModArchive(ModArchive):
    """A zipped mod."""

    def __init__(self, path: str | Path):
        super().__init__(path)
        self._zip: zipfile.ZipFile | None = None
        self._names: set[str] = set()

    def open(self) -> bool:
        try:
            self._zip = zipfile.ZipFile(self.path)
        except (zipfile.BadZipFile, OSError) as e:
            logger.warning("Unable to open zip file %s: %s", self.path, e)
            return False
        self._names = {info.filename.rstrip("/") for info in self._zip.infolist()}
        self._opened = True
        return True

    def close(self) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None
        super().close()

    def list(self) -> list[ArchiveEntry]:
        self._require_open()
        return [
            ArchiveEntry(name=info.filename.rstrip("/"), is_folder=info.is_dir(), size=info.file_size)
            for info in self._zip.infolist()
        ]

    def exists(self, name: str) -> bool:
        self._require_open()
        return name in self._names

    def read_bin(self, name: str) -> bytes | None:
        self._require_open()
        if name not in self._names:
            return None
        try:
            return self._zip.read(name)
        except KeyError:
            # directory entries are stored with a trailing slash
            return None
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError, RuntimeError, NotImplementedError) as e:
            raise ArchiveError(f"Unable to read {name} from {self.path}: {e}") from e


class FolderModArchive(ModArchive):
    """An unpacked mod folder."""

    def open(self) -> bool:
        if not self.path.is_dir():
            logger.warning("Mod folder does not exist: %s", self.path)
            return False
        self._opened = True
        return True

    def list(self) -> list[ArchiveEntry]:
        self._require_open()
        entries = []
        try:
            for child in sorted(self.path.rglob("*")):
                is_dir = child.is_dir()
                entries.append(
                    ArchiveEntry(
                        name=self.relative_folder(child),
                        is_folder=is_dir,
                        size=0 if is_dir else child.stat().st_size,
                    )
                )
        except OSError as e:
            raise ArchiveError(f"Unable to list folder {self.path}: {e}") from e
        return entries

    def exists(self, name: str) -> bool:
        self._require_open()
        return (self.path / name).exists()

    def read_bin(self, name: str) -> bytes | None:
        self._require_open()
        target = self.path / name
        if not target.is_file():
            return None
        try:
            return target.read_bytes()
        except OSError as e:
            raise ArchiveError(f"Unable to read {name} from {self.path}: {e}") from e


def open_archive(path: str | Path, is_folder: bool) -> ModArchive:
    """Create the right archive reader for *path*. Call ``open()`` before use."""
    return FolderModArchive(path) if is_folder else ZipModArchive(path)
