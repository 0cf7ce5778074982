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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

import struct
import zipfile
from pathlib import Path

import pytest
from dotenv import load_dotenv

from fs_mod_scanner.config.config import Config
from fs_mod_scanner.core.exceptions import IconDecodeError
from fs_mod_scanner.core.scan_policy import ScanPolicy
from fs_mod_scanner.core.scanner import ModScanner

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

project_root = Path(__file__).parent.parent
env_file = project_root / ".env"

if env_file.exists():
    load_dotenv(env_file)


FAKE_ICON_URI = "data:image/webp;base64,FAKE"


# ---------------------------------------------------------------------------
# Descriptor builder
# ---------------------------------------------------------------------------


def build_mod_desc(
    desc_version: int | None = 72,
    version: str | None = "1.0.0.0",
    author: str | None = "Tester",
    title: dict[str, str] | None = None,
    description: dict[str, str] | None = None,
    icon: str | None = "icon.dds",
    multiplayer: bool | None = True,
    extra: str = "",
) -> str:
    """Build a ``modDesc.xml`` document. Pass None to leave an element out."""
    if title is None:
        title = {"en": "Test Mod"}
    if description is None:
        description = {"en": "A mod used by the test suite"}

    root_attr = f' descVersion="{desc_version}"' if desc_version is not None else ""
    parts = [f'<?xml version="1.0" encoding="utf-8" standalone="no"?>\n<modDesc{root_attr}>']
    if author is not None:
        parts.append(f"  <author>{author}</author>")
    if version is not None:
        parts.append(f"  <version>{version}</version>")
    if title:
        parts.append("  <title>" + "".join(f"<{k}>{v}</{k}>" for k, v in title.items()) + "</title>")
    if description:
        parts.append(
            "  <description>" + "".join(f"<{k}>{v}</{k}>" for k, v in description.items()) + "</description>"
        )
    if icon is not None:
        parts.append(f"  <iconFilename>{icon}</iconFilename>")
    if multiplayer is not None:
        parts.append(f'  <multiplayer supported="{str(multiplayer).lower()}"/>')
    if extra:
        parts.append(extra)
    parts.append("</modDesc>")
    return "\n".join(parts)


@pytest.fixture
def mod_desc():
    """The descriptor builder, see :func:`build_mod_desc`."""
    return build_mod_desc


# ---------------------------------------------------------------------------
# Artifact factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_zip_mod(tmp_path: Path):
    """Factory fixture for creating zipped mods.

    Usage::

        path = make_zip_mod("FS22_Tractor", {
            "modDesc.xml": build_mod_desc(),
            "icon.dds": b"DDS ",
        })

    Member names ending in ``/`` become directory entries.
    """

    def _make(name: str, files: dict[str, str | bytes], suffix: str = ".zip") -> Path:
        path = tmp_path / f"{name}{suffix}"
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for member, content in files.items():
                if member.endswith("/"):
                    zf.writestr(zipfile.ZipInfo(member), b"")
                else:
                    zf.writestr(member, content)
        return path

    return _make


@pytest.fixture
def corrupt_zip_member():
    """Overwrite the start of one member's deflated data so reading it fails."""

    def _corrupt(path: Path, member: str) -> None:
        with zipfile.ZipFile(path) as zf:
            info = zf.getinfo(member)
        with open(path, "r+b") as fh:
            fh.seek(info.header_offset + 26)
            name_len, extra_len = struct.unpack("<HH", fh.read(4))
            fh.seek(info.header_offset + 30 + name_len + extra_len)
            fh.write(b"\xff" * min(8, info.compress_size))

    return _corrupt


@pytest.fixture
def make_folder_mod(tmp_path: Path):
    """Factory fixture for creating unpacked mod folders."""

    def _make(name: str, files: dict[str, str | bytes]) -> Path:
        folder = tmp_path / name
        folder.mkdir(parents=True, exist_ok=True)
        for member, content in files.items():
            fp = folder / member
            fp.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                fp.write_bytes(content)
            else:
                fp.write_text(content, encoding="utf-8")
        return folder

    return _make


@pytest.fixture
def make_policy(tmp_path: Path):
    """Factory fixture for creating :class:`ScanPolicy` from a YAML string.

    The YAML is merged on top of the built-in defaults.
    """
    _counter = [0]

    def _make(yaml_str: str) -> ScanPolicy:
        _counter[0] += 1
        p = tmp_path / f"policy-{_counter[0]}.yaml"
        p.write_text(yaml_str, encoding="utf-8")
        return ScanPolicy.from_yaml(p)

    return _make


# ---------------------------------------------------------------------------
# Scanner fixtures
# ---------------------------------------------------------------------------


class FakeIconDecoder:
    """Stands in for Pillow so tests can ship placeholder DDS bytes."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[bytes] = []

    def decode_icon(self, data: bytes, want_thumbnail: bool = False) -> str:
        self.calls.append(data)
        if self.fail:
            raise IconDecodeError("broken texture")
        return FAKE_ICON_URI

    def decode_map_image(self, data: bytes) -> str:
        self.calls.append(data)
        if self.fail:
            raise IconDecodeError("broken texture")
        return FAKE_ICON_URI


@pytest.fixture
def make_icon_decoder():
    """Factory fixture for :class:`FakeIconDecoder`; decoded images come back as ``fake_icon_uri``."""
    return FakeIconDecoder


@pytest.fixture
def fake_icon_uri() -> str:
    return FAKE_ICON_URI


@pytest.fixture
def make_scanner(monkeypatch):
    """Factory fixture for creating a :class:`ModScanner` isolated from the environment.

    Usage::

        scanner = make_scanner(compute_checksum=True)
        report = scanner.scan_mod(path)
    """
    for name in (
        "FS_MOD_SCANNER_LOCALE",
        "FS_MOD_SCANNER_POLICY",
        "FS_MOD_SCANNER_DECODE_ICONS",
        "FS_MOD_SCANNER_ICON_THUMBNAIL",
        "FS_MOD_SCANNER_DECODE_MAP_IMAGE",
        "FS_MOD_SCANNER_CHECKSUM",
        "FS_MOD_SCANNER_MAX_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)

    def _make(
        policy: ScanPolicy | None = None,
        icon_decoder: FakeIconDecoder | None = None,
        **config_kwargs,
    ) -> ModScanner:
        config_kwargs.setdefault("locale", "en")
        return ModScanner(
            policy=policy or ScanPolicy.default(),
            config=Config(**config_kwargs),
            icon_decoder=icon_decoder or FakeIconDecoder(),
        )

    return _make


@pytest.fixture
def unsupported_dds() -> bytes:
    """A 4x4 DDS texture whose FourCC pixel format Pillow has no decoder for."""
    header = struct.pack("<7I", 124, 0x1007, 4, 4, 0, 0, 0) + b"\x00" * 44
    pixel_format = struct.pack("<2I4s5I", 32, 0x4, b"ZZZZ", 0, 0, 0, 0, 0)
    caps = struct.pack("<5I", 0x1000, 0, 0, 0, 0)
    return b"DDS " + header + pixel_format + caps + b"\x00" * 64


@pytest.fixture
def clean_mod_files(mod_desc):
    """Members of a mod that passes every check."""
    return {
        "modDesc.xml": mod_desc(),
        "icon.dds": b"DDS fake icon",
        "vehicle.i3d": "<i3D/>",
        "vehicle.i3d.shapes": b"\x00" * 16,
        "textures/diffuse.dds": b"DDS fake texture",
    }
