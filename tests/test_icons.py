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
Tests for icon and map image decoding with Pillow.
"""

import base64
import io

import pytest
from PIL import Image

from fs_mod_scanner.core.exceptions import IconDecodeError
from fs_mod_scanner.core.icons import PillowIconDecoder

PREFIX = "data:image/webp;base64,"


def _png_bytes(size=(512, 300), color=(40, 120, 40, 255)):
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _decode_uri(uri):
    assert uri.startswith(PREFIX)
    return Image.open(io.BytesIO(base64.b64decode(uri[len(PREFIX) :])))


class TestPillowIconDecoder:
    """Images come back as WebP data URIs."""

    def test_decode_icon(self):
        uri = PillowIconDecoder().decode_icon(_png_bytes())
        image = _decode_uri(uri)
        assert image.format == "WEBP"
        assert image.size == (512, 300)

    def test_thumbnail(self):
        uri = PillowIconDecoder().decode_icon(_png_bytes(), want_thumbnail=True)
        width, height = _decode_uri(uri).size
        assert width <= 256
        assert height <= 256

    def test_map_image_is_cropped(self):
        uri = PillowIconDecoder().decode_map_image(_png_bytes((2048, 2048)))
        assert _decode_uri(uri).size == (512, 512)

    @pytest.mark.parametrize("data", [b"", b"\x00\x01 not an image"])
    def test_invalid_data(self, data):
        with pytest.raises(IconDecodeError):
            PillowIconDecoder().decode_icon(data)

    def test_unsupported_dds_format(self, unsupported_dds):
        with pytest.raises(IconDecodeError):
            PillowIconDecoder().decode_icon(unsupported_dds)

    def test_unsupported_map_image(self, unsupported_dds):
        with pytest.raises(IconDecodeError):
            PillowIconDecoder().decode_map_image(unsupported_dds)
