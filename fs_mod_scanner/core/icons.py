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
Icon and map image decoding.

Mod icons ship as DDS textures. They are decoded with Pillow and
re-encoded as WebP data URIs so a report can be rendered directly.
"""

from __future__ import annotations

import base64
import io

from PIL import Image

from ..config.constants import ModScannerConstants
from .exceptions import IconDecodeError


def to_webp_data_uri(image: Image.Image, quality: int = ModScannerConstants.WEBP_QUALITY) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="WEBP", quality=quality)
    return ModScannerConstants.WEBP_DATA_URI_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")


class PillowIconDecoder:
    """Decodes DDS (or any Pillow-readable) images into WebP data URIs."""

    def __init__(self, quality: int = ModScannerConstants.WEBP_QUALITY):
        self.quality = quality

    def _open(self, data: bytes) -> Image.Image:
        if not data:
            raise IconDecodeError("Empty image data")
        image = Image.open(io.BytesIO(data))
        image.load()
        return image.convert("RGBA")

    def decode_icon(self, data: bytes, want_thumbnail: bool = False) -> str:
        """
        Decode a mod icon.

        Args:
            data: Raw image bytes, usually DDS
            want_thumbnail: Shrink the image to fit 256x256

        Returns:
            ``data:image/webp;base64,...`` URI

        Raises:
            IconDecodeError: if the bytes are not a readable image
        """
        try:
            image = self._open(data)
            if want_thumbnail:
                image.thumbnail(ModScannerConstants.ICON_THUMBNAIL_SIZE)
            return to_webp_data_uri(image, self.quality)
        except IconDecodeError:
            raise
        except Exception as e:
            # Pillow plugins raise anything from OSError to NotImplementedError
            # for pixel formats they do not handle
            raise IconDecodeError(f"Unable to decode image: {e}") from e

    def decode_map_image(self, data: bytes) -> str:
        """Decode a map overview, scaled to 1024 and cropped to its centre 512 pixels."""
        try:
            image = self._open(data)
            image = image.resize(ModScannerConstants.MAP_IMAGE_RESIZE, Image.Resampling.NEAREST)
            image = image.crop(ModScannerConstants.MAP_IMAGE_CROP)
            return to_webp_data_uri(image, self.quality)
        except IconDecodeError:
            raise
        except Exception as e:
            raise IconDecodeError(f"Unable to decode map image: {e}") from e
