"""Resize emoji assets to fit a face.

The asset library is a directory holding one ``<category>.png`` per
:class:`~faceswap.models.EmojiCategory`. Masters are read once per
process and never modified; every render produces a new resized copy on
disk under a random name, registered with the run's scope before it is
written.
"""

from __future__ import annotations

import logging
import math
import os
import tempfile
import uuid
from functools import lru_cache
from typing import Optional, Tuple

from PIL import Image  # type: ignore[import]

from faceswap.errors import AssetWriteError, CompositeError, RenderError
from faceswap.models import BoundingBox, EmojiCategory, RenderedEmoji
from faceswap.temp_resources import RunScope

logger = logging.getLogger(__name__)

# Margin in pixels added to both axes around the face.
EMOJI_PADDING = 10

DEFAULT_EMOJI_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "emoji")


def clamp_fraction(value: float) -> float:
    """Clamp a box fraction to [0, 1], rejecting NaN and infinities."""
    if not math.isfinite(value):
        raise CompositeError(f"Non-finite bounding box value: {value!r}")
    return min(1.0, max(0.0, value))


def emoji_size(box: BoundingBox, image_width: int, image_height: int) -> Tuple[int, int]:
    """Return the padded emoji size in pixels for a face box.

    For a 200px wide image and ``box.width == 0.5`` the width is
    ``round(0.5 * 200) + 10 == 110``.
    """
    width = int(round(clamp_fraction(box.width) * image_width)) + EMOJI_PADDING
    height = int(round(clamp_fraction(box.height) * image_height)) + EMOJI_PADDING
    return width, height


@lru_cache(maxsize=None)
def _load_master(path: str) -> Image.Image:
    with Image.open(path) as img:
        img.load()
        return img.convert("RGBA")


class EmojiAssetRenderer:
    """Produce correctly sized emoji rasters as transient PNG files.

    Args:
        emoji_dir: Directory of the static asset library.
        tmp_dir: Directory for rendered copies. Defaults to the system
            temp directory.
    """

    def __init__(self, emoji_dir: Optional[str] = None, tmp_dir: Optional[str] = None) -> None:
        self.emoji_dir = emoji_dir or DEFAULT_EMOJI_DIR
        self.tmp_dir = tmp_dir

    def asset_path(self, category: EmojiCategory) -> str:
        return os.path.join(self.emoji_dir, f"{EmojiCategory(category).value}.png")

    def _tmp_path(self) -> str:
        base = self.tmp_dir or tempfile.gettempdir()
        return os.path.join(base, f"{uuid.uuid4()}.png")

    def render(
        self,
        category: EmojiCategory,
        target_width: int,
        target_height: int,
        scope: RunScope,
    ) -> RenderedEmoji:
        """Resize the asset for ``category`` and write it to a tracked tmp file.

        Raises:
            RenderError: The asset is missing or unreadable, or the target
                size is not positive.
            AssetWriteError: The resized copy could not be written.
        """
        category = EmojiCategory(category)
        if target_width <= 0 or target_height <= 0:
            raise RenderError(
                f"Invalid emoji size {target_width}x{target_height} for {category.value}"
            )

        source = self.asset_path(category)
        if not os.path.isfile(source):
            raise RenderError(f"No emoji asset for category '{category.value}' at {source}")
        try:
            master = _load_master(source)
            resized = master.resize((target_width, target_height), Image.LANCZOS)
        except (OSError, ValueError) as exc:
            raise RenderError(f"Could not resize emoji '{category.value}': {exc}") from exc

        temp_path = scope.track(self._tmp_path())
        logger.info(
            "Creating tmp emoji image path=%s width=%d height=%d type=%s",
            temp_path,
            target_width,
            target_height,
            category.value,
        )
        try:
            resized.save(temp_path, format="PNG")
        except OSError as exc:
            raise AssetWriteError(f"Could not write emoji to {temp_path}: {exc}") from exc

        return RenderedEmoji(
            category=category,
            width=target_width,
            height=target_height,
            path=temp_path,
        )
