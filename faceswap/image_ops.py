"""Image compositing utilities.

This module wraps the Pillow operations used to lay emojis over faces:
decoding the uploaded bytes, converting face boxes to pixel offsets,
pasting rendered emojis one after another, and encoding the result as
JPEG bytes.
"""

from __future__ import annotations

import logging
import math
from functools import reduce
from io import BytesIO
from typing import Iterable, Tuple

from PIL import Image, UnidentifiedImageError  # type: ignore[import]

from faceswap.emoji_renderer import clamp_fraction
from faceswap.errors import CompositeError
from faceswap.models import BoundingBox, RenderedEmoji

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "JPEG"
OUTPUT_QUALITY = 85

Position = Tuple[int, int]


def _open_image(data: bytes) -> Image.Image:
    """Open raw image bytes with Pillow and convert to RGB."""
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise CompositeError(f"Could not decode base image: {exc}") from exc
    if img.mode != "RGB":
        img = img.convert("RGB")
    return img


def face_position(box: BoundingBox, image_width: int, image_height: int) -> Position:
    """Return the pixel offset of the top-left corner of a face box."""
    x = clamp_fraction(box.left) * image_width
    y = clamp_fraction(box.top) * image_height
    return int(round(x)), int(round(y))


class Compositor:
    """Layer rendered emojis over a base image.

    The in-progress composite is a plain Pillow image. Each call to
    :meth:`compose` returns a new image and leaves its input untouched,
    so a sequence of overlays is a left fold starting from :meth:`load`.
    """

    def load(self, data: bytes) -> Image.Image:
        """Decode the base image."""
        return _open_image(data)

    def compose(self, state: Image.Image, emoji: RenderedEmoji, position: Position) -> Image.Image:
        """Paste ``emoji`` onto a copy of ``state`` at ``position``.

        Parts of the emoji outside the image are clipped.

        Raises:
            CompositeError: The position is not a pair of finite numbers
                or the emoji file cannot be read.
        """
        x, y = position
        # Callers other than face_position may pass float offsets.
        if not (math.isfinite(x) and math.isfinite(y)):
            raise CompositeError(f"Invalid overlay position {position!r}")

        logger.info("Composing image emoji=%s xy=+%d+%d", emoji.path, x, y)
        try:
            with Image.open(emoji.path) as overlay:
                overlay = overlay.convert("RGBA")
        except OSError as exc:
            raise CompositeError(f"Could not read emoji {emoji.path}: {exc}") from exc

        composed = state.copy()
        composed.paste(overlay, (int(x), int(y)), overlay)
        return composed

    def encode(self, state: Image.Image) -> bytes:
        """Flatten the composite and encode it as JPEG bytes."""
        buffer = BytesIO()
        try:
            state.convert("RGB").save(buffer, format=OUTPUT_FORMAT, quality=OUTPUT_QUALITY)
        except (OSError, ValueError) as exc:
            raise CompositeError(f"Could not encode composite: {exc}") from exc
        return buffer.getvalue()

    def overlay_sequence(
        self,
        base: Image.Image,
        overlays: Iterable[Tuple[RenderedEmoji, Position]],
    ) -> bytes:
        """Stack every overlay in order and encode the result.

        The first overlay ends up at the bottom of the stack.
        """
        composed = reduce(
            lambda state, item: self.compose(state, item[0], item[1]),
            overlays,
            base,
        )
        return self.encode(composed)

    def overlay_single(self, base: Image.Image, emoji: RenderedEmoji, position: Position) -> bytes:
        """Composite exactly one overlay and encode the result."""
        return self.encode(self.compose(base, emoji, position))
