"""Orchestration of the emoji overlay for a single image.

``OverlayPipeline.process`` decodes the image once, then for each face
picks an emoji, renders it at the padded face size and folds it onto the
running composite. All transient files belong to one
:class:`~faceswap.temp_resources.RunScope` that is released before
``process`` returns or raises.

Two modes are supported:

- ``OverlayMode.EMOTION``: every face gets the emoji of its dominant
  emotion, layered in detection order.
- ``OverlayMode.FIXED``: only the first face gets an emoji, always the
  configured category.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterator, Optional, Sequence, Tuple

from PIL import Image  # type: ignore[import]

from faceswap.classifier import classify
from faceswap.emoji_renderer import EmojiAssetRenderer, emoji_size
from faceswap.image_ops import Compositor, Position, face_position
from faceswap.models import DetectedFace, EmojiCategory, RenderedEmoji
from faceswap.temp_resources import RunScope, TempResourceTracker

logger = logging.getLogger(__name__)


class OverlayMode(str, Enum):
    EMOTION = "emotion"
    FIXED = "fixed"


class OverlayPipeline:
    """Turn an image and its detected faces into the emoji-covered JPEG.

    Collaborators are injected so tests can substitute fakes. The
    pipeline itself holds no per-image state and may be shared by
    concurrent runs.

    Args:
        renderer: Produces sized emoji files.
        compositor: Decodes, layers and encodes images.
        tracker: Hands out one cleanup scope per run.
        classifier: Maps a face to an emoji category.
        mode: Which faces get an emoji and how it is chosen.
        fixed_emoji: Category used in ``OverlayMode.FIXED``.
    """

    def __init__(
        self,
        renderer: Optional[EmojiAssetRenderer] = None,
        compositor: Optional[Compositor] = None,
        tracker: Optional[TempResourceTracker] = None,
        classifier: Callable[[DetectedFace], EmojiCategory] = classify,
        mode: OverlayMode = OverlayMode.EMOTION,
        fixed_emoji: EmojiCategory = EmojiCategory.HAPPY,
    ) -> None:
        self.renderer = renderer or EmojiAssetRenderer()
        self.compositor = compositor or Compositor()
        self.tracker = tracker or TempResourceTracker()
        self.classifier = classifier
        self.mode = OverlayMode(mode)
        self.fixed_emoji = EmojiCategory(fixed_emoji)

    def process(
        self,
        image_path: str,
        image_bytes: bytes,
        faces: Sequence[DetectedFace],
    ) -> bytes:
        """Overlay emojis on ``image_bytes`` and return the encoded result.

        Args:
            image_path: Key of the image, used for logging only.
            image_bytes: Raw bytes of the uploaded image.
            faces: Detected faces in detection order.

        Raises:
            RenderError: An emoji asset is missing or cannot be written.
            CompositeError: Bad geometry, undecodable image or encode
                failure.
        """
        with self.tracker.begin() as scope:
            base = self.compositor.load(image_bytes)
            width, height = base.size
            logger.info("Found size info for %s: %dx%d", image_path, width, height)

            if self.mode is OverlayMode.FIXED:
                result = self._overlay_first(base, width, height, faces, scope)
            else:
                overlays = self._render_each(width, height, faces, scope)
                result = self.compositor.overlay_sequence(base, overlays)

            logger.info(
                "Composed image %s (%s mode, %d face(s) detected)",
                image_path,
                self.mode.value,
                len(faces),
            )
            return result

    def _render_face(
        self,
        face: DetectedFace,
        category: EmojiCategory,
        width: int,
        height: int,
        scope: RunScope,
    ) -> Tuple[RenderedEmoji, Position]:
        box = face.bounding_box
        # Position first so invalid geometry fails before anything is written.
        position = face_position(box, width, height)
        target_width, target_height = emoji_size(box, width, height)
        emoji = self.renderer.render(category, target_width, target_height, scope)
        return emoji, position

    def _render_each(
        self,
        width: int,
        height: int,
        faces: Sequence[DetectedFace],
        scope: RunScope,
    ) -> Iterator[Tuple[RenderedEmoji, Position]]:
        # Lazy: face k+1 is rendered only once face k has been composed.
        for face in faces:
            yield self._render_face(face, self.classifier(face), width, height, scope)

    def _overlay_first(
        self,
        base: Image.Image,
        width: int,
        height: int,
        faces: Sequence[DetectedFace],
        scope: RunScope,
    ) -> bytes:
        if not faces:
            return self.compositor.encode(base)
        emoji, position = self._render_face(faces[0], self.fixed_emoji, width, height, scope)
        return self.compositor.overlay_single(base, emoji, position)
