"""Construct the collaborators of the service from :class:`Settings`."""

from __future__ import annotations

from faceswap.config import Settings
from faceswap.detection import GeminiFaceDetector
from faceswap.emoji_renderer import EmojiAssetRenderer
from faceswap.pipeline import OverlayPipeline
from faceswap.storage import LocalBlobStore


def build_pipeline(settings: Settings) -> OverlayPipeline:
    renderer = EmojiAssetRenderer(emoji_dir=settings.emoji_dir, tmp_dir=settings.tmp_dir)
    return OverlayPipeline(
        renderer=renderer,
        mode=settings.overlay_mode,
        fixed_emoji=settings.fixed_emoji,
    )


def build_store(settings: Settings) -> LocalBlobStore:
    return LocalBlobStore(settings.image_library_dir)


def build_detector(settings: Settings) -> GeminiFaceDetector:
    return GeminiFaceDetector(
        project_id=settings.google_project,
        location=settings.vertex_location,
        model_name=settings.detection_model,
    )
