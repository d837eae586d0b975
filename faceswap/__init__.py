"""Emoji face-overlay package.

This package reacts to uploaded images: it takes the faces found in an
image, picks an emoji for each face based on its dominant expression,
and composites the emoji over the face. The core pipeline lives in
:mod:`faceswap.pipeline`; storage, detection and event handling are thin
wrappers around it. See individual modules for details.
"""

from faceswap.classifier import classify
from faceswap.errors import (
    AssetWriteError,
    CleanupWarning,
    CompositeError,
    DetectionError,
    FaceSwapError,
    RenderError,
)
from faceswap.models import BoundingBox, DetectedFace, EmojiCategory, EmotionScore
from faceswap.pipeline import OverlayMode, OverlayPipeline

__all__ = [
    "AssetWriteError",
    "BoundingBox",
    "CleanupWarning",
    "CompositeError",
    "DetectedFace",
    "DetectionError",
    "EmojiCategory",
    "EmotionScore",
    "FaceSwapError",
    "OverlayMode",
    "OverlayPipeline",
    "RenderError",
    "classify",
]
