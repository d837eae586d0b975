"""Service configuration read from environment variables.

Environment variables:
    BUCKET_NAME: Bucket whose upload events are processed (default 'uploads').
    ALLOWED_EXTENSIONS: '|'-separated image extensions (default '.jpg|.jpeg|.png').
    PROCESSED_DIR_NAME: Key prefix for processed images (default 'processed').
    IMAGE_LIBRARY_DIR: Base directory for local storage (default './image_library').
    EMOJI_DIR: Directory of the emoji assets (default: the packaged 'emoji' dir).
    TMP_DIR: Directory for transient files (default: system temp dir).
    OVERLAY_MODE: 'emotion' (every face) or 'fixed' (first face only).
    FIXED_EMOJI: Emoji used when OVERLAY_MODE is 'fixed' (default 'happy').
    MAX_CONCURRENT_IMAGES: Images processed at once per event; 0 = no limit.
    QUEUE_BACKEND: 'inline' (default) or 'rq'.
    REDIS_HOST, REDIS_PORT, RQ_QUEUE: Job queue connection.
    GOOGLE_CLOUD_PROJECT, VERTEX_LOCATION, DETECTION_MODEL: Face detector.
    LOG_LEVEL: Root logging level (default 'INFO').
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from faceswap.emoji_renderer import DEFAULT_EMOJI_DIR
from faceswap.models import EmojiCategory
from faceswap.pipeline import OverlayMode


@dataclass(frozen=True)
class Settings:
    bucket_name: str = "uploads"
    allowed_extensions: Tuple[str, ...] = (".jpg", ".jpeg", ".png")
    processed_dir_name: str = "processed"
    image_library_dir: str = "./image_library"
    emoji_dir: str = DEFAULT_EMOJI_DIR
    tmp_dir: Optional[str] = None
    overlay_mode: OverlayMode = OverlayMode.EMOTION
    fixed_emoji: EmojiCategory = EmojiCategory.HAPPY
    max_concurrent_images: int = 0
    queue_backend: str = "inline"
    redis_host: str = "redis"
    redis_port: int = 6379
    rq_queue: str = "faceswap"
    google_project: str = ""
    vertex_location: str = "us-central1"
    detection_model: str = "gemini-2.5-pro"
    log_level: str = "INFO"


def _split_extensions(raw: str) -> Tuple[str, ...]:
    return tuple(e.strip().lower() for e in raw.split("|") if e.strip())


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment.

    Raises:
        ValueError: If OVERLAY_MODE, FIXED_EMOJI, QUEUE_BACKEND or a
            numeric variable holds an unsupported value.
    """
    queue_backend = os.getenv("QUEUE_BACKEND", "inline").lower()
    if queue_backend not in ("inline", "rq"):
        raise ValueError(f"Unsupported QUEUE_BACKEND '{queue_backend}'")
    return Settings(
        bucket_name=os.getenv("BUCKET_NAME", "uploads"),
        allowed_extensions=_split_extensions(os.getenv("ALLOWED_EXTENSIONS", ".jpg|.jpeg|.png")),
        processed_dir_name=os.getenv("PROCESSED_DIR_NAME", "processed"),
        image_library_dir=os.getenv("IMAGE_LIBRARY_DIR", "./image_library"),
        emoji_dir=os.getenv("EMOJI_DIR") or DEFAULT_EMOJI_DIR,
        tmp_dir=os.getenv("TMP_DIR") or None,
        overlay_mode=OverlayMode(os.getenv("OVERLAY_MODE", "emotion").lower()),
        fixed_emoji=EmojiCategory(os.getenv("FIXED_EMOJI", "happy").lower()),
        max_concurrent_images=int(os.getenv("MAX_CONCURRENT_IMAGES", "0")),
        queue_backend=queue_backend,
        redis_host=os.getenv("REDIS_HOST", "redis"),
        redis_port=int(os.getenv("REDIS_PORT", "6379")),
        rq_queue=os.getenv("RQ_QUEUE", "faceswap"),
        google_project=os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        vertex_location=os.getenv("VERTEX_LOCATION", "us-central1"),
        detection_model=os.getenv("DETECTION_MODEL", "gemini-2.5-pro"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
