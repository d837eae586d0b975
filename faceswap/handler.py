"""Process the images named in an upload event.

For every image the flow is: read the bytes from the blob store, detect
faces, skip the image when there are none, run the overlay pipeline and
write the result under the processed prefix. Images of one event are
processed concurrently in worker threads; a failure aborts only its own
image and is reported in the summary.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from faceswap.detection import FaceDetector
from faceswap.events import get_images_from_event
from faceswap.pipeline import OverlayPipeline
from faceswap.storage import LocalBlobStore, processed_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageResult:
    key: str
    faces: int = 0
    output_key: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class EventSummary:
    images: List[str] = field(default_factory=list)
    results: List[ImageResult] = field(default_factory=list)

    @property
    def failed(self) -> List[ImageResult]:
        return [r for r in self.results if not r.ok]


def process_image(
    key: str,
    store: LocalBlobStore,
    detector: FaceDetector,
    pipeline: OverlayPipeline,
    processed_dir: str,
) -> ImageResult:
    """Overlay emojis on one stored image and upload the result.

    Errors from any step propagate unchanged.
    """
    image_bytes = store.get(key)
    faces = detector.detect(key, image_bytes)
    if not faces:
        logger.info("No faces found on %s; skipping", key)
        return ImageResult(key=key)

    new_image = pipeline.process(key, image_bytes, faces)
    output_key = processed_key(key, processed_dir)
    store.put(output_key, new_image)
    logger.info("Uploaded %s with %d face(s) to %s", key, len(faces), output_key)
    return ImageResult(key=key, faces=len(faces), output_key=output_key)


async def process_upload_event(
    event: dict,
    store: LocalBlobStore,
    detector: FaceDetector,
    pipeline: OverlayPipeline,
    bucket_name: str,
    allowed_extensions: List[str],
    processed_dir: str,
    max_concurrency: int = 0,
) -> EventSummary:
    """Process every matching image of ``event`` concurrently.

    Args:
        max_concurrency: Upper bound on images in flight; 0 means no bound.
    """
    images = get_images_from_event(event, bucket_name, allowed_extensions)
    logger.info("Found images on event: %s", images)
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None

    async def _run(key: str) -> ImageResult:
        try:
            if semaphore is None:
                return await asyncio.to_thread(
                    process_image, key, store, detector, pipeline, processed_dir
                )
            async with semaphore:
                return await asyncio.to_thread(
                    process_image, key, store, detector, pipeline, processed_dir
                )
        except Exception as exc:
            logger.exception("Processing %s failed", key)
            return ImageResult(key=key, error=f"{type(exc).__name__}: {exc}")

    results = await asyncio.gather(*(_run(key) for key in images))
    return EventSummary(images=images, results=list(results))
