"""RQ job functions.

The API enqueues :func:`process_image_job` once per uploaded image when
``QUEUE_BACKEND=rq``; the worker in ``workers/overlay_worker.py`` runs
them. Collaborators are rebuilt from the environment inside the worker
process.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from faceswap.config import load_settings
from faceswap.handler import process_image
from faceswap.services import build_detector, build_pipeline, build_store

logger = logging.getLogger(__name__)


def process_image_job(key: str) -> dict:
    """Process one stored image and return its result as a dict."""
    settings = load_settings()
    logger.info("Job started for %s", key)
    result = process_image(
        key,
        store=build_store(settings),
        detector=build_detector(settings),
        pipeline=build_pipeline(settings),
        processed_dir=settings.processed_dir_name,
    )
    return asdict(result)
