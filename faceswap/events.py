"""Select the image keys to process from an upload notification."""

from __future__ import annotations

import os
from typing import Any, Iterable, List


def get_images_from_event(event: dict, bucket_name: str, allowed_extensions: Iterable[str]) -> List[str]:
    """Return the keys of uploaded images in record order.

    A record is kept when its bucket is ``bucket_name`` and the lowercased
    extension of its key is one of ``allowed_extensions``. Records that
    lack the S3 fields are ignored.
    """
    allowed = {e.lower() for e in allowed_extensions}
    images: List[str] = []
    for record in event.get("Records") or []:
        s3: Any = record.get("s3") or {}
        bucket = (s3.get("bucket") or {}).get("name")
        key = (s3.get("object") or {}).get("key")
        if bucket != bucket_name or not key:
            continue
        extension = os.path.splitext(key)[1].lower()
        if extension in allowed:
            images.append(key)
    return images
