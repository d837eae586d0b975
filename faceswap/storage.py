"""Storage backend for image bytes.

Images are read from and written to a base directory on the local
filesystem that plays the role of the upload bucket. Keys are relative
paths inside that directory, for example ``'photos/party.jpg'``, and
results are written under the processed prefix with the same file name.
"""

from __future__ import annotations

import os

from faceswap.errors import FaceSwapError


class LocalBlobStore:
    """Blob store rooted at ``base_dir``.

    Args:
        base_dir: Directory holding the stored objects.
    """

    def __init__(self, base_dir: str) -> None:
        self.base_dir = base_dir

    def _path(self, key: str) -> str:
        root = os.path.abspath(self.base_dir)
        path = os.path.abspath(os.path.join(root, key))
        if os.path.commonpath([root, path]) != root:
            raise FaceSwapError(f"Key escapes the storage directory: {key}")
        return path

    def get(self, key: str) -> bytes:
        """Return the bytes stored under ``key``.

        Raises:
            FileNotFoundError: If nothing is stored under ``key``.
        """
        with open(self._path(key), "rb") as f:
            return f.read()

    def put(self, key: str, data: bytes) -> str:
        """Persist ``data`` under ``key``.

        Returns:
            A URL string that can be used by the frontend to retrieve the data.
        """
        dest_path = self._path(key)
        os.makedirs(os.path.dirname(dest_path), exist_ok=True)
        with open(dest_path, "wb") as f:
            f.write(data)
        return f"/image_library/{key}".replace("\\", "/")


def processed_key(image_key: str, processed_dir: str) -> str:
    """Key under which the overlaid version of ``image_key`` is stored."""
    return f"{processed_dir.rstrip('/')}/{os.path.basename(image_key)}"
