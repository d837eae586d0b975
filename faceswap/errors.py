"""Error kinds raised while overlaying emojis on an image.

``RenderError`` and ``CompositeError`` abort the current image. A
``CleanupWarning`` is only ever logged: it records a transient file that
could not be removed and never replaces an earlier failure.
"""

from __future__ import annotations


class FaceSwapError(Exception):
    """Base class for errors raised by the overlay pipeline."""


class RenderError(FaceSwapError):
    """An emoji asset is missing or could not be resized."""


class AssetWriteError(RenderError, OSError):
    """A rendered emoji could not be written to the transient store."""


class CompositeError(FaceSwapError):
    """Invalid overlay geometry, undecodable base image or encode failure."""


class DetectionError(FaceSwapError):
    """The face detector returned a response that could not be parsed."""


class CleanupWarning(UserWarning):
    """A tracked transient artifact could not be deleted.

    Attributes:
        handle: Path of the artifact that survived cleanup.
        cause: The error raised by the delete attempt.
    """

    def __init__(self, handle: str, cause: BaseException) -> None:
        super().__init__(f"could not remove {handle}: {cause}")
        self.handle = handle
        self.cause = cause
