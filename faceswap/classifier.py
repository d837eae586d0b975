"""Pick the emoji category that matches a face's dominant emotion."""

from __future__ import annotations

from faceswap.models import DetectedFace, EmojiCategory


def classify(face: DetectedFace) -> EmojiCategory:
    """Return the emoji category for the face's most confident emotion.

    Scores are scanned in detector order and a later score only wins when
    its confidence is strictly greater, so the earliest of several tied
    maxima is kept. Faces without scores, and labels outside the emoji
    set, map to ``EmojiCategory.UNKNOWN``.
    """
    if not face.emotions:
        return EmojiCategory.UNKNOWN

    best = face.emotions[0]
    for score in face.emotions[1:]:
        if score.confidence > best.confidence:
            best = score
    return EmojiCategory.from_label(best.category)
