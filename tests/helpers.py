"""Builders for test images and faces."""

import io

from PIL import Image  # type: ignore

from faceswap.models import BoundingBox, DetectedFace, EmotionScore


def jpeg_bytes(width=200, height=100, color=(255, 255, 255)):
    img = Image.new("RGB", (width, height), color=color)
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


def make_face(left=0.1, top=0.1, width=0.2, height=0.2, emotions=()):
    return DetectedFace(
        bounding_box=BoundingBox(left=left, top=top, width=width, height=height),
        emotions=tuple(EmotionScore(category=c, confidence=s) for c, s in emotions),
    )


def face_payload(left=0.1, top=0.1, width=0.2, height=0.2, emotions=()):
    """The same face in the Rekognition JSON shape."""
    return {
        "BoundingBox": {"Left": left, "Top": top, "Width": width, "Height": height},
        "Emotions": [{"Type": c, "Confidence": s * 100} for c, s in emotions],
    }
