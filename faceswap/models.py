"""Pydantic models and data schemas for detected faces and emojis.

The field aliases follow the ``FaceDetails`` payload returned by face
detection services such as AWS Rekognition (``BoundingBox``, ``Emotions``,
``Type``, ``Confidence``), so a detector response can be validated
directly with :func:`parse_face_details`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmojiCategory(str, Enum):
    """Closed set of emoji identifiers, one static asset each."""

    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    CONFUSED = "confused"
    DISGUSTED = "disgusted"
    SURPRISED = "surprised"
    CALM = "calm"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "EmojiCategory":
        """Map a detector emotion label (e.g. ``"HAPPY"``) to a category.

        Labels outside the closed set, including ``"UNKNOWN"``, map to
        :attr:`UNKNOWN`.
        """
        try:
            return cls((label or "").lower())
        except ValueError:
            return cls.UNKNOWN


class BoundingBox(BaseModel):
    """Face rectangle as fractions of the image width and height.

    Values are not range-checked here: detectors occasionally report
    boxes that spill past the image edge, and the pixel math downstream
    clamps them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    width: float = Field(alias="Width")
    height: float = Field(alias="Height")
    left: float = Field(alias="Left")
    top: float = Field(alias="Top")


class EmotionScore(BaseModel):
    """One detected emotion label and its confidence in [0, 1]."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: str = Field(alias="Type")
    confidence: float = Field(alias="Confidence", ge=0.0, le=1.0)


class DetectedFace(BaseModel):
    """A face found in an image, with emotion scores in detector order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bounding_box: BoundingBox = Field(alias="BoundingBox")
    emotions: tuple[EmotionScore, ...] = Field(default=(), alias="Emotions")

    @field_validator("emotions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value


@dataclass(frozen=True)
class RenderedEmoji:
    """An emoji resized for one face and written to a transient file."""

    category: EmojiCategory
    width: int
    height: int
    path: str


def _normalise_emotions(emotions: list) -> list:
    # Rekognition reports percentages; a face is rescaled as a whole so
    # ties between its scores survive.
    scores = [e.get("Confidence", e.get("confidence")) or 0.0 for e in emotions]
    scale = 100.0 if any(s > 1.0 for s in scores) else 1.0
    return [
        {"Type": e.get("Type", e.get("category")), "Confidence": s / scale}
        for e, s in zip(emotions, scores)
    ]


def parse_face_details(payload: Any) -> List[DetectedFace]:
    """Validate a detector payload into an ordered list of faces.

    Accepts either a mapping with a ``FaceDetails`` key or the bare list
    of face entries. Confidences expressed in percent are scaled to
    [0, 1]; detection order is preserved.

    Raises:
        pydantic.ValidationError: If an entry does not match the
            expected shape.
    """
    if isinstance(payload, dict):
        payload = payload.get("FaceDetails") or []
    faces: List[DetectedFace] = []
    for entry in payload:
        emotions = entry.get("Emotions") or entry.get("emotions") or []
        entry = {**entry, "Emotions": _normalise_emotions(emotions)}
        entry.pop("emotions", None)
        faces.append(DetectedFace.model_validate(entry))
    return faces
