"""Face detection collaborators.

The pipeline only needs an object with a ``detect(key, image_bytes)``
method returning :class:`~faceswap.models.DetectedFace` values in
detection order. ``GeminiFaceDetector`` implements it on top of a Vertex
AI Gemini model that is asked to answer in the Rekognition
``FaceDetails`` JSON shape.
"""

from __future__ import annotations

import json
import logging
import mimetypes
import re
from typing import Any, List, Optional, Protocol

from pydantic import ValidationError

from faceswap.errors import DetectionError
from faceswap.models import DetectedFace, parse_face_details

logger = logging.getLogger(__name__)

DETECTION_PROMPT = """
You are a face detection service. Find every human face in the attached image.

For each face return its bounding box as fractions of the image width and height
(Left, Top, Width, Height, each between 0 and 1) and a confidence between 0 and 100
for each of these emotions: HAPPY, SAD, ANGRY, CONFUSED, DISGUSTED, SURPRISED, CALM.

Format your response as a valid JSON object with a single key "FaceDetails", an array
ordered from left to right, where each entry looks like:
{"BoundingBox": {"Left": 0.1, "Top": 0.2, "Width": 0.3, "Height": 0.4},
 "Emotions": [{"Type": "HAPPY", "Confidence": 97.5}]}
Return {"FaceDetails": []} when there are no faces. Do not include any text before or after the JSON object.
"""


class FaceDetector(Protocol):
    def detect(self, key: str, image_bytes: bytes) -> List[DetectedFace]:
        ...


def parse_detection_text(raw_text: str) -> List[DetectedFace]:
    """Extract and validate the JSON object embedded in a model reply.

    Raises:
        DetectionError: If no valid ``FaceDetails`` object is found.
    """
    json_match = re.search(r"\{.*\}", raw_text or "", re.DOTALL)
    if not json_match:
        raise DetectionError("Face detector did not return valid JSON.")
    try:
        payload = json.loads(json_match.group(0))
        return parse_face_details(payload)
    except (json.JSONDecodeError, ValidationError, AttributeError, TypeError) as exc:
        raise DetectionError(f"Could not parse face detector response: {exc}") from exc


class GeminiFaceDetector:
    """Detect faces and emotions with a Gemini model on Vertex AI.

    Args:
        project_id: Google Cloud project. Required unless ``model`` is given.
        location: Vertex AI region.
        model_name: Gemini model to query.
        model: Pre-built model object exposing ``generate_content``.
    """

    def __init__(
        self,
        project_id: str = "",
        location: str = "us-central1",
        model_name: str = "gemini-2.5-pro",
        model: Optional[Any] = None,
    ) -> None:
        self.project_id = project_id
        self.location = location
        self.model_name = model_name
        self._model = model

    def _ensure_model(self) -> Any:
        if self._model is None:
            if not self.project_id:
                raise RuntimeError("GOOGLE_CLOUD_PROJECT not set")
            import vertexai
            from vertexai.generative_models import GenerativeModel

            vertexai.init(project=self.project_id, location=self.location)
            self._model = GenerativeModel(self.model_name)
        return self._model

    def _image_part(self, key: str, image_bytes: bytes) -> Any:
        from vertexai.generative_models import Part

        mime_type = mimetypes.guess_type(key)[0] or "image/jpeg"
        return Part.from_data(data=image_bytes, mime_type=mime_type)

    def detect(self, key: str, image_bytes: bytes) -> List[DetectedFace]:
        model = self._ensure_model()
        logger.info("Detecting faces on %s", key)
        response = model.generate_content([self._image_part(key, image_bytes), DETECTION_PROMPT])
        faces = parse_detection_text(response.text)
        logger.info("Detected %d face(s) on %s", len(faces), key)
        return faces
