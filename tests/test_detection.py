import pytest

from faceswap.detection import GeminiFaceDetector, parse_detection_text
from faceswap.errors import DetectionError


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    def __init__(self, text):
        self.text = text
        self.requests = []

    def generate_content(self, contents):
        self.requests.append(contents)
        return FakeResponse(self.text)


REPLY = """Here you go:
```json
{"FaceDetails": [
  {"BoundingBox": {"Left": 0.1, "Top": 0.2, "Width": 0.3, "Height": 0.4},
   "Emotions": [{"Type": "HAPPY", "Confidence": 91.0}, {"Type": "CALM", "Confidence": 5.0}]},
  {"BoundingBox": {"Left": 0.6, "Top": 0.2, "Width": 0.2, "Height": 0.3}, "Emotions": []}
]}
```"""


def test_parse_detection_text_extracts_embedded_json():
    faces = parse_detection_text(REPLY)
    assert len(faces) == 2
    assert faces[0].bounding_box.top == 0.2
    assert faces[0].emotions[0].confidence == pytest.approx(0.91)
    assert faces[1].emotions == ()


@pytest.mark.parametrize("text", ["no json here", "{not json}", '{"FaceDetails": [{"Emotions": []}]}', ""])
def test_parse_detection_text_errors(text):
    with pytest.raises(DetectionError):
        parse_detection_text(text)


def test_gemini_detector_sends_image_and_prompt():
    model = FakeModel(REPLY)
    detector = GeminiFaceDetector(model=model)
    detector._image_part = lambda key, data: ("part", key, data)

    faces = detector.detect("photos/a.png", b"bytes")

    assert len(faces) == 2
    (contents,) = model.requests
    assert contents[0] == ("part", "photos/a.png", b"bytes")
    assert "FaceDetails" in contents[1]


def test_gemini_detector_requires_a_project():
    with pytest.raises(RuntimeError):
        GeminiFaceDetector(project_id="").detect("a.jpg", b"")
