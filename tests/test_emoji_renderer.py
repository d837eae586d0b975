import math
import os

import pytest
from PIL import Image  # type: ignore

from faceswap.emoji_renderer import EMOJI_PADDING, EmojiAssetRenderer, emoji_size
from faceswap.errors import AssetWriteError, CompositeError, RenderError
from faceswap.models import BoundingBox, EmojiCategory
from faceswap.temp_resources import TempResourceTracker


def _box(left=0.0, top=0.0, width=0.5, height=0.5):
    return BoundingBox(left=left, top=top, width=width, height=height)


def test_emoji_size_adds_padding():
    assert EMOJI_PADDING == 10
    assert emoji_size(_box(width=0.5, height=0.25), 200, 100) == (110, 35)


def test_emoji_size_clamps_out_of_range_boxes():
    assert emoji_size(_box(width=1.5, height=-0.2), 200, 100) == (210, 10)


def test_emoji_size_rejects_non_finite_values():
    with pytest.raises(CompositeError):
        emoji_size(_box(width=math.nan), 200, 100)
    with pytest.raises(CompositeError):
        emoji_size(_box(height=math.inf), 200, 100)


def test_render_writes_resized_tracked_file(renderer, render_dir):
    scope = TempResourceTracker().begin()
    emoji = renderer.render(EmojiCategory.SAD, 110, 35, scope)

    assert emoji.category is EmojiCategory.SAD
    assert (emoji.width, emoji.height) == (110, 35)
    assert os.path.dirname(emoji.path) == str(render_dir)
    assert scope.remaining == [emoji.path]
    with Image.open(emoji.path) as img:
        assert img.size == (110, 35)
        assert img.mode == "RGBA"

    scope.release_all()
    assert not os.path.exists(emoji.path)


def test_render_uses_unique_names(renderer):
    scope = TempResourceTracker().begin()
    paths = {renderer.render(EmojiCategory.HAPPY, 20, 20, scope).path for _ in range(5)}
    assert len(paths) == 5
    scope.release_all()


def test_missing_asset_is_a_render_error(emoji_dir, render_dir):
    (emoji_dir / "angry.png").unlink()
    renderer = EmojiAssetRenderer(emoji_dir=str(emoji_dir), tmp_dir=str(render_dir))
    scope = TempResourceTracker().begin()

    with pytest.raises(RenderError):
        renderer.render(EmojiCategory.ANGRY, 20, 20, scope)
    assert scope.remaining == []
    assert os.listdir(render_dir) == []


def test_write_failure_is_an_io_error(emoji_dir, tmp_path):
    renderer = EmojiAssetRenderer(emoji_dir=str(emoji_dir), tmp_dir=str(tmp_path / "missing"))
    scope = TempResourceTracker().begin()

    with pytest.raises(AssetWriteError) as excinfo:
        renderer.render(EmojiCategory.CALM, 20, 20, scope)
    assert isinstance(excinfo.value, RenderError)
    assert isinstance(excinfo.value, OSError)
    # Tracked before the write so a partial file would still be removed.
    assert len(scope.remaining) == 1
    assert scope.release_all() == []


def test_non_positive_size_is_rejected(renderer):
    scope = TempResourceTracker().begin()
    with pytest.raises(RenderError):
        renderer.render(EmojiCategory.HAPPY, 0, 10, scope)


@pytest.mark.parametrize("category", list(EmojiCategory))
def test_packaged_library_has_every_category(category, render_dir):
    renderer = EmojiAssetRenderer(tmp_dir=str(render_dir))
    scope = TempResourceTracker().begin()

    emoji = renderer.render(category, 30, 24, scope)

    with Image.open(emoji.path) as img:
        assert img.size == (30, 24)
    scope.release_all()
    assert os.listdir(render_dir) == []
